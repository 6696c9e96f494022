# coding: utf-8

import sys
import asyncio
import platform
from pathlib import Path

import typer
import colorama
from rich.table import Table

from config_enhancer import EnhancerConfig as Config, __version__
from enhancer.logger import setup_logger
from enhancer.settings import ConfigurationStore, SettingsFileWatcher
from enhancer.llm import (
    ClientPool,
    EnhancerException,
    ModelCache,
    ProcessingEvents,
    ProcessingOrchestrator,
    ProviderRegistry,
)
from enhancer.client.permission import AccessibilityPermission
from enhancer.client.screen import ImageCompressor, ScreenCapture
from enhancer.client.selection import ClipboardTextSelection
from enhancer.client.shortcut import PynputHotkeyBackend, ShortcutRegistry
from enhancer.client.ui import ConsoleAlert, StatusIndicator, console


# 确保终端能使用 ANSI 控制字符
colorama.init()

logger = setup_logger('enhancer', level=Config.log_level)

app = typer.Typer(help='TextEnhancer: 选中文字，按下快捷键，由大模型改写后原地替换', add_completion=False)


class Enhancer:
    """组装各组件，管理快捷键监听与配置监控的生命周期"""

    def __init__(self, loop: asyncio.AbstractEventLoop = None):
        self.loop = loop
        self.store = ConfigurationStore()
        self.client_pool = ClientPool()
        self.model_cache = ModelCache(Path(Config.config_dir) / 'cache', Config.model_cache_ttl)
        self.providers = ProviderRegistry(self.store, self.client_pool, self.model_cache)
        self.events = ProcessingEvents()

        self.orchestrator = ProcessingOrchestrator(
            registry=self.providers,
            selection=ClipboardTextSelection(),
            screen=ScreenCapture(lambda: ImageCompressor(self.store.current().compression)),
            alerts=ConsoleAlert(settings_path=str(self.store.path)),
            accessibility=AccessibilityPermission(),
            events=self.events,
        )

        self.backend = PynputHotkeyBackend()
        self.shortcuts = ShortcutRegistry(self.backend, self.dispatch)
        self.watcher = SettingsFileWatcher(self.store.path, self.store.reload) if Config.watch_config else None

        if Config.show_status:
            StatusIndicator().attach(self.events)

    def dispatch(self, binding):
        """在快捷键监听线程中调用：把处理任务交给事件循环后立即返回"""
        asyncio.run_coroutine_threadsafe(self.orchestrator.run(binding), self.loop)

    def on_configuration_changed(self, configuration):
        self.client_pool.clear()
        show_bindings(self.shortcuts.active_bindings)

    def start(self):
        self.shortcuts.reload(self.store.current().bindings)
        self.shortcuts.attach(self.store)
        self.store.add_listener(self.on_configuration_changed)
        self.backend.start()
        if self.watcher:
            self.watcher.start()

    def stop(self):
        self.backend.stop()
        if self.watcher:
            self.watcher.stop()


def show_bindings(bindings):
    table = Table(title='快捷键', show_lines=False)
    table.add_column('按键')
    table.add_column('名称')
    table.add_column('提供商')
    table.add_column('模型')
    table.add_column('截图')
    for binding in bindings:
        screenshot = '仅截图' if binding.screenshot_only else ('附带' if binding.include_screenshot else '')
        table.add_row(binding.describe_combo(), binding.name, binding.provider, binding.model, screenshot)
    console.print(table)


async def main_run():
    enhancer = Enhancer(asyncio.get_running_loop())

    console.print(f'[bold]TextEnhancer {__version__}[/bold]  配置文件: {enhancer.store.path}')
    enhancer.start()
    show_bindings(enhancer.shortcuts.active_bindings)
    console.print('选中文字后按下快捷键即可改写，Ctrl-C 退出')
    logger.info("TextEnhancer 已启动")

    try:
        await asyncio.Event().wait()
    finally:
        enhancer.stop()
        logger.info("TextEnhancer 已退出")


@app.command()
def run():
    """启动快捷键监听"""
    try:
        asyncio.run(main_run())
    except KeyboardInterrupt:
        console.print('再见！')


@app.command()
def models(
    provider: str = typer.Argument(..., help='提供商：claude 或 openai'),
    refresh: bool = typer.Option(False, '--refresh', help='忽略缓存，重新获取'),
):
    """列出提供商最近发布的模型"""
    store = ConfigurationStore()
    cache = ModelCache(Path(Config.config_dir) / 'cache', Config.model_cache_ttl)
    registry = ProviderRegistry(store, ClientPool(), cache)

    try:
        descriptors = asyncio.run(registry.get(provider).list_models(use_cache=not refresh))
    except EnhancerException as e:
        logger.warning(f"获取模型列表失败: {e.technical_details}")
        console.print(f'[red]{e.title}[/red]\n{e.user_message}')
        raise typer.Exit(1)

    table = Table(title=f'{provider} 模型')
    table.add_column('ID')
    table.add_column('名称')
    table.add_column('发布时间')
    for descriptor in descriptors:
        created = descriptor.created_at.strftime('%Y-%m-%d') if descriptor.created_at else '未知'
        table.add_row(descriptor.id, descriptor.display_name, created)
    console.print(table)


@app.command()
def check():
    """检查权限与配置"""
    permission = AccessibilityPermission()
    trusted = permission.is_trusted()
    console.print(f'系统: {platform.system()}  辅助功能权限: {"[green]已授权[/green]" if trusted else "[red]未授权[/red]"}')

    store = ConfigurationStore()
    configuration = store.current()
    for provider_id, settings in configuration.providers.items():
        state = '启用' if settings.enabled else '未启用'
        key = '已配置' if settings.api_key.strip() else '[yellow]未配置[/yellow]'
        console.print(f'{provider_id}: {state}，API Key {key}，默认模型 {settings.model}')

    show_bindings(configuration.bindings)
    if not trusted:
        sys.exit(1)


if __name__ == "__main__":
    app()
