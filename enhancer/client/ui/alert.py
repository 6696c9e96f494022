# coding: utf-8
"""
错误提示

AlertPort 的终端实现：用 Rich Panel 显示标题、说明，需要修改设置时附带配置文件路径。
"""

from __future__ import annotations

from typing import Optional

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from enhancer.client.ui.console import console as default_console
from enhancer.llm.llm_types import Alert
from . import logger


class ConsoleAlert:
    """在终端显示 Alert"""

    def __init__(self, console: Optional[Console] = None, settings_path: str = '', show_details: bool = False):
        """
        Args:
            console: 输出用的 Console
            settings_path: 配置文件路径，需要修改设置时显示
            show_details: 是否显示技术细节
        """
        self.console = console or default_console
        self.settings_path = settings_path
        self.show_details = show_details

    def render(self, alert: Alert) -> Panel:
        parts = [Text(alert.message)]
        if alert.needs_settings and self.settings_path:
            parts.append(Text(f"\nSettings: {self.settings_path}", style='alert.settings'))
        if self.show_details and alert.details:
            parts.append(Text(f"\n{alert.details}", style='alert.details'))
        return Panel(Group(*parts), title=Text(alert.title, style='alert.title'), expand=False)

    def show(self, alert: Alert) -> None:
        logger.debug(f"显示提示: {alert.title}")
        self.console.print(self.render(alert))
