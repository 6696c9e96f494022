# coding: utf-8
"""
处理状态显示

订阅 ProcessingEvents：开始时显示动画，结束时停止并打印结果摘要。
"""

from __future__ import annotations

from typing import Optional

from rich.console import Console

from enhancer.client.ui.console import console as default_console
from enhancer.tools.my_status import Status


class StatusIndicator:
    """终端状态动画"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or default_console
        self.status = Status('', console=self.console)

    def attach(self, events) -> None:
        events.add_listener(self.on_started, self.on_finished)

    def on_started(self, binding) -> None:
        self.status.acquire(f"[cyan]{binding.name}[/cyan] 处理中...")

    def on_finished(self, binding, result) -> None:
        self.status.release()
        if result.success:
            self.console.print(f"[green]✓[/green] {binding.name}: 已替换 {len(result.final_text)} 字符")
        else:
            self.console.print(f"[red]✗[/red] {binding.name}: {result.error_kind}")
