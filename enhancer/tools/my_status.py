# coding: utf-8
"""
Rich Status 扩展模块

提供可重入的 Status：多个处理同时进行时，动画在第一个开始时启动、最后一个结束时停止。
"""

import threading

from rich.console import Console, RenderableType
from rich.status import Status as RichStatus


class Status(RichStatus):
    """
    可重入的 Rich Status

    Attributes:
        active: 当前进行中的任务数
    """

    def __init__(self, status: RenderableType, *, console: Console = None, spinner: str = "dots"):
        """
        Args:
            status: 要显示的状态文本
            console: 输出用的 Console
            spinner: 动画类型名称
        """
        super().__init__(status, console=console, spinner=spinner)
        self.active = 0
        self._count_lock = threading.Lock()

    def acquire(self, text: RenderableType = None) -> None:
        """登记一个任务，必要时启动动画"""
        with self._count_lock:
            self.active += 1
            if text is not None:
                self.update(text)
            if self.active == 1:
                self.start()

    def release(self) -> None:
        """结束一个任务，全部结束后停止动画"""
        with self._count_lock:
            if self.active == 0:
                return
            self.active -= 1
            if self.active == 0:
                self.stop()
