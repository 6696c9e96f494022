"""
处理开始 / 结束通知

状态显示等界面组件通过 add_listener 订阅；监听器抛出的异常只记录日志，不影响处理流程。
"""
from typing import Callable, List, Optional, Tuple

from . import logger


StartedCallback = Callable[[object], None]
FinishedCallback = Callable[[object, object], None]


class ProcessingEvents:
    """处理事件分发"""

    def __init__(self):
        self._listeners: List[Tuple[Optional[StartedCallback], Optional[FinishedCallback]]] = []

    def add_listener(self, on_started: StartedCallback = None, on_finished: FinishedCallback = None):
        """
        注册监听器

        Args:
            on_started: 开始时回调，参数为 binding
            on_finished: 结束时回调，参数为 binding 与 ProcessingResult
        """
        self._listeners.append((on_started, on_finished))

    def emit_started(self, binding):
        logger.debug(f"处理开始: {binding.name}")
        for on_started, _ in self._listeners:
            if on_started is not None:
                self._call(on_started, binding)

    def emit_finished(self, binding, result):
        logger.debug(f"处理结束: {binding.name}, 成功={result.success}")
        for _, on_finished in self._listeners:
            if on_finished is not None:
                self._call(on_finished, binding, result)

    @staticmethod
    def _call(callback, *args):
        try:
            callback(*args)
        except Exception as e:
            logger.warning(f"处理事件监听器出错: {e}", exc_info=True)
