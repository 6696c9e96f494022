# coding: utf-8
"""
用户界面子模块

- console: 全局 Rich console
- ConsoleAlert: 错误提示
- StatusIndicator: 处理状态动画
"""

from .. import logger
from enhancer.client.ui.console import console
from enhancer.client.ui.alert import ConsoleAlert
from enhancer.client.ui.status_indicator import StatusIndicator

__all__ = [
    'logger',
    'console',
    'ConsoleAlert',
    'StatusIndicator',
]
