# coding: utf-8
"""
选中文字子模块

通过剪贴板和模拟按键读取、替换当前选中的文字。
"""

from .. import logger
from enhancer.client.selection.text_selection import ClipboardTextSelection

__all__ = [
    'logger',
    'ClipboardTextSelection',
]
