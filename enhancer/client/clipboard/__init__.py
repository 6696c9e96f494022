# coding: utf-8
"""
剪贴板子模块

读写剪贴板、临时保存剪贴板内容，以及模拟复制 / 粘贴快捷键。
"""

from .. import logger
from enhancer.client.clipboard.clipboard import (
    read_text,
    write_text,
    preserved,
    copy_selection,
    paste_clipboard,
)

__all__ = [
    'logger',
    'read_text',
    'write_text',
    'preserved',
    'copy_selection',
    'paste_clipboard',
]
