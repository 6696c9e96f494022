# coding: utf-8
"""
快捷键子模块

- ShortcutRegistry: 绑定 ↔ 全局快捷键，冲突检测与触发转发
- PynputHotkeyBackend: pynput GlobalHotKeys 实现的快捷键后端
"""

from .. import logger
from enhancer.client.shortcut.hotkey_backend import PynputHotkeyBackend, to_pynput_combo
from enhancer.client.shortcut.shortcut_registry import ShortcutRegistry

__all__ = [
    'logger',
    'PynputHotkeyBackend',
    'to_pynput_combo',
    'ShortcutRegistry',
]
