# coding: utf-8
"""
全局快捷键后端

使用 pynput GlobalHotKeys 监听全局快捷键。快捷键按 hotkey_id 注册，
触发时在监听线程中调用回调；注册表变化后重启监听器，
batch() 内的多次变化合并为一次重启。

使用示例:
    backend = PynputHotkeyBackend()
    backend.register(1, '1', ('ctrl', 'alt'), lambda: print('fired'))
    backend.start()
"""
from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Callable, Dict, Optional, Tuple

from pynput import keyboard

from . import logger


# 需要用尖括号包裹的按键名称
NAMED_KEY_ALIASES = {
    'return': 'enter',
    'escape': 'esc',
    'del': 'delete',
    'spacebar': 'space',
    'pgup': 'page_up',
    'pgdn': 'page_down',
}


def to_pynput_combo(key: str, modifiers: Tuple[str, ...]) -> str:
    """
    将按键和修饰键转换为 pynput 快捷键字符串

    Args:
        key: 按键名称，如 '1'、'f5'、'space'
        modifiers: 规范化的修饰键，如 ('ctrl', 'alt')

    Returns:
        如 '<ctrl>+<alt>+1'

    Raises:
        ValueError: 按键名称无效
    """
    key = NAMED_KEY_ALIASES.get(key, key)
    if len(key) == 1:
        key_part = key
    elif key in keyboard.Key.__members__:
        key_part = f'<{key}>'
    else:
        raise ValueError(f"无效的按键名称: {key}")

    combo = '+'.join([f'<{modifier}>' for modifier in modifiers] + [key_part])
    keyboard.HotKey.parse(combo)
    return combo


class PynputHotkeyBackend:
    """HotkeyBackend 的 pynput 实现"""

    def __init__(self):
        self._hotkeys: Dict[int, Tuple[str, Callable[[], None]]] = {}
        self._listener: Optional[keyboard.GlobalHotKeys] = None
        self._running = False
        self._batch_depth = 0
        self._lock = threading.Lock()

    def register(self, hotkey_id: int, key: str, modifiers: Tuple[str, ...], callback: Callable[[], None]) -> None:
        """
        注册全局快捷键

        Args:
            hotkey_id: 快捷键标识
            key: 按键名称
            modifiers: 修饰键
            callback: 按下快捷键时的回调，在监听线程中调用

        Raises:
            ValueError: 按键无效或与已注册的快捷键重复
        """
        combo = to_pynput_combo(key, modifiers)
        with self._lock:
            if any(existing == combo for existing, _ in self._hotkeys.values()):
                raise ValueError(f"快捷键已被注册: {combo}")
            self._hotkeys[hotkey_id] = (combo, callback)
            logger.debug(f"注册全局快捷键 #{hotkey_id}: {combo}")
            if self._running and not self._batch_depth:
                self._restart_listener()

    def unregister(self, hotkey_id: int) -> None:
        """注销全局快捷键"""
        with self._lock:
            entry = self._hotkeys.pop(hotkey_id, None)
            if entry is None:
                return
            logger.debug(f"注销全局快捷键 #{hotkey_id}: {entry[0]}")
            if self._running and not self._batch_depth:
                self._restart_listener()

    @contextmanager
    def batch(self):
        """批量注册 / 注销，退出时只重启一次监听器"""
        with self._lock:
            self._batch_depth += 1
        try:
            yield self
        finally:
            with self._lock:
                self._batch_depth -= 1
                if self._running and not self._batch_depth:
                    self._restart_listener()

    def start(self) -> None:
        """启动快捷键监听"""
        with self._lock:
            if self._running:
                logger.debug("快捷键监听已在运行")
                return
            self._running = True
            self._start_listener()
        logger.info(f"全局快捷键监听已启动，注册了 {len(self._hotkeys)} 个快捷键")

    def stop(self) -> None:
        """停止快捷键监听"""
        with self._lock:
            self._running = False
            self._stop_listener()
        logger.info("全局快捷键监听已停止")

    def _start_listener(self) -> None:
        if not self._hotkeys:
            logger.warning("没有注册的快捷键，暂不启动监听器")
            return

        mapping = {combo: callback for combo, callback in self._hotkeys.values()}
        try:
            self._listener = keyboard.GlobalHotKeys(mapping)
            self._listener.start()
            logger.debug(f"GlobalHotKeys 监听器已启动: {list(mapping)}")
        except Exception as e:
            logger.error(f"启动 GlobalHotKeys 监听器失败: {e}")
            self._listener = None

    def _stop_listener(self) -> None:
        if self._listener:
            try:
                self._listener.stop()
            except Exception as e:
                logger.warning(f"停止 GlobalHotKeys 监听器时出错: {e}")
            self._listener = None

    def _restart_listener(self) -> None:
        """重启监听器（用于更新快捷键后）"""
        self._stop_listener()
        self._start_listener()
