# coding: utf-8
"""
快捷键注册表

把配置中的 Binding 注册到操作系统全局快捷键，并把触发事件映射回 Binding。

- reload(): 在后端的 batch() 中注销全部快捷键后按声明顺序重新注册；按键组合重复的绑定跳过（先声明者生效），
  注册失败的绑定跳过，不中断整个重载
- 快捷键标识按位置分配：第 n 个成功注册的绑定标识为 n
- on_fire(): 按标识找到注册时的 Binding 并调用触发回调
"""

from __future__ import annotations

import functools
import threading
from typing import Callable, List, Optional

from enhancer.llm.llm_interfaces import HotkeyBackend
from enhancer.settings.settings_models import Binding
from . import logger


class ShortcutRegistry:
    """快捷键注册表"""

    def __init__(self, backend: HotkeyBackend, on_fire: Callable[[Binding], None]):
        """
        Args:
            backend: 操作系统快捷键后端
            on_fire: 绑定被触发时的回调
        """
        self.backend = backend
        self._on_fire = on_fire
        self._active: List[Binding] = []
        self._lock = threading.Lock()

    @property
    def active_bindings(self) -> List[Binding]:
        with self._lock:
            return list(self._active)

    def reload(self, bindings: List[Binding]) -> List[Binding]:
        """
        重建快捷键表

        Args:
            bindings: 配置中的绑定，按声明顺序

        Returns:
            成功注册的绑定
        """
        with self._lock, self.backend.batch():
            for hotkey_id in range(1, len(self._active) + 1):
                try:
                    self.backend.unregister(hotkey_id)
                except Exception as e:
                    logger.warning(f"注销快捷键 #{hotkey_id} 失败: {e}")
            self._active = []

            registered = {}
            for binding in bindings:
                existing = registered.get(binding.combo)
                if existing is not None:
                    logger.warning(
                        f"快捷键冲突: '{binding.name}' 与 '{existing.name}' 都使用 "
                        f"{binding.describe_combo()}，跳过 '{binding.name}'"
                    )
                    continue

                hotkey_id = len(self._active) + 1
                try:
                    self.backend.register(
                        hotkey_id,
                        binding.key,
                        binding.modifiers,
                        functools.partial(self.on_fire, hotkey_id),
                    )
                except Exception as e:
                    logger.error(f"注册快捷键 '{binding.name}' ({binding.describe_combo()}) 失败: {e}")
                    continue

                registered[binding.combo] = binding
                self._active.append(binding)

            active = list(self._active)

        logger.info(f"快捷键已重新加载: {len(active)}/{len(bindings)} 个生效")
        return active

    def on_fire(self, hotkey_id: int) -> None:
        """操作系统报告快捷键被触发"""
        binding = self._lookup(hotkey_id)
        if binding is None:
            logger.warning(f"收到未知的快捷键标识: {hotkey_id}")
            return

        logger.info(f"快捷键触发: {binding.name} ({binding.describe_combo()})")
        self._on_fire(binding)

    def attach(self, store) -> None:
        """订阅配置变更，每次变更都重建快捷键表"""
        store.add_listener(lambda configuration: self.reload(configuration.bindings))

    def _lookup(self, hotkey_id: int) -> Optional[Binding]:
        with self._lock:
            if 1 <= hotkey_id <= len(self._active):
                return self._active[hotkey_id - 1]
            return None
