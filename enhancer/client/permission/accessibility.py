# coding: utf-8
"""
辅助功能权限

- macOS: 通过 ApplicationServices 查询 / 请求辅助功能授权（模拟按键与读取选中文字需要）
- Windows: 不需要额外授权
- Linux: 需要图形会话（X11 / Wayland）
"""

import os
import platform

from . import logger


class AccessibilityPermission:
    """AccessibilityPort 的平台实现"""

    def __init__(self, system: str = None):
        self.system = system or platform.system()

    def is_trusted(self) -> bool:
        """当前进程是否可以读取选中文字并模拟按键"""
        if self.system == 'Darwin':
            return self._mac_is_trusted(prompt=False)
        if self.system == 'Linux':
            return bool(os.environ.get('DISPLAY') or os.environ.get('WAYLAND_DISPLAY'))
        return True

    def request(self) -> None:
        """请求授权；macOS 会弹出系统授权对话框，其他平台只记录日志"""
        if self.system == 'Darwin':
            self._mac_is_trusted(prompt=True)
            logger.info("已请求辅助功能授权，请在系统设置中允许")
        else:
            logger.warning(f"{self.system} 上无法自动请求权限，请检查图形会话与输入设备权限")

    @staticmethod
    def _mac_is_trusted(prompt: bool) -> bool:
        # 仅在 macOS 上可用（pyobjc-framework-ApplicationServices）
        import ApplicationServices

        if not prompt:
            return bool(ApplicationServices.AXIsProcessTrusted())

        options = {ApplicationServices.kAXTrustedCheckOptionPrompt: True}
        return bool(ApplicationServices.AXIsProcessTrustedWithOptions(options))
