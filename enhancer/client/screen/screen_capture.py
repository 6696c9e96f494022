# coding: utf-8
"""
屏幕截图

使用 mss 截取鼠标所在的显示器（找不到时使用主显示器），再交给 ImageCompressor 压缩为 JPEG。
截图与压缩都是阻塞操作，在线程中执行。
"""

from __future__ import annotations

import asyncio
from typing import Callable, Optional, Tuple

import mss
import mss.tools
from pynput import mouse

from enhancer.client.screen.image_compression import ImageCompressor
from . import logger


def pointer_position() -> Optional[Tuple[int, int]]:
    try:
        x, y = mouse.Controller().position
        return int(x), int(y)
    except Exception as e:
        logger.debug(f"获取鼠标位置失败: {e}")
        return None


def pick_monitor(monitors, position: Optional[Tuple[int, int]]) -> dict:
    """
    选择包含鼠标位置的显示器

    Args:
        monitors: mss 的显示器列表，下标 0 为所有显示器的合并区域
        position: 鼠标坐标

    Returns:
        显示器区域字典
    """
    physical = monitors[1:] or monitors
    if position is not None:
        x, y = position
        for monitor in physical:
            if (monitor['left'] <= x < monitor['left'] + monitor['width']
                    and monitor['top'] <= y < monitor['top'] + monitor['height']):
                return monitor
    return physical[0]


class ScreenCapture:
    """ScreenCapturePort 的 mss 实现"""

    def __init__(self, compressor_factory: Callable[[], ImageCompressor] = ImageCompressor):
        """
        Args:
            compressor_factory: 返回 ImageCompressor 的函数，每次压缩时调用以读取最新的压缩设置
        """
        self.compressor_factory = compressor_factory

    def capture_sync(self) -> bytes:
        """截取当前显示器，返回 PNG 数据"""
        with mss.mss() as sct:
            monitor = pick_monitor(sct.monitors, pointer_position())
            shot = sct.grab(monitor)
            png = mss.tools.to_png(shot.rgb, shot.size)
        logger.debug(f"截图完成: {shot.size[0]}x{shot.size[1]}, {len(png)} 字节")
        return png

    def compress_sync(self, image_data: bytes) -> bytes:
        return self.compressor_factory().compress(image_data).data

    async def capture_active_screen(self) -> Optional[bytes]:
        return await asyncio.to_thread(self.capture_sync)

    async def compress(self, image_data: bytes) -> Optional[bytes]:
        return await asyncio.to_thread(self.compress_sync, image_data)
