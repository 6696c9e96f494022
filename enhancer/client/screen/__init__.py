# coding: utf-8
"""
截图子模块

截取当前显示器并压缩为 JPEG，作为模型的屏幕上下文。
"""

from .. import logger
from enhancer.client.screen.image_compression import (
    CompressionPreset,
    CompressionResult,
    ImageCompressor,
    PRESETS,
    get_preset,
)
from enhancer.client.screen.screen_capture import ScreenCapture, pick_monitor

__all__ = [
    'logger',
    'CompressionPreset',
    'CompressionResult',
    'ImageCompressor',
    'PRESETS',
    'get_preset',
    'ScreenCapture',
    'pick_monitor',
]
