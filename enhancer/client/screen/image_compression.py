# coding: utf-8
"""
截图 JPEG 压缩

预设（质量, 最大边长）：
- ultra_high: 0.95, 2048
- high:       0.85, 1920
- balanced:   0.75, 1600
- efficient:  0.60, 1200

配置了 max_size_bytes 时，若按预设压缩后仍超出，则二分查找满足大小的最高质量。
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Dict, Optional, Union

from PIL import Image

from enhancer.settings.settings_models import CompressionSettings
from . import logger


@dataclass(frozen=True)
class CompressionPreset:
    name: str
    quality: float
    max_dimension: int
    description: str = ''


PRESETS: Dict[str, CompressionPreset] = {
    'ultra_high': CompressionPreset('ultra_high', 0.95, 2048, 'Minimal compression, best quality'),
    'high': CompressionPreset('high', 0.85, 1920, 'Good balance of quality and size'),
    'balanced': CompressionPreset('balanced', 0.75, 1600, 'Good compromise for most use cases'),
    'efficient': CompressionPreset('efficient', 0.60, 1200, 'Optimized for API cost reduction'),
}
DEFAULT_PRESET = 'balanced'

MIN_QUALITY = 0.01
SEARCH_TOLERANCE = 0.01


@dataclass
class CompressionResult:
    data: bytes
    quality: float
    original_size: int

    @property
    def compressed_size(self) -> int:
        return len(self.data)

    @property
    def ratio(self) -> float:
        return self.compressed_size / self.original_size if self.original_size else 1.0


def get_preset(name: str) -> CompressionPreset:
    preset = PRESETS.get(name)
    if preset is None:
        logger.warning(f"未知的压缩预设 '{name}'，使用 {DEFAULT_PRESET}")
        preset = PRESETS[DEFAULT_PRESET]
    return preset


class ImageCompressor:
    """按 CompressionSettings 压缩图片为 JPEG"""

    def __init__(self, settings: Optional[CompressionSettings] = None):
        self.settings = settings or CompressionSettings()

    @property
    def preset(self) -> CompressionPreset:
        return get_preset(self.settings.preset)

    @property
    def quality(self) -> float:
        if self.settings.custom_quality is not None:
            return self.settings.custom_quality
        return self.preset.quality

    def compress(self, image_data: Union[bytes, Image.Image]) -> CompressionResult:
        """
        压缩图片

        Args:
            image_data: 图片字节（任意 Pillow 支持的格式）或 PIL Image

        Returns:
            CompressionResult；未启用压缩时只转换为最高质量 JPEG，不缩放
        """
        image, original_size = self._open(image_data)

        if not self.settings.enabled:
            return self._encode(image, 1.0, original_size)

        image = self._resize(image, self.preset.max_dimension)
        result = self._encode(image, self.quality, original_size)

        max_size = self.settings.max_size_bytes
        if max_size and result.compressed_size > max_size:
            logger.debug(f"压缩后 {result.compressed_size} 字节，超过上限 {max_size}，降低质量")
            result = self.optimize_for_target_size(image, max_size, original_size)

        logger.debug(
            f"截图压缩: {original_size} → {result.compressed_size} 字节 ({result.ratio:.0%}), "
            f"质量 {result.quality:.2f}, 尺寸 {image.size[0]}x{image.size[1]}"
        )
        return result

    def optimize_for_target_size(self, image: Image.Image, target_size: int, original_size: int = 0) -> CompressionResult:
        """
        二分查找不超过 target_size 的最高质量

        达不到目标时返回最低质量的结果
        """
        best = self._encode(image, 1.0, original_size)
        if best.compressed_size <= target_size:
            return best

        low, high = MIN_QUALITY, 1.0
        found = None
        while high - low > SEARCH_TOLERANCE:
            middle = (low + high) / 2
            result = self._encode(image, middle, original_size)
            if result.compressed_size <= target_size:
                found = result
                low = middle
            else:
                high = middle

        if found is not None:
            return found
        return self._encode(image, MIN_QUALITY, original_size)

    # ------------------------------------------------------------------

    @staticmethod
    def _open(image_data):
        if isinstance(image_data, Image.Image):
            return image_data, image_data.width * image_data.height * 4
        image = Image.open(io.BytesIO(image_data))
        image.load()
        return image, len(image_data)

    @staticmethod
    def _resize(image: Image.Image, max_dimension: int) -> Image.Image:
        if image.width <= max_dimension and image.height <= max_dimension:
            return image
        image = image.copy()
        image.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)
        return image

    @staticmethod
    def _encode(image: Image.Image, quality: float, original_size: int) -> CompressionResult:
        # JPEG 不支持透明通道
        if image.mode != 'RGB':
            image = image.convert('RGB')

        quality = max(MIN_QUALITY, min(1.0, quality))
        buffer = io.BytesIO()
        image.save(buffer, 'JPEG', quality=max(1, int(round(quality * 100))), optimize=True)
        return CompressionResult(data=buffer.getvalue(), quality=quality, original_size=original_size)
