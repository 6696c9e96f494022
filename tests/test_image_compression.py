import io
import os

import pytest
from PIL import Image

from enhancer.client.screen.image_compression import PRESETS, ImageCompressor, get_preset
from enhancer.client.screen.screen_capture import pick_monitor
from enhancer.settings.settings_models import CompressionSettings


def png_bytes(width, height, mode='RGB'):
    image = Image.new(mode, (width, height), (200, 30, 30, 128) if mode == 'RGBA' else (200, 30, 30))
    buffer = io.BytesIO()
    image.save(buffer, 'PNG')
    return buffer.getvalue()


def noise_image(width=320, height=240):
    return Image.frombytes('RGB', (width, height), os.urandom(width * height * 3))


def decoded(data):
    return Image.open(io.BytesIO(data))


# --- Presets ---

class TestPresets:

    @pytest.mark.parametrize('name, quality, max_dimension', [
        ('ultra_high', 0.95, 2048),
        ('high', 0.85, 1920),
        ('balanced', 0.75, 1600),
        ('efficient', 0.60, 1200),
    ])
    def test_table(self, name, quality, max_dimension):
        assert PRESETS[name].quality == quality
        assert PRESETS[name].max_dimension == max_dimension

    def test_unknown_preset_falls_back_to_balanced(self):
        assert get_preset('ludicrous') is PRESETS['balanced']


# --- Compression ---

class TestImageCompressor:

    def test_downscales_to_preset_bound(self):
        compressor = ImageCompressor(CompressionSettings(preset='efficient'))

        result = compressor.compress(png_bytes(2400, 1600))

        image = decoded(result.data)
        assert image.format == 'JPEG'
        assert image.size == (1200, 800)
        assert result.quality == pytest.approx(0.60)

    def test_small_image_is_not_upscaled(self):
        result = ImageCompressor(CompressionSettings(preset='balanced')).compress(png_bytes(640, 480))
        assert decoded(result.data).size == (640, 480)

    def test_transparent_image_becomes_rgb_jpeg(self):
        result = ImageCompressor().compress(png_bytes(100, 100, mode='RGBA'))
        image = decoded(result.data)
        assert image.format == 'JPEG'
        assert image.mode == 'RGB'

    def test_disabled_compression_keeps_size_at_full_quality(self):
        compressor = ImageCompressor(CompressionSettings(preset='efficient', enabled=False))

        result = compressor.compress(png_bytes(2400, 1600))

        assert decoded(result.data).size == (2400, 1600)
        assert result.quality == 1.0

    def test_custom_quality_overrides_preset(self):
        compressor = ImageCompressor(CompressionSettings(preset='high', custom_quality=0.4))
        assert compressor.compress(png_bytes(50, 50)).quality == pytest.approx(0.4)

    def test_accepts_pil_image(self):
        result = ImageCompressor().compress(noise_image(64, 64))
        assert result.original_size == 64 * 64 * 4
        assert result.compressed_size > 0


class TestOptimizeForTargetSize:

    def test_finds_quality_under_target(self):
        image = noise_image()
        compressor = ImageCompressor()
        target = ImageCompressor._encode(image, 0.3, 0).compressed_size

        result = compressor.optimize_for_target_size(image, target)

        assert result.compressed_size <= target
        assert result.quality < 1.0

    def test_returns_full_quality_when_already_small(self):
        image = noise_image(16, 16)
        result = ImageCompressor().optimize_for_target_size(image, 10_000_000)
        assert result.quality == 1.0

    def test_max_size_setting_triggers_search(self):
        image = noise_image()
        target = ImageCompressor._encode(image, 0.2, 0).compressed_size
        compressor = ImageCompressor(CompressionSettings(preset='ultra_high', max_size_bytes=target))

        result = compressor.compress(image)

        assert result.compressed_size <= target
        assert result.quality < 0.95


# --- Monitor selection ---

class TestPickMonitor:

    monitors = [
        {'left': 0, 'top': 0, 'width': 3840, 'height': 1080},
        {'left': 0, 'top': 0, 'width': 1920, 'height': 1080},
        {'left': 1920, 'top': 0, 'width': 1920, 'height': 1080},
    ]

    def test_monitor_under_pointer(self):
        assert pick_monitor(self.monitors, (2500, 500)) is self.monitors[2]

    def test_falls_back_to_primary(self):
        assert pick_monitor(self.monitors, None) is self.monitors[1]
        assert pick_monitor(self.monitors, (-50, 5000)) is self.monitors[1]
