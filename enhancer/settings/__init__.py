# coding: utf-8
"""
配置子模块

提供用户配置的数据模型、读写存储和文件监控。
"""

from enhancer.logger import get_logger

logger = get_logger('enhancer')

from .settings_models import (
    Binding,
    ProviderSettings,
    CompressionSettings,
    AppConfiguration,
    DEFAULT_MODELS,
    normalize_key,
    normalize_modifiers,
)
from .settings_store import ConfigurationStore
from .settings_watcher import SettingsFileWatcher

__all__ = [
    'logger',
    'Binding',
    'ProviderSettings',
    'CompressionSettings',
    'AppConfiguration',
    'DEFAULT_MODELS',
    'normalize_key',
    'normalize_modifiers',
    'ConfigurationStore',
    'SettingsFileWatcher',
]
