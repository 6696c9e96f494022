# coding: utf-8
"""
用户配置存储

功能：
1. 读取 config.json（不存在时写入默认配置，损坏时使用默认配置但不覆盖原文件）
2. save() 原子写入并通知监听器
3. reload() 供文件监控调用，内容有变化时通知监听器
"""

from __future__ import annotations

import json
import os
import threading
from pathlib import Path
from typing import Callable, List, Optional

from config_enhancer import EnhancerConfig as Config
from enhancer.settings.settings_models import AppConfiguration
from . import logger


class ConfigurationStore:
    """config.json 的读写与变更通知"""

    def __init__(self, config_dir: Optional[str] = None, file_name: Optional[str] = None):
        """
        Args:
            config_dir: 配置目录，默认使用 EnhancerConfig.config_dir
            file_name: 配置文件名，默认使用 EnhancerConfig.config_file
        """
        self.path = Path(config_dir or Config.config_dir) / (file_name or Config.config_file)
        self._lock = threading.Lock()
        self._listeners: List[Callable[[AppConfiguration], None]] = []
        self._configuration = self._load()

    def current(self) -> AppConfiguration:
        with self._lock:
            return self._configuration

    def add_listener(self, callback: Callable[[AppConfiguration], None]) -> None:
        """注册配置变更回调"""
        self._listeners.append(callback)

    def save(self, configuration: AppConfiguration) -> None:
        """保存配置并通知监听器"""
        configuration.resolve_models()
        self._write(configuration)
        with self._lock:
            self._configuration = configuration
        logger.info(f"配置已保存: {self.path}, 快捷键 {len(configuration.bindings)} 个")
        self._notify(configuration)

    def reload(self) -> bool:
        """
        重新读取配置文件

        Returns:
            配置是否发生变化
        """
        configuration = self._read()
        if configuration is None:
            return False

        with self._lock:
            if configuration.to_dict() == self._configuration.to_dict():
                logger.debug("配置文件内容未变化，跳过重载")
                return False
            self._configuration = configuration

        logger.info(f"配置已重新加载，快捷键 {len(configuration.bindings)} 个")
        self._notify(configuration)
        return True

    # ------------------------------------------------------------------

    def _load(self) -> AppConfiguration:
        if not self.path.exists():
            logger.info(f"配置文件不存在，写入默认配置: {self.path}")
            configuration = AppConfiguration.default()
            self._write(configuration)
            return configuration

        configuration = self._read()
        if configuration is None:
            logger.warning("配置文件无法解析，本次使用默认配置")
            return AppConfiguration.default()
        return configuration

    def _read(self) -> Optional[AppConfiguration]:
        try:
            data = json.loads(self.path.read_text(encoding='utf-8'))
            return AppConfiguration.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(f"读取配置文件失败: {self.path}, {type(e).__name__}: {e}")
            return None

    def _write(self, configuration: AppConfiguration) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + '.tmp')
        tmp_path.write_text(json.dumps(configuration.to_dict(), ensure_ascii=False, indent=2), encoding='utf-8')
        os.replace(tmp_path, self.path)

    def _notify(self, configuration: AppConfiguration) -> None:
        for callback in list(self._listeners):
            try:
                callback(configuration)
            except Exception as e:
                logger.error(f"配置变更回调出错: {e}", exc_info=True)
