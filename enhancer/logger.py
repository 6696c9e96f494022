# coding: utf-8
"""
日志

每个名称对应一个写入 logs/{name}_{YYYYMMDD}.log 的记录器（按大小轮转），不向 root 传播。
各子包在 __init__ 中用 get_logger('enhancer') 取得记录器，core_enhancer 启动时按配置重设级别。
"""

import logging
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Optional


LOG_FORMAT = '%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
LOG_DATEFMT = '%H:%M:%S'

MAX_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 5


def _level(level: str) -> int:
    return getattr(logging, str(level).upper(), logging.INFO)


def _default_log_dir() -> Path:
    from config_enhancer import BASE_DIR
    return Path(BASE_DIR) / 'logs'


def _file_handler(name: str, log_dir: Path, max_bytes: int, backup_count: int) -> RotatingFileHandler:
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f'{name}_{datetime.now():%Y%m%d}.log'

    handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count, encoding='utf-8')
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
    return handler


class Logger:
    """日志系统管理器"""

    _loggers: Dict[str, logging.Logger] = {}

    @classmethod
    def setup(
        cls,
        name: str,
        log_dir: Optional[str] = None,
        level: str = 'INFO',
        max_bytes: int = MAX_BYTES,
        backup_count: int = BACKUP_COUNT,
    ) -> logging.Logger:
        """
        创建或更新日志记录器

        Args:
            name: 记录器名称，同时作为日志文件名前缀
            log_dir: 日志目录，默认为项目根目录下的 logs
            level: 'DEBUG' / 'INFO' / 'WARNING' / 'ERROR' / 'CRITICAL'
            max_bytes: 单个日志文件大小上限
            backup_count: 轮转保留的文件数

        Returns:
            logging.Logger；已存在时只更新级别
        """
        log_level = _level(level)

        logger = cls._loggers.get(name)
        if logger is None:
            logger = logging.getLogger(name)
            logger.propagate = False
            directory = Path(log_dir) if log_dir else _default_log_dir()
            logger.addHandler(_file_handler(name, directory, max_bytes, backup_count))
            cls._loggers[name] = logger

        logger.setLevel(log_level)
        for handler in logger.handlers:
            handler.setLevel(log_level)
        return logger

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """获取记录器，尚未创建时以 INFO 级别创建"""
        return cls._loggers.get(name) or cls.setup(name)


def setup_logger(name: str, log_dir: str = None, level: str = 'INFO', **kwargs) -> logging.Logger:
    return Logger.setup(name, log_dir, level, **kwargs)


def get_logger(name: str) -> logging.Logger:
    return Logger.get_logger(name)
