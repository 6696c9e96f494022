"""
配置文件监控

功能：
1. 监控 config.json 所在目录的文件变化
2. 外部修改配置文件后自动重载（防抖 + 延迟执行）

使用回调函数与 ConfigurationStore 交互，不依赖其内部结构。
"""

import time
import threading
from pathlib import Path
from typing import Callable, Optional

from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler

from config_enhancer import EnhancerConfig as Config
from . import logger


# 防抖线程的轮询间隔（秒）
POLL_INTERVAL = 0.1


class SettingsFileWatcher(FileSystemEventHandler):
    """配置文件监控"""

    def __init__(self, config_path, on_change: Callable[[], object], debounce_delay: Optional[float] = None):
        """
        Args:
            config_path: 配置文件路径
            on_change: 文件变化（防抖后）时的回调，通常为 ConfigurationStore.reload
            debounce_delay: 防抖延迟（秒）
        """
        self.config_path = Path(config_path)
        self._on_change = on_change
        self._debounce_delay = Config.watch_debounce if debounce_delay is None else debounce_delay

        self.observer = Observer()

        # 防抖 + 延迟执行
        self._last_event_time: Optional[float] = None
        self._timer: Optional[threading.Thread] = None
        self._lock = threading.Lock()

        logger.debug("SettingsFileWatcher 初始化完成")

    def _is_config_file(self, file_path) -> bool:
        try:
            return Path(file_path).resolve() == self.config_path.resolve()
        except OSError:
            return False

    def on_modified(self, event):
        """文件修改时触发"""
        if not event.is_directory and self._is_config_file(event.src_path):
            self._schedule_reload()

    def on_created(self, event):
        """文件创建时触发"""
        if not event.is_directory and self._is_config_file(event.src_path):
            self._schedule_reload()

    def on_moved(self, event):
        """原子写入（临时文件改名）时触发"""
        if not event.is_directory and self._is_config_file(event.dest_path):
            self._schedule_reload()

    def _schedule_reload(self):
        """调度重载操作（带防抖）"""
        with self._lock:
            self._last_event_time = time.time()

            # 如果没有运行的定时器，启动一个
            if self._timer is None or not self._timer.is_alive():
                self._timer = threading.Thread(target=self._debounced_worker, daemon=True)
                self._timer.start()

    def _debounced_worker(self):
        """防抖工作线程：最后一次事件之后静默 debounce_delay 秒才执行重载"""
        while True:
            with self._lock:
                if self._last_event_time is None:
                    return
                if time.time() - self._last_event_time >= self._debounce_delay:
                    self._last_event_time = None
                    break
            time.sleep(POLL_INTERVAL)

        logger.debug(f"检测到配置文件变化: {self.config_path.name}")
        try:
            self._on_change()
        except Exception as e:
            logger.error(f"重载配置失败: {e}", exc_info=True)

    def start(self):
        """启动监控"""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self.observer.schedule(self, str(self.config_path.parent), recursive=False)
        self.observer.start()
        logger.info(f"配置文件监控已启动: {self.config_path}")

    def stop(self):
        """停止监控"""
        self.observer.stop()
        self.observer.join()
        logger.info("配置文件监控已停止")
