"""
模型列表缓存

每个提供商一个 JSON 文件：
    {"cached_at": <unix 时间戳>, "models": [ModelDescriptor.to_dict(), ...]}

超过有效期或文件损坏时视为未命中。
"""
import json
import time
from pathlib import Path
from typing import List, Optional

from enhancer.llm.llm_types import ModelDescriptor
from . import logger


class ModelCache:
    """按提供商缓存模型列表"""

    def __init__(self, cache_dir, ttl: float, clock=time.time):
        """
        Args:
            cache_dir: 缓存目录
            ttl: 有效期（秒）
            clock: 时间函数，测试时可替换
        """
        self.cache_dir = Path(cache_dir)
        self.ttl = ttl
        self._clock = clock

    def _path(self, provider: str) -> Path:
        return self.cache_dir / f"{provider}_models.json"

    def get(self, provider: str) -> Optional[List[ModelDescriptor]]:
        """读取缓存，未命中返回 None"""
        path = self._path(provider)
        if not path.exists():
            return None

        try:
            data = json.loads(path.read_text(encoding='utf-8'))
            cached_at = float(data['cached_at'])
            models = [ModelDescriptor.from_dict(item) for item in data['models']]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"模型缓存文件损坏，忽略: {path.name}, {e}")
            return None

        age = self._clock() - cached_at
        if age > self.ttl:
            logger.debug(f"模型缓存已过期: {provider}, 已缓存 {age:.0f} 秒")
            return None

        logger.debug(f"命中模型缓存: {provider}, 共 {len(models)} 个")
        return models

    def put(self, provider: str, models: List[ModelDescriptor]) -> None:
        """写入缓存，写入失败只记录日志"""
        data = {
            'cached_at': self._clock(),
            'models': [model.to_dict() for model in models],
        }
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            self._path(provider).write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding='utf-8')
        except OSError as e:
            logger.warning(f"写入模型缓存失败: {provider}, {e}")

    def clear(self, provider: str = None) -> None:
        """清除某个提供商（或全部）的缓存"""
        providers = [provider] if provider else [p.name[:-len('_models.json')] for p in self.cache_dir.glob('*_models.json')]
        for name in providers:
            path = self._path(name)
            if path.exists():
                path.unlink()
                logger.info(f"已清除模型缓存: {name}")
