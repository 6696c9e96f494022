# coding: utf-8
"""
提供商公共逻辑

BaseProvider 负责：
1. 从配置读取 API Key（缺失时在任何网络请求之前抛出 CredentialError）
2. 把 SDK 异常映射为自定义异常
3. 空响应检查
4. 模型列表缓存与按发布时间过滤

子类只需实现请求发送与模型列表解析。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from config_enhancer import EnhancerConfig as Config
from enhancer.llm.llm_client_pool import ClientPool
from enhancer.llm.llm_exceptions import (
    CredentialError,
    NoContentError,
    SDK_ERRORS,
    wrap_sdk_error,
)
from enhancer.llm.llm_message_builder import MessageBuilder
from enhancer.llm.llm_model_cache import ModelCache
from enhancer.llm.llm_types import ModelDescriptor, ProcessingRequest
from . import logger


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value) -> Optional[datetime]:
    """
    解析提供商返回的发布时间

    支持 datetime、unix 秒数和 ISO-8601 字符串；无法解析时返回 None
    """
    if value is None or value == '':
        return None

    try:
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            parsed = datetime.fromtimestamp(value, tz=timezone.utc)
        elif isinstance(value, str):
            parsed = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
        else:
            return None
    except (ValueError, OverflowError, OSError):
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class BaseProvider(ABC):
    """提供商基类"""

    provider_id = ''

    def __init__(
        self,
        config_source,
        client_pool: Optional[ClientPool] = None,
        model_cache: Optional[ModelCache] = None,
        max_tokens: Optional[int] = None,
        recent_days: Optional[int] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Args:
            config_source: 配置来源，提供 current()
            client_pool: SDK 客户端池
            model_cache: 模型列表缓存（可选）
            max_tokens: 输出 token 上限
            recent_days: 模型列表只保留最近多少天发布的模型
            clock: 当前时间函数，测试时可替换
        """
        self.config_source = config_source
        self.client_pool = client_pool or ClientPool()
        self.model_cache = model_cache
        self.max_tokens = max_tokens or Config.max_tokens
        self.recent_days = recent_days or Config.model_recent_days
        self.message_builder = MessageBuilder()
        self._clock = clock

    # ------------------------------------------------------------------
    # 子类实现

    @abstractmethod
    async def _send(self, api_key: str, request: ProcessingRequest) -> str:
        """发送请求并返回模型输出文本"""

    @abstractmethod
    async def _fetch_models(self, api_key: str) -> List[ModelDescriptor]:
        """请求模型列表"""

    # ------------------------------------------------------------------

    def _api_key(self) -> str:
        settings = self.config_source.current().providers.get(self.provider_id)
        api_key = (settings.api_key if settings else '').strip()
        if not api_key:
            raise CredentialError(self.provider_id, missing=True)
        return api_key

    async def enhance(self, text: str, prompt: str, model: str, screenshot: Optional[bytes] = None) -> str:
        """
        调用模型

        Args:
            text: 选中的文字，或仅截图请求的占位文本
            prompt: 提示词模板
            model: 模型名称
            screenshot: JPEG 数据（可选）

        Returns:
            模型原始输出

        Raises:
            CredentialError / TransientProviderError / ProviderAPIError / NoContentError
        """
        api_key = self._api_key()
        request = ProcessingRequest(
            source_text=text,
            prompt=prompt,
            provider_id=self.provider_id,
            model_id=model,
            screenshot=screenshot,
        )

        logger.info(f"调用 {self.provider_id}: 模型={model}, 截图={'有' if screenshot else '无'}")
        try:
            raw_text = await self._send(api_key, request)
        except SDK_ERRORS as e:
            raise wrap_sdk_error(e, self.provider_id) from e

        if not raw_text or not raw_text.strip():
            raise NoContentError(self.provider_id)

        logger.debug(f"{self.provider_id} 返回 {len(raw_text)} 字符")
        return raw_text

    async def list_models(self, use_cache: bool = True) -> List[ModelDescriptor]:
        """
        列出最近发布的模型

        优先使用缓存；否则请求接口，过滤后写回缓存。
        发布时间无法解析的模型保留。
        """
        if use_cache and self.model_cache is not None:
            cached = self.model_cache.get(self.provider_id)
            if cached is not None:
                return cached

        api_key = self._api_key()
        try:
            models = await self._fetch_models(api_key)
        except SDK_ERRORS as e:
            raise wrap_sdk_error(e, self.provider_id) from e

        recent = self.filter_recent(models)
        logger.info(f"{self.provider_id} 模型列表: 共 {len(models)} 个，最近 {self.recent_days} 天内 {len(recent)} 个")

        if self.model_cache is not None:
            self.model_cache.put(self.provider_id, recent)
        return recent

    def filter_recent(self, models: List[ModelDescriptor]) -> List[ModelDescriptor]:
        cutoff = self._clock() - timedelta(days=self.recent_days)
        return [model for model in models if model.created_at is None or model.created_at >= cutoff]
