"""
LLM 客户端池

功能：
1. 缓存 AsyncAnthropic / AsyncOpenAI 客户端实例
2. 按提供商和 API Key 创建和获取客户端
3. 统一设置超时，关闭 SDK 自带的重试

注入的 http_client 必须是 httpx.AsyncClient，要求 anthropic 0.40 至 1.0 之前、openai 1.40 至 3.0 之前的 SDK
（与 pyproject.toml 中的版本范围一致）。
"""
from typing import Dict, Optional, Union

import httpx
from anthropic import AsyncAnthropic
from openai import AsyncOpenAI

from config_enhancer import EnhancerConfig as Config
from enhancer.llm.llm_constants import APIConfig, ProviderIds


class ClientPool:
    """SDK 客户端池"""

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None, timeout: Optional[float] = None):
        """
        Args:
            http_client: 自定义 httpx 客户端（可选，测试时注入 MockTransport）
            timeout: 单次请求超时（秒），默认使用配置值
        """
        self._clients: Dict[str, Union[AsyncAnthropic, AsyncOpenAI]] = {}
        self._http_client = http_client
        self._timeout = timeout if timeout is not None else Config.provider_timeout

    def get_claude_client(self, api_key: str, base_url: str = '') -> AsyncAnthropic:
        """获取 Claude 客户端（带缓存）"""
        cache_key = f"{ProviderIds.CLAUDE}_{base_url}_{api_key}"
        if cache_key not in self._clients:
            self._clients[cache_key] = AsyncAnthropic(
                api_key=api_key,
                base_url=base_url or APIConfig.CLAUDE_BASE_URL,
                timeout=self._timeout,
                max_retries=APIConfig.MAX_RETRIES,
                http_client=self._http_client,
            )
        return self._clients[cache_key]

    def get_openai_client(self, api_key: str, base_url: str = '') -> AsyncOpenAI:
        """获取 OpenAI 客户端（带缓存）"""
        cache_key = f"{ProviderIds.OPENAI}_{base_url}_{api_key}"
        if cache_key not in self._clients:
            self._clients[cache_key] = AsyncOpenAI(
                api_key=api_key,
                base_url=base_url or APIConfig.OPENAI_BASE_URL,
                timeout=self._timeout,
                max_retries=APIConfig.MAX_RETRIES,
                http_client=self._http_client,
            )
        return self._clients[cache_key]

    def clear(self):
        """清空客户端缓存，API Key 变更后调用"""
        self._clients.clear()
