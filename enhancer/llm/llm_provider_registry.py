"""
提供商注册表

内置提供商是一个封闭集合：新增提供商只需实现 EnhancementProvider 并加入 PROVIDER_FACTORIES，
处理流程中不按提供商类型分支。
"""
from typing import Callable, Dict, List, Optional

from enhancer.llm.llm_client_pool import ClientPool
from enhancer.llm.llm_constants import ProviderIds
from enhancer.llm.llm_exceptions import ProviderUnavailableError
from enhancer.llm.llm_interfaces import EnhancementProvider
from enhancer.llm.llm_model_cache import ModelCache
from enhancer.llm.llm_provider_claude import ClaudeProvider
from enhancer.llm.llm_provider_openai import OpenAIProvider
from . import logger


PROVIDER_FACTORIES: Dict[str, Callable[..., EnhancementProvider]] = {
    ProviderIds.CLAUDE: ClaudeProvider,
    ProviderIds.OPENAI: OpenAIProvider,
}


class ProviderRegistry:
    """按提供商标识解析提供商实例"""

    def __init__(
        self,
        config_source,
        client_pool: Optional[ClientPool] = None,
        model_cache: Optional[ModelCache] = None,
        factories: Optional[Dict[str, Callable[..., EnhancementProvider]]] = None,
    ):
        """
        Args:
            config_source: 配置来源，提供 current()
            client_pool: 各提供商共用的 SDK 客户端池
            model_cache: 模型列表缓存
            factories: 提供商工厂，默认使用内置提供商
        """
        self.config_source = config_source
        self.client_pool = client_pool or ClientPool()
        factories = factories if factories is not None else PROVIDER_FACTORIES
        self._providers: Dict[str, EnhancementProvider] = {
            provider_id: factory(config_source, self.client_pool, model_cache)
            for provider_id, factory in factories.items()
        }

    @property
    def provider_ids(self) -> List[str]:
        return list(self._providers)

    def get(self, provider_id: str) -> EnhancementProvider:
        """获取提供商实例，不检查是否启用"""
        provider = self._providers.get(provider_id)
        if provider is None:
            raise ProviderUnavailableError(provider_id, 'unknown provider')
        return provider

    def resolve(self, provider_id: str) -> EnhancementProvider:
        """
        获取可用于处理的提供商

        Raises:
            ProviderUnavailableError: 未知、未启用或没有 API Key
        """
        provider = self.get(provider_id)

        settings = self.config_source.current().providers.get(provider_id)
        if settings is None or not settings.enabled:
            logger.warning(f"提供商未启用: {provider_id}")
            raise ProviderUnavailableError(provider_id, 'disabled')
        if not settings.api_key.strip():
            logger.warning(f"提供商没有配置 API Key: {provider_id}")
            raise ProviderUnavailableError(provider_id, 'missing api key')

        return provider
