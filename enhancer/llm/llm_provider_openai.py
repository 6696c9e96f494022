# coding: utf-8
"""
OpenAI 提供商

使用 openai SDK 调用 Chat Completions，模型列表来自 /v1/models（created 为 unix 秒数）。
模型列表只保留对话类模型，并按能力排序。
"""

from __future__ import annotations

from typing import List

from config_enhancer import EnhancerConfig as Config
from enhancer.llm.llm_constants import ModelFilterConstants, ProviderIds
from enhancer.llm.llm_provider_base import BaseProvider, parse_timestamp
from enhancer.llm.llm_types import ModelDescriptor, ProcessingRequest


def is_chat_model(model_id: str) -> bool:
    """判断模型是否适用于对话补全"""
    lower_id = model_id.lower()

    if any(pattern in lower_id for pattern in ModelFilterConstants.EXCLUDE_PATTERNS):
        return False

    if lower_id.startswith(ModelFilterConstants.MODERN_PREFIXES):
        return True

    return any(marker in lower_id for marker in ModelFilterConstants.CHAT_MARKERS)


def model_priority(model_id: str) -> int:
    """排序优先级，数字越小越靠前"""
    lower_id = model_id.lower()
    for prefix, priority in ModelFilterConstants.PRIORITY_RULES:
        if lower_id.startswith(prefix):
            return priority
    return ModelFilterConstants.DEFAULT_PRIORITY


class OpenAIProvider(BaseProvider):
    """OpenAI 提供商"""

    provider_id = ProviderIds.OPENAI

    temperature = Config.openai_temperature

    async def _send(self, api_key: str, request: ProcessingRequest) -> str:
        client = self.client_pool.get_openai_client(api_key)
        response = await client.chat.completions.create(
            model=request.model_id,
            messages=self.message_builder.build_openai_messages(request),
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )

        if not response.choices:
            return ''
        return response.choices[0].message.content or ''

    async def _fetch_models(self, api_key: str) -> List[ModelDescriptor]:
        client = self.client_pool.get_openai_client(api_key)
        page = await client.models.list()

        models = [
            ModelDescriptor(
                id=item.id,
                provider=self.provider_id,
                display_name=item.id,
                created_at=parse_timestamp(getattr(item, 'created', None)),
            )
            for item in page.data
            if is_chat_model(item.id)
        ]
        # 稳定排序：同优先级保持接口返回的顺序
        models.sort(key=lambda model: model_priority(model.id))
        return models
