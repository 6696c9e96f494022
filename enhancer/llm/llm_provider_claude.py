# coding: utf-8
"""
Claude 提供商

使用 anthropic SDK 调用 Messages API，模型列表来自 /v1/models（created_at 为 ISO-8601 字符串）。
"""

from __future__ import annotations

from typing import List

from enhancer.llm.llm_constants import APIConfig, ProviderIds
from enhancer.llm.llm_provider_base import BaseProvider, parse_timestamp
from enhancer.llm.llm_types import ModelDescriptor, ProcessingRequest


class ClaudeProvider(BaseProvider):
    """Claude (Anthropic) 提供商"""

    provider_id = ProviderIds.CLAUDE

    async def _send(self, api_key: str, request: ProcessingRequest) -> str:
        client = self.client_pool.get_claude_client(api_key)
        response = await client.messages.create(
            model=request.model_id,
            max_tokens=self.max_tokens,
            messages=self.message_builder.build_claude_messages(request),
        )

        # 取第一个文本块
        for block in response.content or []:
            if getattr(block, 'type', None) == 'text':
                return block.text
        return ''

    async def _fetch_models(self, api_key: str) -> List[ModelDescriptor]:
        client = self.client_pool.get_claude_client(api_key)
        page = await client.models.list(limit=APIConfig.MODEL_PAGE_LIMIT)

        return [
            ModelDescriptor(
                id=item.id,
                provider=self.provider_id,
                display_name=getattr(item, 'display_name', '') or item.id,
                created_at=parse_timestamp(getattr(item, 'created_at', None)),
            )
            for item in page.data
        ]
