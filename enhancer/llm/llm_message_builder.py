# coding: utf-8
"""
LLM 消息构建模块

负责组装提供商请求中的用户消息：
1. 文本模式：提示词 + 选中文字 + JSON 格式要求
2. 仅截图模式：直接使用提示词，不要求 JSON
3. 多模态：在文本之前附加 base64 JPEG 图片，各提供商使用各自的内容结构
"""

from __future__ import annotations

import base64
from typing import Dict, List, Optional

from enhancer.llm.llm_constants import PromptConstants
from enhancer.llm.llm_types import ProcessingRequest
from . import logger


IMAGE_MEDIA_TYPE = 'image/jpeg'


class MessageBuilder:
    """LLM 消息构建器"""

    @staticmethod
    def build_prompt(request: ProcessingRequest) -> str:
        """
        构建发送给模型的文本部分

        Args:
            request: 处理请求

        Returns:
            提示词文本。仅截图请求直接返回提示词，其余附加原文与 JSON 格式要求
        """
        if request.is_screenshot_only:
            return request.prompt

        base = PromptConstants.TEXT_TEMPLATE.format(prompt=request.prompt, text=request.source_text)
        return base + PromptConstants.JSON_INSTRUCTION

    @staticmethod
    def encode_image(screenshot: Optional[bytes]) -> Optional[str]:
        """把 JPEG 数据编码为 base64 字符串"""
        if not screenshot:
            return None
        return base64.b64encode(screenshot).decode('ascii')

    def build_claude_messages(self, request: ProcessingRequest) -> List[Dict]:
        """构建 Claude Messages API 的 messages 参数"""
        prompt = self.build_prompt(request)
        image = self.encode_image(request.screenshot)

        if image is None:
            content = prompt
        else:
            content = [
                {
                    "type": "image",
                    "source": {"type": "base64", "media_type": IMAGE_MEDIA_TYPE, "data": image},
                },
                {"type": "text", "text": prompt},
            ]

        self._log_summary('claude', request, image)
        return [{"role": "user", "content": content}]

    def build_openai_messages(self, request: ProcessingRequest) -> List[Dict]:
        """构建 OpenAI Chat Completions 的 messages 参数"""
        prompt = self.build_prompt(request)
        image = self.encode_image(request.screenshot)

        if image is None:
            content = prompt
        else:
            content = [
                {"type": "image_url", "image_url": {"url": f"data:{IMAGE_MEDIA_TYPE};base64,{image}"}},
                {"type": "text", "text": prompt},
            ]

        self._log_summary('openai', request, image)
        return [{"role": "user", "content": content}]

    @staticmethod
    def _log_summary(provider: str, request: ProcessingRequest, image: Optional[str]):
        mode = 'screenshot-only' if request.is_screenshot_only else 'text'
        logger.debug(
            f"构建 {provider} 请求: 模式={mode}, 模型={request.model_id}, "
            f"原文长度={len(request.source_text)}, 图片={len(image) if image else 0} 字节(base64)"
        )
