# coding: utf-8
"""
LLM 处理流程的数据类型

- ProcessingRequest: 单次处理请求
- ProcessingResult: 处理结果（成功文本或错误类别）
- ModelDescriptor: 提供商返回的模型信息
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from enhancer.llm.llm_constants import PromptConstants


@dataclass
class ProcessingRequest:
    """
    单次处理请求

    Attributes:
        source_text: 选中的文字，仅截图请求时为占位文本
        prompt: 提示词模板
        provider_id: 提供商标识
        model_id: 模型名称
        screenshot: 压缩后的 JPEG 数据（可选）
    """

    source_text: str
    prompt: str
    provider_id: str
    model_id: str
    screenshot: Optional[bytes] = None

    @property
    def is_screenshot_only(self) -> bool:
        return self.source_text == PromptConstants.SCREENSHOT_SENTINEL


@dataclass
class ProcessingResult:
    """处理结果：成功时携带 final_text，失败时携带 error_kind"""

    success: bool
    final_text: str = ''
    error_kind: str = ''

    @classmethod
    def ok(cls, final_text: str) -> 'ProcessingResult':
        return cls(success=True, final_text=final_text)

    @classmethod
    def failure(cls, error_kind: str) -> 'ProcessingResult':
        return cls(success=False, error_kind=error_kind)


@dataclass
class ModelDescriptor:
    """提供商模型信息"""

    id: str
    provider: str
    display_name: str = ''
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'provider': self.provider,
            'display_name': self.display_name,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ModelDescriptor':
        created_at = data.get('created_at')
        return cls(
            id=data['id'],
            provider=data.get('provider', ''),
            display_name=data.get('display_name', ''),
            created_at=datetime.fromisoformat(created_at) if created_at else None,
        )


@dataclass
class Alert:
    """
    提示给用户的错误信息

    Attributes:
        title: 标题
        message: 面向用户、可操作的说明
        details: 技术细节，用于日志和展开显示
        needs_settings: 是否需要用户去修改设置
    """

    title: str
    message: str
    details: str = ''
    needs_settings: bool = False
