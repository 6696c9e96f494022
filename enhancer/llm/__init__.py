"""
LLM 模块

提供文本增强的核心流程，包括提供商调用、响应 JSON 提取、处理编排等"""

from enhancer.logger import get_logger

logger = get_logger('enhancer')

# 数据类型与异常
from .llm_types import ProcessingRequest, ProcessingResult, ModelDescriptor, Alert
from .llm_exceptions import (
    EnhancerException,
    CredentialError,
    TransientProviderError,
    ProviderAPIError,
    NoContentError,
    ProviderUnavailableError,
    ExtractionError,
    AccessibilityPermissionError,
    CaptureError,
    ProcessingTimeoutError,
    NoTextSelectedError,
    classify_status,
    wrap_sdk_error,
)

# 响应提取
from .llm_json_extractor import EnhancementPayload, recover

# 提供商
from .llm_client_pool import ClientPool
from .llm_model_cache import ModelCache
from .llm_provider_claude import ClaudeProvider
from .llm_provider_openai import OpenAIProvider
from .llm_provider_registry import ProviderRegistry, PROVIDER_FACTORIES

# 处理流程
from .llm_events import ProcessingEvents
from .llm_orchestrator import ProcessingOrchestrator

__all__ = [
    'logger',

    # 类型
    'ProcessingRequest',
    'ProcessingResult',
    'ModelDescriptor',
    'Alert',

    # 异常
    'EnhancerException',
    'CredentialError',
    'TransientProviderError',
    'ProviderAPIError',
    'NoContentError',
    'ProviderUnavailableError',
    'ExtractionError',
    'AccessibilityPermissionError',
    'CaptureError',
    'ProcessingTimeoutError',
    'NoTextSelectedError',
    'classify_status',
    'wrap_sdk_error',

    # 响应提取
    'EnhancementPayload',
    'recover',

    # 提供商
    'ClientPool',
    'ModelCache',
    'ClaudeProvider',
    'OpenAIProvider',
    'ProviderRegistry',
    'PROVIDER_FACTORIES',

    # 处理流程
    'ProcessingEvents',
    'ProcessingOrchestrator',
]
