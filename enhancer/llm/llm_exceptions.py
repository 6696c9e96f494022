"""
LLM 自定义异常

定义文本增强流程的异常层次结构。

每个异常类带有：
- kind: 错误类别（写入 ProcessingResult.error_kind）
- title / user_message: 面向用户、可操作的提示
- needs_settings: 是否需要用户修改设置
- technical_details: 技术细节，只写入日志
"""
import anthropic
import openai

from enhancer.llm.llm_constants import APIConfig, ProviderIds


# ======================================================================
# --- 基础异常 ---

class EnhancerException(Exception):
    """文本增强基础异常"""

    kind = 'unexpected'
    title = 'Enhancement Failed'
    user_message = 'Something went wrong while enhancing the text.'
    needs_settings = False

    def __init__(self, message: str = '', technical_details: str = ''):
        if message:
            self.user_message = message
        self.technical_details = technical_details or f"{type(self).__name__}: {self.user_message}"
        super().__init__(self.user_message)


# ======================================================================
# --- 提供商异常 ---

class ProviderError(EnhancerException):
    """提供商调用异常基类"""

    def __init__(self, provider: str, message: str = '', technical_details: str = ''):
        self.provider = provider
        self.provider_name = ProviderIds.display_name(provider)
        super().__init__(message, technical_details)


class CredentialError(ProviderError):
    """API Key 缺失或无效 (401)，需要用户处理，不重试"""

    kind = 'credential'
    needs_settings = True

    def __init__(self, provider: str, missing: bool = True):
        self.missing = missing
        name = ProviderIds.display_name(provider)
        console_url = APIConfig.KEY_CONSOLE_URLS.get(provider, 'your provider console')
        if missing:
            self.title = 'API Key Required'
            message = (
                f"{name} API key missing\n\n"
                f"Fix: Open Settings → Enter your {name} API key\n"
                f"Get a key at: {console_url}"
            )
            details = f"CredentialError.missing({provider})"
        else:
            self.title = 'Invalid API Key'
            message = (
                f"{name} API key invalid\n\n"
                f"Your API key appears to be incorrect or expired.\n\n"
                f"Fix: Check your API key at {console_url}\n"
                f"Then update it in Settings"
            )
            details = f"CredentialError.http401({provider})"
        super().__init__(provider, message, details)


class TransientProviderError(ProviderError):
    """速率限制 (429)、服务端错误 (5xx) 或网络问题，只提示，不自动重试"""

    kind = 'transient'

    def __init__(self, provider: str, status_code: int = None, reason: str = ''):
        self.status_code = status_code
        name = ProviderIds.display_name(provider)
        if status_code == 429:
            self.title = 'Rate Limit Exceeded'
            message = f"Rate limit exceeded\n\nToo many requests to {name} API.\nWait a moment and try again."
        elif status_code is not None:
            self.title = f'{name} Unavailable'
            message = (
                f"{name} API temporarily unavailable\n\n"
                f"Server error (HTTP {status_code}).\nThis usually resolves quickly."
            )
        else:
            self.title = 'Network Error'
            message = f"Could not reach {name} API\n\nCheck your network connection and try again."
        super().__init__(provider, message, f"TransientProviderError({provider}, {status_code}, {reason})")


class ProviderAPIError(ProviderError):
    """其他非 2xx 响应，附带响应体"""

    kind = 'api'

    def __init__(self, provider: str, status_code: int, body: str = ''):
        self.status_code = status_code
        self.body = body
        name = ProviderIds.display_name(provider)
        message = f"{name} API error ({status_code}): {body}" if body else f"{name} API error ({status_code})"
        super().__init__(provider, message, f"ProviderAPIError({provider}, {status_code}, {body})")


class NoContentError(ProviderError):
    """响应中没有内容"""

    kind = 'no_content'

    def __init__(self, provider: str):
        name = ProviderIds.display_name(provider)
        super().__init__(provider, f"No response content received from {name} API", f"NoContentError({provider})")


class ProviderUnavailableError(EnhancerException):
    """提供商未知、未启用或未配置 API Key"""

    kind = 'provider_unavailable'
    title = 'API Key Required'
    needs_settings = True

    def __init__(self, provider: str, reason: str = ''):
        self.provider = provider
        self.reason = reason
        name = ProviderIds.display_name(provider)
        message = (
            f"API provider {name} is not configured or enabled.\n\n"
            f"Fix: Open Settings → enable {name} and enter its API key"
        )
        super().__init__(message, f"ProviderUnavailableError({provider}, {reason})")


# ======================================================================
# --- 响应解析异常 ---

class ExtractionError(EnhancerException):
    """无法从模型输出中恢复出有效的 JSON 结果"""

    kind = 'extraction'
    title = 'Invalid Response'

    NO_JSON_FOUND = 'noJSONFound'
    INVALID_JSON = 'invalidJSON'
    MISSING_FIELD = 'missingField'

    _MESSAGES = {
        NO_JSON_FOUND: "The model response did not contain any JSON.",
        INVALID_JSON: "The model returned a malformed JSON response.",
        MISSING_FIELD: "The model response is missing '{field}'.",
    }

    def __init__(self, code: str, field: str = None, reason: str = ''):
        self.code = code
        self.field = field
        message = self._MESSAGES[code].format(field=field)
        message += "\n\nTry again, or pick a different model for this shortcut."
        detail = field if code == self.MISSING_FIELD else reason
        super().__init__(message, f"ExtractionError.{code}({detail})")


# ======================================================================
# --- 流程异常 ---

class AccessibilityPermissionError(EnhancerException):
    """缺少辅助功能权限，无法读取和替换选中的文字"""

    kind = 'permission'
    title = 'Accessibility Permission Required'
    user_message = (
        "Accessibility permissions are required to capture and replace text.\n\n"
        "Fix:\n"
        "1. Open System Settings > Privacy & Security > Accessibility\n"
        "2. Enable access for your terminal or Python\n"
        "3. Fire the shortcut again"
    )


class CaptureError(EnhancerException):
    """截图失败"""

    kind = 'capture'
    title = 'Screen Capture Failed'
    user_message = (
        "Could not capture the screen.\n\n"
        "Fix: Grant Screen Recording permission in System Settings > Privacy & Security"
    )


class ProcessingTimeoutError(EnhancerException):
    """处理超时，本次结果被丢弃"""

    kind = 'timeout'
    title = 'Processing Timed Out'

    def __init__(self, timeout: float):
        self.timeout = timeout
        message = f"Processing timed out after {timeout:g} seconds.\n\nFire the shortcut again to retry."
        super().__init__(message, f"ProcessingTimeoutError({timeout})")


class NoTextSelectedError(EnhancerException):
    """没有选中文字：正常停止，不是错误"""

    kind = 'no_selection'
    title = 'No Text Selected'
    user_message = "No text selected\n\nPlease select some text before using this shortcut."


# ======================================================================
# --- HTTP 状态与 SDK 异常映射 ---

def classify_status(status_code: int, provider: str, body: str = '') -> ProviderError:
    """
    按 HTTP 状态码归类提供商错误

    Args:
        status_code: HTTP 状态码（非 2xx）
        provider: 提供商标识
        body: 响应体文本

    Returns:
        401 → CredentialError，429/5xx → TransientProviderError，其余 → ProviderAPIError
    """
    if status_code == 401:
        return CredentialError(provider, missing=False)
    if status_code == 429 or status_code >= 500:
        return TransientProviderError(provider, status_code, body)
    return ProviderAPIError(provider, status_code, body)


# 超时异常是连接异常的子类
SDK_STATUS_ERRORS = (openai.APIStatusError, anthropic.APIStatusError)
SDK_CONNECTION_ERRORS = (openai.APIConnectionError, anthropic.APIConnectionError)
SDK_ERRORS = (openai.APIError, anthropic.APIError)


def wrap_sdk_error(error: Exception, provider: str) -> EnhancerException:
    """
    将 openai / anthropic SDK 异常包装为自定义异常

    Args:
        error: SDK 原生异常
        provider: 提供商标识

    Returns:
        包装后的自定义异常
    """
    if isinstance(error, EnhancerException):
        return error
    if isinstance(error, SDK_STATUS_ERRORS):
        return classify_status(error.status_code, provider, error.response.text)
    if isinstance(error, SDK_CONNECTION_ERRORS):
        return TransientProviderError(provider, None, f"{type(error).__name__}: {error}")
    return EnhancerException(technical_details=f"[{provider}] {type(error).__name__}: {error}")
