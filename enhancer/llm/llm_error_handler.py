"""
LLM 错误处理和用户提示

统一把处理过程中的异常转换为 Alert，并记录日志
"""
from enhancer.llm.llm_exceptions import EnhancerException, NoTextSelectedError
from enhancer.llm.llm_types import Alert
from . import logger


def get_user_friendly_message(error: Exception) -> str:
    """
    获取用户友好的错误消息

    Args:
        error: 异常对象

    Returns:
        用户友好的错误消息
    """
    if isinstance(error, EnhancerException):
        return error.user_message

    return f"Failed to enhance text: {type(error).__name__}"


def error_kind(error: Exception) -> str:
    """返回写入 ProcessingResult 的错误类别"""
    if isinstance(error, EnhancerException):
        return error.kind
    return EnhancerException.kind


def build_alert(error: Exception) -> Alert:
    """
    将异常转换为 Alert

    Args:
        error: 异常对象

    Returns:
        Alert，未知异常的技术细节包含异常类型和内容
    """
    if isinstance(error, EnhancerException):
        return Alert(
            title=error.title,
            message=error.user_message,
            details=error.technical_details,
            needs_settings=error.needs_settings,
        )

    return Alert(
        title=EnhancerException.title,
        message=get_user_friendly_message(error),
        details=f"{type(error).__name__}: {error}",
    )


def log_error(error: Exception, binding_name: str = '') -> None:
    """按严重程度记录错误；没有选中文字只是正常停止"""
    prefix = f"[{binding_name}] " if binding_name else ''
    if isinstance(error, NoTextSelectedError):
        logger.info(f"{prefix}没有选中文字，停止处理")
    elif isinstance(error, EnhancerException):
        logger.warning(f"{prefix}{error.kind}: {error.technical_details}")
    else:
        logger.error(f"{prefix}处理时发生未预期的错误: {type(error).__name__}: {error}", exc_info=error)
