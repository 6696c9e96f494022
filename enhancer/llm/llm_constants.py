"""
LLM 常量配置

集中管理提供商地址、提示词模板、模型过滤规则等常量
"""


# ==================== 提供商常量 ====================
class ProviderIds:
    """内置提供商标识"""

    CLAUDE = 'claude'
    OPENAI = 'openai'

    DISPLAY_NAMES = {
        CLAUDE: 'Claude',
        OPENAI: 'OpenAI',
    }

    @classmethod
    def display_name(cls, provider_id: str) -> str:
        return cls.DISPLAY_NAMES.get(provider_id, provider_id)


class APIConfig:
    """API 地址与传输参数"""

    CLAUDE_BASE_URL = 'https://api.anthropic.com'
    OPENAI_BASE_URL = 'https://api.openai.com/v1'

    # 与 SDK 内部重试无关：核心流程从不自动重试
    MAX_RETRIES = 0

    # 获取模型列表时单页请求数量
    MODEL_PAGE_LIMIT = 100

    # 申请 API Key 的地址（出现在错误提示中）
    KEY_CONSOLE_URLS = {
        ProviderIds.CLAUDE: 'console.anthropic.com',
        ProviderIds.OPENAI: 'platform.openai.com',
    }


# ==================== 提示词常量 ====================
class PromptConstants:
    """提示词模板"""

    # 仅截图请求的占位源文本
    SCREENSHOT_SENTINEL = '[Screenshot analysis requested]'

    TEXT_TEMPLATE = '{prompt}\n\nText to enhance:\n{text}'

    JSON_INSTRUCTION = (
        '\n\n'
        'CRITICAL: You must respond with ONLY a valid JSON object. '
        'No explanations, no markdown, no code blocks, no additional text.\n\n'
        'Required JSON format:\n'
        '{"enhancedText": "your enhanced text here"}\n\n'
        'Do not include any text before or after the JSON object.'
    )


# ==================== 模型列表常量 ====================
class ModelFilterConstants:
    """OpenAI 模型列表过滤与排序规则"""

    # 不适用于对话补全的模型
    EXCLUDE_PATTERNS = (
        'whisper', 'tts', 'dall-e', 'text-embedding', 'text-moderation',
        'babbage', 'ada', 'curie', 'davinci', 'code-search', 'code-edit',
        'similarity', 'gpt-3.5', 'gpt-3-', 'gpt-2', 'gpt-1',
    )

    MODERN_PREFIXES = (
        'gpt-4', 'gpt-5', 'gpt-6', 'gpt-7', 'gpt-8', 'gpt-9', 'chatgpt', 'o1',
    )

    CHAT_MARKERS = ('chat', 'instruct', 'completion', 'vision')

    # (前缀, 优先级)，数字越小越靠前，按顺序匹配第一个
    PRIORITY_RULES = (
        ('gpt-5', 1), ('gpt-6', 1), ('gpt-7', 1), ('gpt-8', 1), ('gpt-9', 1),
        ('gpt-4o', 10),
        ('o1', 15),
        ('gpt-4-turbo', 20),
        ('gpt-4', 25),
        ('chatgpt', 30),
    )
    DEFAULT_PRIORITY = 100

