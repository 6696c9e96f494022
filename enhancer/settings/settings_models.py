# coding: utf-8
"""
用户配置数据模型

config.json 结构：
    {
        "shortcuts": [Binding, ...],
        "apiProviders": {"claude": ProviderSettings, "openai": ProviderSettings},
        "compression": CompressionSettings
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from config_enhancer import EnhancerConfig as Config
from enhancer.llm.llm_constants import ProviderIds
from . import logger


# ======================================================================
# --- 快捷键 ---

MODIFIER_ALIASES = {
    'control': 'ctrl',
    'ctl': 'ctrl',
    'option': 'alt',
    'opt': 'alt',
    'command': 'cmd',
    'super': 'cmd',
    'win': 'cmd',
    'meta': 'cmd',
}

# 规范顺序，也是全部合法的修饰键
MODIFIER_ORDER = ('ctrl', 'alt', 'shift', 'cmd')


def normalize_key(key) -> str:
    key = str(key).strip().lower()
    if not key:
        raise ValueError("快捷键按键不能为空")
    return key


def normalize_modifiers(modifiers: Iterable[str]) -> Tuple[str, ...]:
    """统一修饰键名称并按固定顺序排列，重复项合并"""
    result = set()
    for modifier in modifiers:
        name = str(modifier).strip().lower()
        name = MODIFIER_ALIASES.get(name, name)
        if name not in MODIFIER_ORDER:
            raise ValueError(f"未知的修饰键: {modifier}")
        result.add(name)
    return tuple(name for name in MODIFIER_ORDER if name in result)


@dataclass
class Binding:
    """
    快捷键绑定：按键组合 → 提示词 / 提供商 / 模型

    Attributes:
        id: 绑定标识
        name: 显示名称
        key: 按键名称（如 '1'、'f5'）
        modifiers: 修饰键集合
        prompt: 提示词模板
        provider: 提供商标识
        model: 模型名称
        include_screenshot: 附带当前屏幕截图作为上下文
        screenshot_only: 不读取选中文字，只分析截图，输出插入到光标处
    """

    id: str
    name: str
    key: str
    modifiers: Tuple[str, ...] = ()
    prompt: str = ''
    provider: str = ProviderIds.CLAUDE
    model: str = ''
    include_screenshot: bool = False
    screenshot_only: bool = False

    def __post_init__(self):
        self.key = normalize_key(self.key)
        self.modifiers = normalize_modifiers(self.modifiers)

    @property
    def combo(self) -> Tuple[str, frozenset]:
        """(按键, 修饰键集合)，在注册表中唯一"""
        return self.key, frozenset(self.modifiers)

    @property
    def wants_screenshot(self) -> bool:
        return self.include_screenshot or self.screenshot_only

    def describe_combo(self) -> str:
        return '+'.join(self.modifiers + (self.key,))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'key': self.key,
            'modifiers': list(self.modifiers),
            'prompt': self.prompt,
            'provider': self.provider,
            'model': self.model,
            'includeScreenshot': self.include_screenshot,
            'screenshotOnly': self.screenshot_only,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Binding':
        return cls(
            id=str(data['id']),
            name=data.get('name') or str(data['id']),
            key=data['key'],
            modifiers=tuple(data.get('modifiers') or ()),
            prompt=data.get('prompt', ''),
            provider=data.get('provider', ProviderIds.CLAUDE),
            model=data.get('model', ''),
            include_screenshot=bool(data.get('includeScreenshot', False)),
            screenshot_only=bool(data.get('screenshotOnly', False)),
        )


# ======================================================================
# --- 提供商 ---

@dataclass
class ProviderSettings:
    """单个提供商的 API Key、默认模型与启用状态"""

    api_key: str = ''
    model: str = ''
    enabled: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {'apiKey': self.api_key, 'model': self.model, 'enabled': self.enabled}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProviderSettings':
        return cls(
            api_key=data.get('apiKey', '') or '',
            model=data.get('model', '') or '',
            enabled=bool(data.get('enabled', False)),
        )


DEFAULT_MODELS = {
    ProviderIds.CLAUDE: 'claude-sonnet-4-20250514',
    ProviderIds.OPENAI: 'gpt-4o',
}


# ======================================================================
# --- 截图压缩 ---

@dataclass
class CompressionSettings:
    """
    截图压缩设置

    Attributes:
        preset: 预设名称（'ultra_high', 'high', 'balanced', 'efficient'）
        enabled: 是否压缩；关闭时只转换为最高质量 JPEG
        custom_quality: 自定义 JPEG 质量（0~1），覆盖预设
        max_size_bytes: 目标文件大小上限（可选）
    """

    preset: str = Config.compression_preset
    enabled: bool = True
    custom_quality: Optional[float] = None
    max_size_bytes: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'preset': self.preset,
            'enabled': self.enabled,
            'customQuality': self.custom_quality,
            'maxSizeBytes': self.max_size_bytes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CompressionSettings':
        return cls(
            preset=data.get('preset', Config.compression_preset),
            enabled=bool(data.get('enabled', True)),
            custom_quality=data.get('customQuality'),
            max_size_bytes=data.get('maxSizeBytes'),
        )


# ======================================================================
# --- 整体配置 ---

@dataclass
class AppConfiguration:
    """用户配置"""

    bindings: List[Binding] = field(default_factory=list)
    providers: Dict[str, ProviderSettings] = field(default_factory=dict)
    compression: CompressionSettings = field(default_factory=CompressionSettings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'shortcuts': [binding.to_dict() for binding in self.bindings],
            'apiProviders': {provider_id: settings.to_dict() for provider_id, settings in self.providers.items()},
            'compression': self.compression.to_dict(),
        }

    def resolve_models(self) -> 'AppConfiguration':
        """未指定模型的绑定使用提供商配置的模型，其次使用内置默认模型"""
        for binding in self.bindings:
            if not binding.model:
                settings = self.providers.get(binding.provider)
                binding.model = (settings.model if settings else '') or DEFAULT_MODELS.get(binding.provider, '')
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AppConfiguration':
        providers = {
            provider_id: ProviderSettings.from_dict(settings)
            for provider_id, settings in (data.get('apiProviders') or {}).items()
        }

        # 无效的绑定只跳过该条，不影响其余配置
        bindings = []
        for item in data.get('shortcuts') or []:
            try:
                bindings.append(Binding.from_dict(item))
            except (ValueError, KeyError) as e:
                name = item.get('name') or item.get('id') or '?'
                logger.warning(f"跳过无效的快捷键配置 '{name}': {e}")

        configuration = cls(
            bindings=bindings,
            providers=providers,
            compression=CompressionSettings.from_dict(data.get('compression') or {}),
        )
        return configuration.resolve_models()

    @classmethod
    def default(cls) -> 'AppConfiguration':
        return cls(
            bindings=[
                Binding(
                    id='improve-text',
                    name='Improve Text',
                    key='1',
                    modifiers=('ctrl', 'alt'),
                    prompt='Improve the writing quality and clarity of this text while maintaining its original meaning and tone.',
                    provider=ProviderIds.CLAUDE,
                    model=DEFAULT_MODELS[ProviderIds.CLAUDE],
                ),
            ],
            providers={
                ProviderIds.CLAUDE: ProviderSettings(model=DEFAULT_MODELS[ProviderIds.CLAUDE], enabled=True),
                ProviderIds.OPENAI: ProviderSettings(model=DEFAULT_MODELS[ProviderIds.OPENAI], enabled=False),
            },
        )
