"""
LLM 接口定义

使用 Protocol 定义处理流程依赖的外部组件接口，实现依赖倒置原则。
具体实现位于 enhancer.client 与 enhancer.settings，测试中可直接替换。
"""
from typing import Callable, ContextManager, List, Optional, Protocol, Tuple

from enhancer.llm.llm_types import Alert, ModelDescriptor


# ======================================================================
# --- 提供商接口 ---

class EnhancementProvider(Protocol):
    """文本增强提供商：每个内置提供商各有一个实现"""

    provider_id: str

    async def enhance(self, text: str, prompt: str, model: str, screenshot: Optional[bytes] = None) -> str:
        """调用模型，返回原始输出文本"""
        ...

    async def list_models(self, use_cache: bool = True) -> List[ModelDescriptor]:
        """列出最近发布的可用模型"""
        ...


# ======================================================================
# --- 外部组件接口 ---

class ConfigurationSource(Protocol):
    """配置来源"""

    def current(self):
        """返回当前的 AppConfiguration"""
        ...

    def add_listener(self, callback: Callable) -> None:
        """注册配置变更回调，回调参数为新的 AppConfiguration"""
        ...


class TextSelectionPort(Protocol):
    """读取 / 替换当前选中的文字"""

    async def read(self) -> str:
        ...

    async def replace(self, text: str) -> None:
        ...


class ScreenCapturePort(Protocol):
    """截取当前屏幕并压缩为 JPEG"""

    async def capture_active_screen(self) -> Optional[bytes]:
        ...

    async def compress(self, image_data: bytes) -> Optional[bytes]:
        ...


class AlertPort(Protocol):
    """向用户展示错误信息"""

    def show(self, alert: Alert) -> None:
        ...


class AccessibilityPort(Protocol):
    """操作系统辅助功能权限"""

    def is_trusted(self) -> bool:
        ...

    def request(self) -> None:
        ...


class HotkeyBackend(Protocol):
    """操作系统全局快捷键"""

    def register(self, hotkey_id: int, key: str, modifiers: Tuple[str, ...], callback: Callable[[], None]) -> None:
        """注册失败时抛出 ValueError"""
        ...

    def unregister(self, hotkey_id: int) -> None:
        ...

    def batch(self) -> ContextManager[object]:
        """其中的注册 / 注销在退出时一次生效"""
        ...
