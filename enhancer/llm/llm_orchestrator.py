# coding: utf-8
"""
文本增强处理流程

ProcessingOrchestrator.run(binding) 的步骤：
1. 发出"开始"通知，并保证在任何退出路径上发出且只发出一次"结束"通知
2. 检查辅助功能权限，不足时请求一次、等待后复查
3. 解析提供商（未启用或没有 API Key 时停止）
4. 读取选中文字（仅截图请求使用占位文本）
5. 按需截图并压缩，失败只对仅截图请求是致命的
6. 调用提供商
7. 仅截图请求直接使用输出，其余从输出中提取 JSON 结果
8. 替换选中文字（仅截图请求在光标处插入）

第 2 步之后的全部工作在一个任务中运行，与总时限计时任务竞速，先完成者胜出，另一方被取消。
所有错误都转换为 Alert 展示，run() 不向外抛出异常。
"""

from __future__ import annotations

import asyncio
from typing import Optional

from config_enhancer import EnhancerConfig as Config
from enhancer.llm.llm_constants import PromptConstants
from enhancer.llm.llm_error_handler import build_alert, error_kind, log_error
from enhancer.llm.llm_events import ProcessingEvents
from enhancer.llm.llm_exceptions import (
    AccessibilityPermissionError,
    CaptureError,
    NoTextSelectedError,
    ProcessingTimeoutError,
)
from enhancer.llm.llm_interfaces import (
    AccessibilityPort,
    AlertPort,
    ScreenCapturePort,
    TextSelectionPort,
)
from enhancer.llm.llm_json_extractor import recover
from enhancer.llm.llm_provider_registry import ProviderRegistry
from enhancer.llm.llm_types import ProcessingResult
from . import logger


class ProcessingOrchestrator:
    """文本增强处理流程"""

    def __init__(
        self,
        registry: ProviderRegistry,
        selection: TextSelectionPort,
        screen: ScreenCapturePort,
        alerts: AlertPort,
        accessibility: AccessibilityPort,
        events: Optional[ProcessingEvents] = None,
        timeout: Optional[float] = None,
        permission_recheck_delay: Optional[float] = None,
    ):
        self.registry = registry
        self.selection = selection
        self.screen = screen
        self.alerts = alerts
        self.accessibility = accessibility
        self.events = events or ProcessingEvents()
        self.timeout = timeout if timeout is not None else Config.processing_timeout
        self.permission_recheck_delay = (
            permission_recheck_delay if permission_recheck_delay is not None
            else Config.permission_recheck_delay
        )

    async def run(self, binding) -> ProcessingResult:
        """
        处理一次快捷键触发

        Args:
            binding: 被触发的 Binding

        Returns:
            ProcessingResult，从不抛出异常（取消除外）
        """
        self.events.emit_started(binding)
        result = ProcessingResult.failure('cancelled')
        try:
            final_text = await self._race_timeout(binding)
            result = ProcessingResult.ok(final_text)
            logger.info(f"[{binding.name}] 处理完成，输出 {len(final_text)} 字符")
        except asyncio.CancelledError:
            logger.info(f"[{binding.name}] 处理被取消")
            raise
        except Exception as e:
            result = ProcessingResult.failure(error_kind(e))
            self._report(e, binding)
        finally:
            self.events.emit_finished(binding, result)
        return result

    async def _race_timeout(self, binding) -> str:
        work = asyncio.ensure_future(self._process(binding))
        timer = asyncio.ensure_future(asyncio.sleep(self.timeout))
        try:
            done, _ = await asyncio.wait({work, timer}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (work, timer):
                if not task.done():
                    task.cancel()

        if work in done:
            return work.result()

        # 等被取消的任务退出后再结束；已进入线程的阻塞调用（如粘贴）无法中断
        await asyncio.gather(work, return_exceptions=True)
        logger.warning(f"[{binding.name}] 处理超时（{self.timeout:g} 秒），放弃本次结果")
        raise ProcessingTimeoutError(self.timeout)

    async def _process(self, binding) -> str:
        await self._ensure_permission()

        provider = self.registry.resolve(binding.provider)

        if binding.screenshot_only:
            source_text = PromptConstants.SCREENSHOT_SENTINEL
        else:
            source_text = await self.selection.read()
            if not source_text or not source_text.strip():
                raise NoTextSelectedError()
            logger.info(f"[{binding.name}] 读取到选中文字 {len(source_text)} 字符")

        screenshot = None
        if binding.wants_screenshot:
            screenshot = await self._capture(binding)

        raw_text = await provider.enhance(source_text, binding.prompt, binding.model, screenshot)

        if binding.screenshot_only:
            final_text = raw_text.strip()
        else:
            final_text = recover(raw_text).enhanced_text

        await self.selection.replace(final_text)
        return final_text

    async def _ensure_permission(self):
        if self.accessibility.is_trusted():
            return

        logger.info("缺少辅助功能权限，请求授权")
        self.accessibility.request()
        await asyncio.sleep(self.permission_recheck_delay)

        if not self.accessibility.is_trusted():
            raise AccessibilityPermissionError()

    async def _capture(self, binding) -> Optional[bytes]:
        """截图并压缩；仅截图请求失败时抛出 CaptureError，其余返回 None"""
        try:
            image = await self.screen.capture_active_screen()
            if not image:
                raise CaptureError(technical_details='capture returned no data')
            compressed = await self.screen.compress(image)
            if not compressed:
                raise CaptureError(technical_details='compression returned no data')
        except CaptureError:
            if binding.screenshot_only:
                raise
            logger.warning(f"[{binding.name}] 截图失败，继续处理（不附带截图）")
            return None
        except Exception as e:
            if binding.screenshot_only:
                raise CaptureError(technical_details=f"{type(e).__name__}: {e}") from e
            logger.warning(f"[{binding.name}] 截图失败，继续处理（不附带截图）: {e}")
            return None

        logger.debug(f"[{binding.name}] 截图 {len(compressed)} 字节")
        return compressed

    def _report(self, error: Exception, binding):
        log_error(error, binding.name)
        try:
            self.alerts.show(build_alert(error))
        except Exception as e:
            logger.error(f"显示错误提示失败: {e}", exc_info=True)
