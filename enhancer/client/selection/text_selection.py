# coding: utf-8
"""
选中文字的读取与替换

读取：
1. 保存当前剪贴板内容
2. 模拟 Ctrl+C 复制选中的文字，等待剪贴板更新
3. 读取新的剪贴板内容，并还原原来的内容
4. 内容没有变化说明没有选中文字

替换：写入剪贴板后模拟 Ctrl+V，不恢复剪贴板。
"""

from __future__ import annotations

import asyncio
import time
from typing import Optional

from config_enhancer import EnhancerConfig as Config
from enhancer.client.clipboard import (
    copy_selection,
    paste_clipboard,
    preserved,
    read_text,
    write_text,
)
from . import logger


class ClipboardTextSelection:
    """基于剪贴板和模拟按键的 TextSelectionPort 实现"""

    def __init__(self, copy_wait: Optional[float] = None, paste_delay: Optional[float] = None):
        """
        Args:
            copy_wait: 模拟复制后等待剪贴板更新的时间（秒）
            paste_delay: 写入剪贴板到模拟粘贴之间的间隔（秒）
        """
        self.copy_wait = Config.copy_wait if copy_wait is None else copy_wait
        self.paste_delay = Config.paste_delay if paste_delay is None else paste_delay

    def read_sync(self) -> str:
        """获取用户当前选中的文字，没有选中时返回空字符串"""
        with preserved() as original:
            copy_selection()
            time.sleep(self.copy_wait)
            selected = read_text()

        if selected == original:
            logger.debug("剪贴板内容未变化，视为没有选中文字")
            return ""
        return selected

    def replace_sync(self, text: str) -> None:
        """用 text 替换当前选中的文字（没有选中时插入到光标处）"""
        if not write_text(text):
            raise OSError("写入剪贴板失败")
        time.sleep(self.paste_delay)
        paste_clipboard()
        logger.debug(f"已粘贴文本，长度: {len(text)}")

    async def read(self) -> str:
        return await asyncio.to_thread(self.read_sync)

    async def replace(self, text: str) -> None:
        await asyncio.to_thread(self.replace_sync, text)
