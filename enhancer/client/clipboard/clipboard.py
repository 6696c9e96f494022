# coding: utf-8
"""
剪贴板与模拟按键

- read_text / write_text: pyclip 读写，失败不抛异常
- preserved(): 进入时记下剪贴板内容，退出时写回
- copy_selection / paste_clipboard: 模拟 复制 / 粘贴 快捷键（macOS 为 Command，其余为 Ctrl）
"""
import platform
from contextlib import contextmanager
from typing import Iterator, Union

import pyclip
from pynput import keyboard

from . import logger


# pyclip 在部分平台返回 bytes，按顺序尝试解码
CLIPBOARD_ENCODINGS = ('utf-8', 'gbk', 'utf-16', 'latin1')


def _decode(data: Union[str, bytes, None]) -> str:
    if data is None:
        return ''
    if isinstance(data, str):
        return data
    for encoding in CLIPBOARD_ENCODINGS:
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    logger.debug(f"无法解码剪贴板内容（{len(data)} 字节）")
    return ''


def read_text() -> str:
    """读取剪贴板文本，读取失败返回空字符串"""
    try:
        return _decode(pyclip.paste())
    except Exception as e:
        logger.warning(f"读取剪贴板失败: {e}")
        return ''


def write_text(text: str) -> bool:
    """写入剪贴板，返回是否成功"""
    try:
        pyclip.copy(text)
    except Exception as e:
        logger.warning(f"写入剪贴板失败: {e}")
        return False
    return True


@contextmanager
def preserved() -> Iterator[str]:
    """
    退出时恢复剪贴板

    用法:
        with preserved() as before:
            copy_selection()
            ...
    """
    before = read_text()
    try:
        yield before
    finally:
        write_text(before)


def _press(char: str) -> None:
    modifier = keyboard.Key.cmd if platform.system() == 'Darwin' else keyboard.Key.ctrl
    controller = keyboard.Controller()
    with controller.pressed(modifier):
        controller.tap(char)


def copy_selection() -> None:
    _press('c')


def paste_clipboard() -> None:
    _press('v')
