# coding: utf-8
"""
终端输出

全局 Rich console，供提示框、状态动画和命令行输出共用。
"""

from rich.console import Console
from rich.theme import Theme


_theme = Theme({
    'alert.title': 'bold red',
    'alert.settings': 'yellow',
    'alert.details': 'dim',
})
console = Console(highlight=False, soft_wrap=True, theme=_theme)
