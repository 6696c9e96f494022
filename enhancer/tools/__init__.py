# coding: utf-8
"""
工具模块

模块架构：
- my_status: 可重入的 Rich Status
"""

from enhancer.tools.my_status import Status

__all__ = [
    'Status',
]
