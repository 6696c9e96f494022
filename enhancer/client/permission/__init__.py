# coding: utf-8
"""
权限子模块

检查和请求操作系统辅助功能权限。
"""

from .. import logger
from enhancer.client.permission.accessibility import AccessibilityPermission

__all__ = [
    'logger',
    'AccessibilityPermission',
]
