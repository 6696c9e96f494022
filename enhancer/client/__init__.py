# coding: utf-8
"""
客户端模块

提供与操作系统交互的具体实现。

模块架构：
- clipboard/: 剪贴板与模拟按键
- selection/: 读取 / 替换选中的文字
- permission/: 辅助功能权限
- screen/: 截图与 JPEG 压缩
- shortcut/: 全局快捷键注册表
- ui/: 错误提示与状态显示
"""

from enhancer.logger import get_logger

logger = get_logger('enhancer')

__all__ = ['logger']
