"""
工具函数集合
"""

from .async_utils import gather_settled, first_failure, AsyncTimer

__all__ = [
    'gather_settled',
    'first_failure',
    'AsyncTimer'
]
