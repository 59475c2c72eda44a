"""
映射器模块

包含状态码到展示词汇的投影映射。
"""

from .status_mapper import StatusProjectionMapper, project, UNKNOWN_PROJECTION

__all__ = [
    'StatusProjectionMapper',
    'project',
    'UNKNOWN_PROJECTION'
]
