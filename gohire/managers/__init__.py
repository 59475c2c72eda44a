"""
管理器模块

包含统计聚合、资料对账与职位发布等核心组件。
"""

from .stats_aggregator import aggregate
from .profile_reconciler import ProfileReconciler, normalize_profile
from .job_publisher import JobPublisher

__all__ = [
    'aggregate',
    'ProfileReconciler',
    'normalize_profile',
    'JobPublisher'
]
