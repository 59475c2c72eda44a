"""
异步工具函数

提供并发等待与计时相关的工具函数。
"""

import asyncio
import logging
from typing import Any, Awaitable, List, Optional, Sequence
from datetime import datetime, timedelta

logger = logging.getLogger(__name__)


async def gather_settled(*aws: Awaitable[Any]) -> List[Any]:
    """
    等待全部协程结束（成功或失败）

    Args:
        *aws: 可等待对象

    Returns:
        按参数顺序排列的结果列表，失败项为异常对象
    """
    return await asyncio.gather(*aws, return_exceptions=True)


def first_failure(results: Sequence[Any]) -> Optional[BaseException]:
    """
    按参数顺序返回第一个失败

    Args:
        results: gather_settled 的结果

    Returns:
        第一个异常，全部成功时为 None
    """
    for result in results:
        if isinstance(result, BaseException):
            return result
    return None


class AsyncTimer:
    """异步计时器"""

    def __init__(self):
        self.start_time: Optional[datetime] = None
        self.end_time: Optional[datetime] = None

    async def __aenter__(self):
        self.start_time = datetime.now()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.end_time = datetime.now()

    @property
    def elapsed(self) -> Optional[timedelta]:
        """获取执行时间"""
        if self.start_time is not None and self.end_time is not None:
            return self.end_time - self.start_time
        return None

    @property
    def elapsed_seconds(self) -> Optional[float]:
        """获取执行时间（秒）"""
        elapsed = self.elapsed
        return elapsed.total_seconds() if elapsed is not None else None
