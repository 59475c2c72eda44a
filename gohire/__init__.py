"""
GO! HIRE 客户端核心模块

连接教师（professor）与机构（institution）角色，提供职位、求职申请与合同的
并发读取、统计聚合、资料 upsert 以及视图会话生命周期管理。

注意：为避免在包导入阶段引入 aiohttp 等依赖，此文件不进行子模块的聚合导入。
请从对应子模块中显式导入所需组件，例如：
- from gohire.config import HireConfig
- from gohire.coordinators.session_controller import SessionController
- from gohire.managers.stats_aggregator import aggregate
- from gohire.managers.profile_reconciler import ProfileReconciler
"""

__version__ = "1.0.0"
__author__ = "GO! HIRE Team"

__all__: list[str] = []
