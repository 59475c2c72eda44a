"""
教师仪表盘协调器

并发读取当前身份的求职申请与合同，两者都结束后才进行聚合；
任一读取失败则不基于部分结果计算统计。
"""

import logging
from typing import Optional

from ..config import HireConfig
from ..models import Application, Contract, SessionView
from ..exceptions import RemoteReadError
from ..managers.stats_aggregator import aggregate
from ..mappers.status_mapper import StatusProjectionMapper
from .session_controller import SessionController, SessionHandle, SessionState

logger = logging.getLogger(__name__)

APPLICATIONS_COLLECTION = 'applications'
CONTRACTS_COLLECTION = 'contracts'
LOAD_FAILED_MESSAGE = 'Falha ao carregar o painel.'


class DashboardCoordinator:
    """教师仪表盘协调器"""

    def __init__(self, controller: SessionController, config: HireConfig,
                 mapper: Optional[StatusProjectionMapper] = None):
        """初始化仪表盘协调器

        Args:
            controller: 会话控制器
            config: 客户端配置
            mapper: 状态投影映射器
        """
        self._controller = controller
        self._config = config
        self._mapper = mapper or StatusProjectionMapper()

    def start(self, identity: Optional[str]) -> SessionHandle:
        """开始仪表盘会话，不发起读取"""
        return self._controller.begin_session(identity)

    async def open(self, identity: Optional[str]) -> SessionHandle:
        """开始会话并加载数据"""
        handle = self.start(identity)
        await self.load(handle)
        return handle

    async def load(self, handle: SessionHandle) -> None:
        """加载仪表盘数据

        加载状态一直保持到联合读取结束（成功或失败）。
        重新加载会取代尚未结束的旧加载，旧加载的结果与加载状态都不再写入。
        """
        identity = handle.identity
        if identity is None:
            self._controller.set_loading(handle, False)
            return

        dashboard = self._config.dashboard
        generation = self._controller.next_generation(handle)
        self._controller.set_loading(handle, True, generation)

        try:
            application_rows, contract_rows = await self._controller.join(
                handle,
                self._controller.read(
                    handle, APPLICATIONS_COLLECTION,
                    {'professor_id': identity}, dashboard.applications_columns
                ),
                self._controller.read(
                    handle, CONTRACTS_COLLECTION,
                    {'professor_id': identity}, dashboard.contracts_columns
                ),
            )

            try:
                applications = [Application.from_record(row) for row in application_rows]
                contracts = [Contract.from_record(row) for row in contract_rows]
            except (AttributeError, TypeError) as e:
                raise RemoteReadError(
                    f"Malformed dashboard rows: {e}", {'identity': identity}
                ) from e

            stats = aggregate(applications, contracts, dashboard.recent_applications_limit)
            projected = [self._mapper.project_application(app) for app in stats.recent_applications]

            def _apply(state: SessionState) -> None:
                state.stats = stats
                state.applications = projected
                state.failure = None
                state.feedback = None

            if self._controller.apply(handle, _apply, generation):
                logger.info(
                    f"Dashboard loaded for {identity}: {stats.applications_count} applications, "
                    f"{len(contracts)} contracts"
                )

        except RemoteReadError as e:
            self._controller.record_failure(handle, e, LOAD_FAILED_MESSAGE, generation)

        finally:
            self._controller.set_loading(handle, False, generation)

    def view(self, handle: SessionHandle) -> SessionView:
        """统计、预览列表、加载状态与反馈"""
        return self._controller.snapshot(handle)

    def close(self, handle: SessionHandle) -> None:
        self._controller.end_session(handle)
