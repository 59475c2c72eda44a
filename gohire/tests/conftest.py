"""
测试配置和夹具

提供测试所需的通用配置、内存网关和协调器夹具。
"""

import asyncio
import itertools
from typing import Any, AsyncGenerator, Dict, List, Optional

import pytest
import pytest_asyncio

from ..config import HireConfig
from ..container import DIContainer, ServiceRegistry
from ..interfaces import IRemoteGateway
from ..exceptions import GatewayException
from ..coordinators.session_controller import SessionController
from ..coordinators.dashboard_coordinator import DashboardCoordinator
from ..coordinators.profile_coordinator import ProfileCoordinator
from ..coordinators.job_coordinator import JobCoordinator
from ..managers.profile_reconciler import ProfileReconciler
from ..managers.job_publisher import JobPublisher


PROFESSOR_ID = "prof-1"
INSTITUTION_ID = "inst-1"


class FakeGateway(IRemoteGateway):
    """内存网关

    按集合保存记录，支持注入失败和用 asyncio.Event 延迟读取结果。
    """

    def __init__(self, rows: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.rows: Dict[str, List[Dict[str, Any]]] = {
            name: [dict(row) for row in records] for name, records in (rows or {}).items()
        }
        self.calls: List[tuple] = []
        self.failures: Dict[str, Exception] = {}
        self.gates: Dict[str, asyncio.Event] = {}
        self._ids = itertools.count(1)

    def fail(self, collection: str, message: str = "boom") -> None:
        self.failures[collection] = GatewayException(message, collection=collection)

    def gate(self, collection: str) -> asyncio.Event:
        event = asyncio.Event()
        self.gates[collection] = event
        return event

    def calls_for(self, operation: str) -> List[tuple]:
        return [call for call in self.calls if call[0] == operation]

    async def _checkpoint(self, collection: str) -> None:
        gate = self.gates.get(collection)
        if gate is not None:
            await gate.wait()
        failure = self.failures.get(collection)
        if failure is not None:
            raise failure

    def _matching(self, collection: str, filters: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return [
            dict(row) for row in self.rows.get(collection, [])
            if all(row.get(key) == value for key, value in (filters or {}).items())
        ]

    async def read(self, collection, filters=None, columns="*"):
        self.calls.append(('read', collection, dict(filters or {}), columns))
        await self._checkpoint(collection)
        return self._matching(collection, filters)

    async def read_one(self, collection, filters=None, columns="*"):
        self.calls.append(('read_one', collection, dict(filters or {}), columns))
        await self._checkpoint(collection)
        rows = self._matching(collection, filters)
        if len(rows) > 1:
            raise GatewayException("multiple rows", collection=collection)
        return rows[0] if rows else None

    async def insert(self, collection, record):
        self.calls.append(('insert', collection, dict(record)))
        await self._checkpoint(collection)
        new_id = f"{collection}-{next(self._ids)}"
        self.rows.setdefault(collection, []).append(dict(record, id=new_id))
        return {'id': new_id}

    async def upsert(self, collection, record, conflict_key):
        self.calls.append(('upsert', collection, dict(record), conflict_key))
        await self._checkpoint(collection)
        records = self.rows.setdefault(collection, [])
        for index, existing in enumerate(records):
            if existing.get(conflict_key) == record.get(conflict_key):
                records[index] = dict(record)
                return
        records.append(dict(record))

    async def disconnect(self) -> None:
        self.calls.append(('disconnect',))


@pytest.fixture
def test_config() -> HireConfig:
    """测试配置"""
    config = HireConfig(environment="testing")

    # 覆盖测试特定配置
    config.set('gateway.supabase_url', 'https://example.supabase.co')
    config.set('gateway.anon_key', 'anon-test-key')
    config.set('logging.file', 'logs/gohire_test.log')

    return config


@pytest.fixture
def gateway() -> FakeGateway:
    """内存网关"""
    return FakeGateway()


@pytest.fixture
def controller(gateway: FakeGateway) -> SessionController:
    return SessionController(gateway)


@pytest.fixture
def dashboard(controller: SessionController, test_config: HireConfig) -> DashboardCoordinator:
    return DashboardCoordinator(controller, test_config)


@pytest.fixture
def profile_coordinator(controller: SessionController, gateway: FakeGateway) -> ProfileCoordinator:
    return ProfileCoordinator(controller, ProfileReconciler(gateway))


@pytest.fixture
def job_coordinator(controller: SessionController, gateway: FakeGateway) -> JobCoordinator:
    return JobCoordinator(controller, JobPublisher(gateway))


@pytest_asyncio.fixture
async def di_container(test_config: HireConfig, gateway: FakeGateway) -> AsyncGenerator[DIContainer, None]:
    """依赖注入容器，使用内存网关"""
    container = DIContainer()
    await ServiceRegistry.register_core_services(container, test_config, gateway)
    yield container


@pytest.fixture
def sample_rows() -> Dict[str, List[Dict[str, Any]]]:
    """示例网关数据"""
    return {
        'applications': [
            {'id': 'a1', 'status': 'Enviada', 'professor_id': PROFESSOR_ID,
             'job_id': 'j1', 'jobs': {'title': 'Professor de Matemática'}},
            {'id': 'a2', 'status': 'Aceita', 'professor_id': PROFESSOR_ID,
             'job_id': 'j2', 'jobs': {'title': 'Professor de História'}},
            {'id': 'a3', 'status': 'Recusada', 'professor_id': PROFESSOR_ID,
             'job_id': 'j3', 'jobs': None},
            {'id': 'x1', 'status': 'Enviada', 'professor_id': 'someone-else',
             'job_id': 'j1', 'jobs': {'title': 'Professor de Matemática'}},
        ],
        'contracts': [
            {'status': 'Ativo', 'professor_id': PROFESSOR_ID},
            {'status': 'Pendente', 'professor_id': PROFESSOR_ID},
            {'status': 'Pendente', 'professor_id': PROFESSOR_ID},
            {'status': 'Cancelado', 'professor_id': PROFESSOR_ID},
            {'status': 'Ativo', 'professor_id': 'someone-else'},
        ],
    }


# 测试配置
def pytest_configure(config):
    """pytest配置"""
    config.addinivalue_line(
        "markers", "unit: 单元测试"
    )
    config.addinivalue_line(
        "markers", "integration: 集成测试"
    )


# 测试收集配置
def pytest_collection_modifyitems(config, items):
    """根据文件路径添加标记"""
    for item in items:
        if "unit" in str(item.path):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.path):
            item.add_marker(pytest.mark.integration)
