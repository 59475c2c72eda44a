"""
生命周期安全的异步会话控制器

将并发的网关读取绑定到视图会话：结果只在会话仍然有效时写入会话状态，
会话结束后到达的结果被静默丢弃。取消是建议性的，进行中的远程调用不会被中止，
只是其效果被抑制。控制器不做重试，也不设超时。
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from ..interfaces import IRemoteGateway
from ..models import Feedback, ProjectedApplication, SessionView, Stats
from ..exceptions import GatewayException, HireException, RemoteReadError, wrap_exception
from ..utils.async_utils import AsyncTimer, first_failure, gather_settled

logger = logging.getLogger(__name__)


@dataclass
class SessionState:
    """会话内可变状态，仅由控制器写入"""
    stats: Optional[Stats] = None
    applications: List[ProjectedApplication] = field(default_factory=list)
    loading: bool = False
    feedback: Optional[Feedback] = None
    failure: Optional[HireException] = None
    form: Dict[str, str] = field(default_factory=dict)
    saving: bool = False
    generation: int = 0  # 每次重新加载递增，旧的加载结果据此丢弃


class SessionHandle:
    """视图会话句柄

    结构化的取消令牌：控制器在应用任何结果之前查询 is_active。
    """

    def __init__(self, identity: Optional[str]):
        self.session_id = str(uuid.uuid4())
        self.identity = identity
        self.started_at = datetime.now()
        self.ended_at: Optional[datetime] = None
        self._state = SessionState()

    @property
    def is_active(self) -> bool:
        return self.ended_at is None

    @property
    def state(self) -> SessionState:
        return self._state

    def __repr__(self) -> str:
        status = "active" if self.is_active else "ended"
        return f"SessionHandle({self.session_id[:8]}, identity={self.identity!r}, {status})"


class SessionController:
    """异步会话控制器"""

    def __init__(self, gateway: IRemoteGateway):
        """初始化会话控制器

        Args:
            gateway: 远程网关
        """
        self._gateway = gateway
        self._sessions: Dict[str, SessionHandle] = {}
        self._discarded_results = 0

        logger.info("SessionController initialized")

    # --- 生命周期 ---

    def begin_session(self, identity: Optional[str]) -> SessionHandle:
        """开始会话

        Args:
            identity: 当前身份，None 表示无会话身份，不会发起读写

        Returns:
            SessionHandle: 会话句柄
        """
        handle = SessionHandle(identity)
        self._sessions[handle.session_id] = handle
        logger.debug(f"Session {handle.session_id} started for {identity!r}")
        return handle

    def end_session(self, handle: SessionHandle) -> None:
        """结束会话，重复结束为空操作"""
        if not handle.is_active:
            return
        handle.ended_at = datetime.now()
        self._sessions.pop(handle.session_id, None)
        logger.debug(f"Session {handle.session_id} ended")

    def is_active(self, handle: SessionHandle) -> bool:
        return handle.is_active

    @property
    def active_sessions(self) -> int:
        return len(self._sessions)

    @property
    def discarded_results(self) -> int:
        return self._discarded_results

    # --- 读取 ---

    async def read(self, handle: SessionHandle, collection: str,
                   filters: Optional[Dict[str, Any]] = None,
                   columns: str = "*") -> List[Dict[str, Any]]:
        """在会话内读取集合

        会话已结束或没有身份时不发起调用，返回空列表。

        Raises:
            RemoteReadError: 网关读取失败
        """
        if not self._may_issue(handle, collection):
            return []

        async with AsyncTimer() as timer:
            try:
                rows = await self._gateway.read(collection, filters, columns)
            except GatewayException as e:
                raise RemoteReadError(e.message, details={'collection': collection}) from e

        logger.debug(f"Read {collection} for session {handle.session_id} in {timer.elapsed_seconds}s")
        return rows

    async def read_one(self, handle: SessionHandle, collection: str,
                       filters: Optional[Dict[str, Any]] = None,
                       columns: str = "*") -> Optional[Dict[str, Any]]:
        """在会话内读取至多一条记录

        Raises:
            RemoteReadError: 网关读取失败
        """
        if not self._may_issue(handle, collection):
            return None

        try:
            return await self._gateway.read_one(collection, filters, columns)
        except GatewayException as e:
            raise RemoteReadError(e.message, details={'collection': collection}) from e

    async def join(self, handle: SessionHandle, *reads: Awaitable[Any]) -> Tuple[Any, ...]:
        """联合读取

        等待所有读取结束后才返回；任一失败时抛出按参数顺序的第一个失败，
        否则返回成功结果的元组。

        Raises:
            RemoteReadError: 任一读取失败
        """
        results = await gather_settled(*reads)
        failure = first_failure(results)

        if failure is not None:
            logger.warning(f"Joined read failed for session {handle.session_id}: {failure}")
            if isinstance(failure, RemoteReadError):
                raise failure
            if isinstance(failure, GatewayException):
                raise RemoteReadError(failure.message) from failure
            if isinstance(failure, Exception):
                raise RemoteReadError(wrap_exception(failure, "SessionController").message) from failure
            raise failure

        return tuple(results)

    def _may_issue(self, handle: SessionHandle, collection: str) -> bool:
        if handle.identity is None:
            logger.debug(f"No identity for session {handle.session_id}, skipping read of {collection}")
            return False
        if not handle.is_active:
            logger.debug(f"Session {handle.session_id} ended, skipping read of {collection}")
            return False
        return True

    # --- 结果应用 ---

    def next_generation(self, handle: SessionHandle) -> int:
        """开始新一轮加载，此前各轮的结果此后都将被丢弃

        Returns:
            int: 本轮加载的代号
        """
        handle.state.generation += 1
        return handle.state.generation

    def is_current(self, handle: SessionHandle, generation: Optional[int] = None) -> bool:
        """会话有效，且指定的加载代号仍是最新一轮"""
        if not handle.is_active:
            return False
        return generation is None or handle.state.generation == generation

    def apply(self, handle: SessionHandle, mutator: Callable[[SessionState], None],
              generation: Optional[int] = None) -> bool:
        """仅在会话有效时应用结果

        Args:
            handle: 会话句柄
            mutator: 状态修改函数
            generation: 结果所属的加载代号，已被新一轮加载取代时丢弃

        Returns:
            bool: 是否已应用；会话结束或结果已过期时丢弃并返回 False
        """
        if not self.is_current(handle, generation):
            self._discarded_results += 1
            logger.debug(f"Discarding stale result for session {handle.session_id}")
            return False
        mutator(handle.state)
        return True

    def set_loading(self, handle: SessionHandle, loading: bool,
                    generation: Optional[int] = None) -> bool:
        def _set(state: SessionState) -> None:
            state.loading = loading
        return self.apply(handle, _set, generation)

    def set_feedback(self, handle: SessionHandle, feedback: Optional[Feedback]) -> bool:
        def _set(state: SessionState) -> None:
            state.feedback = feedback
        return self.apply(handle, _set)

    def record_failure(self, handle: SessionHandle, error: HireException, message: str,
                       generation: Optional[int] = None) -> bool:
        """记录失败状态并设置错误反馈"""
        def _set(state: SessionState) -> None:
            state.failure = error
            state.feedback = Feedback.error(message)
        applied = self.apply(handle, _set, generation)
        if applied:
            logger.error(f"Session {handle.session_id} failed: {error.message}")
        return applied

    def failure(self, handle: SessionHandle) -> Optional[HireException]:
        """获取会话记录的失败"""
        return handle.state.failure

    def snapshot(self, handle: SessionHandle) -> SessionView:
        """会话对外可观察状态的快照"""
        state = handle.state
        return SessionView(
            stats=state.stats,
            applications=list(state.applications),
            loading=state.loading,
            feedback=state.feedback,
        )
