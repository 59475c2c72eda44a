"""
异步会话控制器单元测试

测试会话生命周期、联合读取与会话结束后结果的丢弃。
"""

import asyncio

import pytest

from ...exceptions import RemoteReadError
from ...models import Feedback, FeedbackKind


class TestLifecycle:
    """会话生命周期测试"""

    def test_begin_and_end_session(self, controller):
        handle = controller.begin_session("prof-1")

        assert handle.is_active
        assert controller.active_sessions == 1

        controller.end_session(handle)

        assert not controller.is_active(handle)
        assert controller.active_sessions == 0
        assert handle.ended_at is not None

    def test_end_session_is_idempotent(self, controller):
        handle = controller.begin_session("prof-1")
        controller.end_session(handle)
        ended_at = handle.ended_at

        controller.end_session(handle)

        assert handle.ended_at == ended_at
        assert controller.active_sessions == 0

    def test_sessions_are_independent(self, controller):
        first = controller.begin_session("prof-1")
        second = controller.begin_session("prof-1")

        controller.end_session(first)

        assert first.session_id != second.session_id
        assert controller.apply(second, lambda state: setattr(state, "loading", True))
        assert second.state.loading


class TestApply:
    """结果应用测试"""

    def test_apply_after_end_is_discarded(self, controller):
        handle = controller.begin_session("prof-1")
        controller.end_session(handle)

        applied = controller.set_feedback(handle, Feedback.success("late"))

        assert applied is False
        assert handle.state.feedback is None
        assert controller.discarded_results == 1

    def test_record_failure_sets_error_feedback(self, controller):
        handle = controller.begin_session("prof-1")
        error = RemoteReadError("offline")

        assert controller.record_failure(handle, error, "Falha ao carregar o painel.")
        assert controller.failure(handle) is error
        assert handle.state.feedback.kind == FeedbackKind.ERROR

    def test_superseded_generation_is_discarded(self, controller):
        handle = controller.begin_session("prof-1")
        first = controller.next_generation(handle)
        second = controller.next_generation(handle)

        assert controller.set_loading(handle, True, second)
        assert controller.set_loading(handle, False, first) is False
        assert handle.state.loading is True
        assert controller.is_current(handle, second)
        assert controller.discarded_results == 1

    def test_snapshot_is_a_copy(self, controller):
        handle = controller.begin_session("prof-1")
        view = controller.snapshot(handle)

        view.applications.append("x")
        assert handle.state.applications == []


class TestReads:
    """会话内读取测试"""

    @pytest.mark.asyncio
    async def test_read_without_identity_is_not_issued(self, controller, gateway):
        handle = controller.begin_session(None)

        assert await controller.read(handle, "applications") == []
        assert await controller.read_one(handle, "profiles") is None
        assert gateway.calls == []

    @pytest.mark.asyncio
    async def test_read_after_end_is_not_issued(self, controller, gateway):
        handle = controller.begin_session("prof-1")
        controller.end_session(handle)

        assert await controller.read(handle, "applications") == []
        assert gateway.calls == []

    @pytest.mark.asyncio
    async def test_gateway_failure_becomes_remote_read_error(self, controller, gateway):
        gateway.fail("applications", "connection refused")
        handle = controller.begin_session("prof-1")

        with pytest.raises(RemoteReadError, match="connection refused"):
            await controller.read(handle, "applications", {"professor_id": "prof-1"})

    @pytest.mark.asyncio
    async def test_read_one_failure_becomes_remote_read_error(self, controller, gateway):
        gateway.rows["profiles"] = [{"id": "p"}, {"id": "p"}]
        handle = controller.begin_session("p")

        with pytest.raises(RemoteReadError):
            await controller.read_one(handle, "profiles", {"id": "p"})


class TestJoin:
    """联合读取测试"""

    @pytest.mark.asyncio
    async def test_join_returns_results_in_argument_order(self, controller, gateway):
        gateway.rows["applications"] = [{"id": "a1"}]
        gateway.rows["contracts"] = [{"status": "Ativo"}, {"status": "Pendente"}]
        handle = controller.begin_session("prof-1")

        applications, contracts = await controller.join(
            handle,
            controller.read(handle, "applications"),
            controller.read(handle, "contracts"),
        )

        assert len(applications) == 1
        assert len(contracts) == 2

    @pytest.mark.asyncio
    async def test_join_waits_for_every_read_before_failing(self, controller, gateway):
        """测试一个读取失败时仍等待另一个读取结束"""
        gate = gateway.gate("applications")
        gateway.fail("contracts", "contracts offline")
        handle = controller.begin_session("prof-1")

        join = asyncio.ensure_future(controller.join(
            handle,
            controller.read(handle, "applications"),
            controller.read(handle, "contracts"),
        ))
        await asyncio.sleep(0)
        await asyncio.sleep(0)

        assert not join.done()

        gate.set()
        with pytest.raises(RemoteReadError, match="contracts offline"):
            await join

    @pytest.mark.asyncio
    async def test_join_raises_first_failure_in_argument_order(self, controller, gateway):
        gateway.fail("applications", "first")
        gateway.fail("contracts", "second")
        handle = controller.begin_session("prof-1")

        with pytest.raises(RemoteReadError, match="first"):
            await controller.join(
                handle,
                controller.read(handle, "applications"),
                controller.read(handle, "contracts"),
            )

    @pytest.mark.asyncio
    async def test_join_wraps_unexpected_errors(self, controller):
        handle = controller.begin_session("prof-1")

        async def _broken():
            raise KeyError("jobs")

        with pytest.raises(RemoteReadError):
            await controller.join(handle, _broken())
