"""
表单会话协调器基类

管理表单字段的编辑、保存中状态与反馈；表单字段永远是字符串，
保存失败时保留用户尚未保存的编辑。
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from ..models import Feedback, FormView, SaveResult
from ..exceptions import ValidationError
from .session_controller import SessionController, SessionHandle, SessionState

logger = logging.getLogger(__name__)


class FormCoordinator:
    """表单会话协调器基类"""

    FIELDS: List[str] = []
    # 下拉字段的可选项 (value, label)
    CHOICES: Dict[str, List[Tuple[str, str]]] = {}

    def __init__(self, controller: SessionController):
        self._controller = controller

    def start(self, identity: Optional[str]) -> SessionHandle:
        """开始表单会话，所有字段初始化为空字符串"""
        handle = self._controller.begin_session(identity)
        self._controller.apply(handle, self._reset_form)
        return handle

    def close(self, handle: SessionHandle) -> None:
        self._controller.end_session(handle)

    def update(self, handle: SessionHandle, field_name: str, value: Any) -> bool:
        """更新表单字段，None 规范化为空字符串"""
        if field_name not in self.FIELDS:
            raise ValueError(f"Unknown form field: {field_name}")

        normalized = '' if value is None else str(value)

        def _set(state: SessionState) -> None:
            state.form[field_name] = normalized
        return self._controller.apply(handle, _set)

    def view(self, handle: SessionHandle) -> FormView:
        """表单会话对外可观察状态的快照"""
        state = handle.state
        return FormView(
            form=dict(state.form),
            loading=state.loading,
            saving=state.saving,
            feedback=state.feedback,
            choices=dict(self.CHOICES),
        )

    def _reset_form(self, state: SessionState) -> None:
        state.form = {name: '' for name in self.FIELDS}

    def _begin_save(self, handle: SessionHandle) -> None:
        def _set(state: SessionState) -> None:
            state.saving = True
            state.feedback = None
        self._controller.apply(handle, _set)

    def _finish_save(self, handle: SessionHandle, result: SaveResult,
                     success_message: str, remote_message: str) -> None:
        """根据保存结果设置反馈"""
        if result.ok:
            feedback = Feedback.success(success_message)
        elif isinstance(result.error, ValidationError):
            feedback = Feedback.error(result.error.message)
        else:
            feedback = Feedback.error(remote_message)

        def _set(state: SessionState) -> None:
            state.saving = False
            state.feedback = feedback
            if not result.ok:
                state.failure = result.error

        if not self._controller.apply(handle, _set):
            logger.debug(f"Save result for ended session {handle.session_id} discarded")
