"""
教师资料表单协调器

加载已有资料填充表单（缺失字段为空字符串），提交时经对账引擎执行 upsert。
"""

import logging
from typing import Optional

from ..models import CONTRACT_TYPES, EDUCATION_LEVELS, PartialProfile, SaveResult
from ..exceptions import RemoteReadError
from ..managers.profile_reconciler import ProfileReconciler, PROFILES_COLLECTION
from .form_coordinator import FormCoordinator
from .session_controller import SessionController, SessionHandle, SessionState

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = 'Falha ao carregar seu perfil.'
SAVE_SUCCESS_MESSAGE = 'Perfil salvo com sucesso!'
SAVE_FAILED_MESSAGE = 'Não foi possível salvar seu perfil.'


class ProfileCoordinator(FormCoordinator):
    """教师资料表单协调器"""

    FIELDS = PartialProfile.field_names()
    CHOICES = {'education_level': EDUCATION_LEVELS, 'contract_type': CONTRACT_TYPES}

    def __init__(self, controller: SessionController, reconciler: ProfileReconciler):
        super().__init__(controller)
        self._reconciler = reconciler

    async def open(self, identity: Optional[str]) -> SessionHandle:
        handle = self.start(identity)
        await self.load(handle)
        return handle

    async def load(self, handle: SessionHandle) -> None:
        """读取资料并填充表单"""
        if handle.identity is None:
            self._controller.set_loading(handle, False)
            return

        self._controller.set_loading(handle, True)
        try:
            row = await self._controller.read_one(
                handle, PROFILES_COLLECTION, {'id': handle.identity}
            )
            if row:
                def _fill(state: SessionState) -> None:
                    for name in self.FIELDS:
                        value = row.get(name)
                        state.form[name] = '' if value is None else str(value)
                self._controller.apply(handle, _fill)

        except RemoteReadError as e:
            self._controller.record_failure(handle, e, LOAD_FAILED_MESSAGE)

        finally:
            self._controller.set_loading(handle, False)

    async def save(self, handle: SessionHandle) -> SaveResult:
        """提交表单；失败时表单保留用户编辑"""
        edits = PartialProfile.from_mapping(handle.state.form)

        self._begin_save(handle)
        result = await self._reconciler.submit(handle.identity, edits)
        self._finish_save(handle, result, SAVE_SUCCESS_MESSAGE, SAVE_FAILED_MESSAGE)
        return result
