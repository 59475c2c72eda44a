"""
职位发布表单协调器
"""

import logging
from dataclasses import fields

from ..models import CONTRACT_TYPES, EDUCATION_LEVELS, JobDraft, SaveResult
from ..managers.job_publisher import JobPublisher
from .form_coordinator import FormCoordinator
from .session_controller import SessionController, SessionHandle

logger = logging.getLogger(__name__)


class JobCoordinator(FormCoordinator):
    """职位发布表单协调器，发布成功后清空表单"""

    FIELDS = [f.name for f in fields(JobDraft)]
    CHOICES = {'education_level': EDUCATION_LEVELS, 'contract_type': CONTRACT_TYPES}

    def __init__(self, controller: SessionController, publisher: JobPublisher):
        super().__init__(controller)
        self._publisher = publisher

    async def publish(self, handle: SessionHandle) -> SaveResult:
        draft = JobDraft(**{name: handle.state.form.get(name, '') for name in self.FIELDS})

        self._begin_save(handle)
        result = await self._publisher.publish(handle.identity, draft)

        title = (draft.title or '').strip()
        remote_message = f"Erro ao criar vaga: {result.error.message}" if result.error else ''
        self._finish_save(handle, result, f'A vaga "{title}" foi publicada.', remote_message)

        if result.ok:
            self._controller.apply(handle, self._reset_form)
        return result
