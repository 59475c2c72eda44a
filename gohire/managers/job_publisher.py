"""
职位发布引擎

机构角色创建职位：校验必填字段、规范化薪资、构建组合描述字段，
并执行一次 insert（不是 upsert）。
"""

import logging
from dataclasses import asdict
from typing import List, Optional

from ..interfaces import IRemoteGateway
from ..models import EMPTY, JobDraft, JobPosting, SaveResult
from ..exceptions import (
    GatewayException, SaveError, ValidationError, RemoteWriteError, wrap_exception
)
from ..validators.field_rules import first_violation, job_rules, parse_salary

logger = logging.getLogger(__name__)

JOBS_COLLECTION = 'jobs'


class JobPublisher:
    """职位发布引擎"""

    def __init__(self, gateway: IRemoteGateway, required_fields: Optional[List[str]] = None):
        """初始化职位发布引擎

        Args:
            gateway: 远程网关
            required_fields: 必填字段列表
        """
        self._gateway = gateway
        self._rules = job_rules(required_fields or ['title', 'education_level', 'contract_type'])

    def build_posting(self, identity: Optional[str], draft: JobDraft) -> JobPosting:
        """校验并构建职位记录

        Raises:
            ValidationError: 必填字段缺失或薪资无法解析
        """
        if not identity:
            raise ValidationError('institution_id', 'Sessão não iniciada.')

        violation = first_violation(self._rules, asdict(draft))
        if violation is not None:
            raise violation

        salary = parse_salary(draft.salary)

        return JobPosting(
            institution_id=identity,
            title=(draft.title or EMPTY).strip(),
            description=JobPosting.compose_description(
                draft.description or EMPTY, draft.requirements or EMPTY
            ),
            location=draft.location or EMPTY,
            salary=salary,
            education_level=draft.education_level or EMPTY,
            contract_type=draft.contract_type or EMPTY,
        )

    async def publish(self, identity: Optional[str], draft: JobDraft) -> SaveResult:
        """发布职位

        Args:
            identity: 机构身份
            draft: 表单输入

        Returns:
            SaveResult: 发布结果，成功时包含新记录 id
        """
        try:
            posting = self.build_posting(identity, draft)
            record = posting.to_record()

            created = await self._gateway.insert(JOBS_COLLECTION, record)

            record_id = str(created.get('id')) if created.get('id') is not None else None
            logger.info(f"Job {record_id} published by {identity}")
            return SaveResult.success(record, record_id=record_id)

        except SaveError as e:
            logger.info(f"Job submission rejected: {e.message}")
            return SaveResult.failure(e)

        except GatewayException as e:
            logger.error(f"Failed to publish job for {identity}: {e.message}")
            return SaveResult.failure(RemoteWriteError(e.message, details={'collection': JOBS_COLLECTION}))

        except Exception as e:
            wrapped = wrap_exception(e, "JobPublisher")
            logger.error(f"Unexpected error publishing job for {identity}: {wrapped.message}")
            return SaveResult.failure(RemoteWriteError(wrapped.message, details=wrapped.details))
