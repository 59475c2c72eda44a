"""
资料对账（Upsert）引擎

将部分编辑集合规范化为完整资料记录，并以身份为主键执行一次 upsert。
同样的编辑重复提交只会覆盖同一条记录，不会产生重复。
"""

import logging
from typing import Optional

from ..interfaces import IRemoteGateway
from ..models import EMPTY, PartialProfile, Profile, SaveResult
from ..exceptions import (
    GatewayException, SaveError, ValidationError, RemoteWriteError, wrap_exception
)
from ..validators.field_rules import PROFILE_RULES, first_violation

logger = logging.getLogger(__name__)

PROFILES_COLLECTION = 'profiles'
PROFILE_CONFLICT_KEY = 'id'


def normalize_profile(identity: str, edits: PartialProfile) -> Profile:
    """将缺失或 None 的字段规范化为空字符串"""
    values = {
        name: EMPTY if getattr(edits, name) is None else str(getattr(edits, name))
        for name in PartialProfile.field_names()
    }
    return Profile(id=identity, **values)


class ProfileReconciler:
    """资料对账引擎

    前置条件校验 -> 规范化 -> 单次 upsert；失败不重试，
    远程存储保证 upsert 的原子性。
    """

    def __init__(self, gateway: IRemoteGateway):
        """初始化对账引擎

        Args:
            gateway: 远程网关
        """
        self._gateway = gateway

    def validate(self, identity: Optional[str], edits: PartialProfile) -> None:
        """校验前置条件

        Raises:
            ValidationError: 任一前置条件不满足
        """
        if not identity:
            raise ValidationError('id', 'Sessão não iniciada.')

        violation = first_violation(PROFILE_RULES, vars(edits))
        if violation is not None:
            raise violation

    async def submit(self, identity: Optional[str], edits: PartialProfile) -> SaveResult:
        """提交资料编辑

        Args:
            identity: 当前身份
            edits: 部分编辑集合

        Returns:
            SaveResult: 保存结果，不会向外抛出异常
        """
        try:
            self.validate(identity, edits)
            profile = normalize_profile(identity, edits)
            record = profile.to_record()

            await self._gateway.upsert(PROFILES_COLLECTION, record, PROFILE_CONFLICT_KEY)

            logger.info(f"Profile {identity} saved")
            return SaveResult.success(record, record_id=identity)

        except SaveError as e:
            logger.info(f"Profile submission rejected: {e.message}")
            return SaveResult.failure(e)

        except GatewayException as e:
            logger.error(f"Failed to save profile {identity}: {e.message}")
            return SaveResult.failure(RemoteWriteError(e.message, details={'collection': PROFILES_COLLECTION}))

        except Exception as e:
            wrapped = wrap_exception(e, "ProfileReconciler")
            logger.error(f"Unexpected error saving profile {identity}: {wrapped.message}")
            return SaveResult.failure(RemoteWriteError(wrapped.message, details=wrapped.details))
