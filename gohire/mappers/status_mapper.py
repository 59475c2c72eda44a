"""
状态投影映射器

将远程存储中的原始状态码映射为有限的展示词汇（图标 + 标签）。
映射对任意输入都有定义：未知状态码返回兜底投影而不是失败，
以容忍存储端与客户端状态词汇在未协同发布时的漂移。
"""

import logging
from typing import Any, Dict, Optional

from ..models import (
    Application, ApplicationStatus, ContractStatus, IconTag,
    ProjectedApplication, StatusProjection
)

logger = logging.getLogger(__name__)

UNKNOWN_PROJECTION = StatusProjection(IconTag.UNKNOWN, "Desconhecido")
UNTITLED_JOB = "Sem título"


class StatusProjectionMapper:
    """状态投影映射器"""

    APPLICATION_PROJECTIONS: Dict[ApplicationStatus, StatusProjection] = {
        ApplicationStatus.ENVIADA: StatusProjection(IconTag.CLOCK, "Enviada"),
        ApplicationStatus.ACEITA: StatusProjection(IconTag.CHECK_CIRCLE, "Aceita"),
        ApplicationStatus.RECUSADA: StatusProjection(IconTag.X_CIRCLE, "Recusada"),
    }

    CONTRACT_PROJECTIONS: Dict[ContractStatus, StatusProjection] = {
        ContractStatus.ATIVO: StatusProjection(IconTag.CHECK_CIRCLE, "Contrato Ativo"),
        ContractStatus.PENDENTE: StatusProjection(IconTag.CLOCK, "Proposta Pendente"),
        ContractStatus.RECUSADO: StatusProjection(IconTag.X_CIRCLE, "Proposta Recusada"),
    }

    BADGE_VARIANTS: Dict[ApplicationStatus, str] = {
        ApplicationStatus.ACEITA: "default",
        ApplicationStatus.RECUSADA: "destructive",
    }

    def project(self, status_code: Any) -> StatusProjection:
        """投影求职申请状态

        Args:
            status_code: 原始状态码，可以是任意值

        Returns:
            StatusProjection: 已知状态的投影，未知时为兜底投影
        """
        status = _lookup(ApplicationStatus, status_code)
        if status is None:
            logger.debug(f"Unknown application status: {status_code!r}")
            return UNKNOWN_PROJECTION
        return self.APPLICATION_PROJECTIONS[status]

    def project_contract(self, status_code: Any) -> StatusProjection:
        """投影合同状态"""
        status = _lookup(ContractStatus, status_code)
        if status is None:
            logger.debug(f"Unknown contract status: {status_code!r}")
            return UNKNOWN_PROJECTION
        return self.CONTRACT_PROJECTIONS[status]

    def badge_variant(self, status_code: Any) -> str:
        status = _lookup(ApplicationStatus, status_code)
        return self.BADGE_VARIANTS.get(status, "secondary")

    def project_application(self, application: Application) -> ProjectedApplication:
        """为单条求职申请附加展示信息"""
        projection = self.project(application.status)
        return ProjectedApplication(
            id=application.id,
            title=application.job_title or UNTITLED_JOB,
            status=application.status,
            icon=projection.icon,
            label=projection.label,
            badge=self.badge_variant(application.status),
        )


def _lookup(enum_cls, status_code: Any) -> Optional[Any]:
    if not isinstance(status_code, str):
        return None
    try:
        return enum_cls(status_code)
    except ValueError:
        return None


_default_mapper = StatusProjectionMapper()


def project(status_code: Any) -> StatusProjection:
    """使用默认映射器投影求职申请状态"""
    return _default_mapper.project(status_code)
