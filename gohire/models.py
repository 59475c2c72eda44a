"""
客户端核心数据模型定义

定义资料、职位、求职申请、合同、统计与视图状态等标准化数据模型，
确保网关记录与展示层之间的数据交换类型明确、无"缺失"表示。
"""

import json
import math
from dataclasses import dataclass, field, fields, asdict
from typing import Dict, List, Any, Optional, Tuple
from enum import Enum


EMPTY = ""


class ApplicationStatus(Enum):
    """求职申请状态枚举（封闭集合）"""
    ENVIADA = "Enviada"
    ACEITA = "Aceita"
    RECUSADA = "Recusada"


class ContractStatus(Enum):
    """合同状态枚举（封闭集合，与申请状态词汇不同）"""
    ATIVO = "Ativo"
    PENDENTE = "Pendente"
    RECUSADO = "Recusado"


class IconTag(Enum):
    """状态图标标记"""
    CLOCK = "clock"
    CHECK_CIRCLE = "check_circle"
    X_CIRCLE = "x_circle"
    UNKNOWN = "unknown"


class FeedbackKind(Enum):
    """反馈类型枚举"""
    SUCCESS = "success"
    ERROR = "error"


# 表单可选项 (value, label)
EDUCATION_LEVELS: List[Tuple[str, str]] = [
    ('educacao_infantil', 'Educação Infantil'),
    ('fundamental_i', 'Fundamental I'),
    ('fundamental_ii', 'Fundamental II'),
    ('medio', 'Ensino Médio'),
    ('tecnico', 'Técnico'),
    ('superior', 'Superior'),
]

CONTRACT_TYPES: List[Tuple[str, str]] = [
    ('temporario', 'Temporário'),
    ('substituicao', 'Substituição'),
    ('tempo_parcial', 'Tempo Parcial'),
    ('integral', 'Integral'),
    ('freelancer', 'Freelancer'),
]


@dataclass
class PartialProfile:
    """资料编辑集合，所有字段可选（None 表示未提供）"""
    full_name: Optional[str] = None
    phone: Optional[str] = None
    city_state: Optional[str] = None
    subjects: Optional[str] = None
    education_level: Optional[str] = None
    contract_type: Optional[str] = None
    bio: Optional[str] = None

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    @classmethod
    def from_mapping(cls, data: Optional[Dict[str, Any]]) -> 'PartialProfile':
        """从任意字典构建，忽略未知键"""
        data = data or {}
        return cls(**{name: data.get(name) for name in cls.field_names()})


@dataclass
class Profile:
    """教师资料数据模型

    id 与所属身份一致；任何属性都只能是字符串，缺省为空字符串。
    """
    id: str
    full_name: str = EMPTY
    phone: str = EMPTY
    city_state: str = EMPTY
    subjects: str = EMPTY
    education_level: str = EMPTY
    contract_type: str = EMPTY
    bio: str = EMPTY

    def __post_init__(self):
        """数据验证"""
        if not self.id:
            raise ValueError("Profile id cannot be empty")
        for f in fields(self):
            if not isinstance(getattr(self, f.name), str):
                raise ValueError(f"Profile field {f.name} must be a string")

    def to_record(self) -> Dict[str, str]:
        return asdict(self)


@dataclass
class JobDraft:
    """职位发布表单输入（自由文本）"""
    title: Optional[str] = EMPTY
    description: Optional[str] = EMPTY
    requirements: Optional[str] = EMPTY
    location: Optional[str] = EMPTY
    salary: Optional[str] = EMPTY
    education_level: Optional[str] = EMPTY
    contract_type: Optional[str] = EMPTY


@dataclass
class JobPosting:
    """职位数据模型"""
    institution_id: str
    title: str
    description: str = EMPTY  # 组合字段：{"description", "requirements"} 的 JSON
    location: str = EMPTY
    salary: Optional[float] = None
    education_level: str = EMPTY
    contract_type: str = EMPTY
    id: Optional[str] = None

    def __post_init__(self):
        """数据验证"""
        if not self.institution_id:
            raise ValueError("Institution id cannot be empty")
        if self.salary is not None:
            if isinstance(self.salary, bool) or not isinstance(self.salary, (int, float)):
                raise ValueError("Salary must be a number or None")
            if not math.isfinite(self.salary) or self.salary < 0:
                raise ValueError("Salary must be a non-negative finite number")

    @staticmethod
    def compose_description(description: str, requirements: str) -> str:
        """将描述与要求序列化为单一组合字段"""
        return json.dumps(
            {'description': description, 'requirements': requirements},
            ensure_ascii=False
        )

    @staticmethod
    def split_description(composite: Optional[str]) -> Tuple[str, str]:
        """拆分组合字段；非 JSON 内容视为纯描述"""
        if not composite:
            return EMPTY, EMPTY
        try:
            data = json.loads(composite)
        except (TypeError, ValueError):
            return composite, EMPTY
        if not isinstance(data, dict):
            return composite, EMPTY
        return str(data.get('description') or EMPTY), str(data.get('requirements') or EMPTY)

    def to_record(self) -> Dict[str, Any]:
        record = asdict(self)
        if record['id'] is None:
            del record['id']
        return record


@dataclass
class Application:
    """求职申请数据模型（只读投影）"""
    id: str
    status: str
    professor_id: Optional[str] = None
    job_id: Optional[str] = None
    job_title: Optional[str] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'Application':
        """从网关记录构建，兼容内嵌的 jobs(title) 关系"""
        job = record.get('jobs')
        if isinstance(job, list):
            job = job[0] if job else None
        job_title = job.get('title') if isinstance(job, dict) else None
        return cls(
            id=str(record.get('id', EMPTY)),
            status=record.get('status') or EMPTY,
            professor_id=record.get('professor_id'),
            job_id=record.get('job_id'),
            job_title=job_title,
        )


@dataclass
class Contract:
    """合同数据模型（只读投影）"""
    status: str
    professor_id: Optional[str] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'Contract':
        return cls(status=record.get('status') or EMPTY, professor_id=record.get('professor_id'))


@dataclass
class Stats:
    """仪表盘统计数据模型"""
    applications_count: int = 0
    active_count: int = 0
    pending_count: int = 0
    rejected_count: int = 0
    recent_applications: List[Application] = field(default_factory=list)

    def chart_series(self) -> List[Dict[str, Any]]:
        """饼图数据序列"""
        return [
            {'name': 'Candidaturas', 'value': self.applications_count},
            {'name': 'Contratos Ativos', 'value': self.active_count},
            {'name': 'Propostas Pendentes', 'value': self.pending_count},
            {'name': 'Propostas Recusadas', 'value': self.rejected_count},
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'applications_count': self.applications_count,
            'active_count': self.active_count,
            'pending_count': self.pending_count,
            'rejected_count': self.rejected_count,
            'chart': self.chart_series(),
        }


@dataclass(frozen=True)
class StatusProjection:
    """状态展示投影"""
    icon: IconTag
    label: str


@dataclass
class ProjectedApplication:
    """带展示信息的求职申请"""
    id: str
    title: str
    status: str
    icon: IconTag
    label: str
    badge: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'status': self.status,
            'icon': self.icon.value,
            'label': self.label,
            'badge': self.badge,
        }


@dataclass
class Feedback:
    """用户反馈"""
    kind: FeedbackKind
    message: str

    @classmethod
    def success(cls, message: str) -> 'Feedback':
        return cls(FeedbackKind.SUCCESS, message)

    @classmethod
    def error(cls, message: str) -> 'Feedback':
        return cls(FeedbackKind.ERROR, message)

    def to_dict(self) -> Dict[str, str]:
        return {'kind': self.kind.value, 'message': self.message}


@dataclass
class SessionView:
    """会话对外可观察状态"""
    stats: Optional[Stats] = None
    applications: List[ProjectedApplication] = field(default_factory=list)
    loading: bool = False
    feedback: Optional[Feedback] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'stats': self.stats.to_dict() if self.stats else None,
            'applications': [app.to_dict() for app in self.applications],
            'loading': self.loading,
            'feedback': self.feedback.to_dict() if self.feedback else None,
        }


@dataclass
class FormView:
    """表单会话对外可观察状态"""
    form: Dict[str, str] = field(default_factory=dict)
    loading: bool = False
    saving: bool = False
    feedback: Optional[Feedback] = None
    choices: Dict[str, List[Tuple[str, str]]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'form': dict(self.form),
            'loading': self.loading,
            'saving': self.saving,
            'feedback': self.feedback.to_dict() if self.feedback else None,
            'choices': {
                name: [{'value': value, 'label': label} for value, label in options]
                for name, options in self.choices.items()
            },
        }


@dataclass
class SaveResult:
    """保存结果"""
    ok: bool
    error: Optional[Any] = None  # SaveError
    record: Optional[Dict[str, Any]] = None
    record_id: Optional[str] = None

    @classmethod
    def success(cls, record: Dict[str, Any], record_id: Optional[str] = None) -> 'SaveResult':
        return cls(ok=True, record=record, record_id=record_id)

    @classmethod
    def failure(cls, error: Any) -> 'SaveResult':
        return cls(ok=False, error=error)
