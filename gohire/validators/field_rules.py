"""
表单字段校验规则

以声明式规则描述资料表单与职位表单的前置条件，
按声明顺序返回第一条违反的规则；校验在任何远程调用之前完成。
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..exceptions import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldRule:
    """字段校验规则"""
    field: str
    check: Callable[[Any], bool]
    message: str


def not_blank(value: Any) -> bool:
    """去除首尾空白后非空"""
    return isinstance(value, str) and value.strip() != ''


def not_empty(value: Any) -> bool:
    """非 None 且非空字符串"""
    return value is not None and value != ''


PROFILE_RULES: List[FieldRule] = [
    FieldRule('full_name', not_blank, 'Informe seu nome completo.'),
    FieldRule('education_level', not_empty, 'Selecione o nível de ensino.'),
    FieldRule('contract_type', not_empty, 'Selecione o tipo de contrato.'),
]

JOB_FIELD_LABELS: Dict[str, str] = {
    'title': 'título',
    'description': 'descrição',
    'requirements': 'requisitos',
    'location': 'localização',
    'education_level': 'nível',
    'contract_type': 'tipo de contrato',
}

SALARY_MESSAGE = 'Informe um salário numérico válido.'


def job_rules(required_fields: Sequence[str]) -> List[FieldRule]:
    """按配置的必填字段构建职位表单规则，所有规则共用一条提示"""
    labels = [JOB_FIELD_LABELS.get(name, name) for name in required_fields]
    if len(labels) > 1:
        listing = f"{', '.join(labels[:-1])} e {labels[-1]}"
    else:
        listing = ''.join(labels)
    message = f"Preencha {listing}."
    return [FieldRule(name, not_blank, message) for name in required_fields]


def first_violation(rules: Sequence[FieldRule], values: Dict[str, Any]) -> Optional[ValidationError]:
    """返回第一条违反的规则对应的校验异常

    Args:
        rules: 校验规则
        values: 字段值

    Returns:
        Optional[ValidationError]: 全部通过时为 None
    """
    for rule in rules:
        if not rule.check(values.get(rule.field)):
            logger.debug(f"Field rule violated: {rule.field}")
            return ValidationError(rule.field, rule.message)
    return None


def parse_salary(raw: Any) -> Optional[float]:
    """将自由文本薪资规范化为数值或 None

    空白输入视为未填写；非数值、非有限或负数输入抛出 ValidationError。
    """
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ValidationError('salary', SALARY_MESSAGE)

    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip()
        if not text:
            return None
        if ',' in text and '.' not in text:
            text = text.replace(',', '.')
        try:
            value = float(text)
        except ValueError:
            raise ValidationError('salary', SALARY_MESSAGE)

    if not math.isfinite(value) or value < 0:
        raise ValidationError('salary', SALARY_MESSAGE)
    return value
