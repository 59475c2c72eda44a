"""
校验器模块

包含资料表单与职位表单的字段校验规则。
"""

from .field_rules import (
    FieldRule, PROFILE_RULES, job_rules, first_violation, parse_salary
)

__all__ = [
    'FieldRule',
    'PROFILE_RULES',
    'job_rules',
    'first_violation',
    'parse_salary'
]
