"""
表单字段校验规则单元测试
"""

import pytest

from ...exceptions import ValidationError
from ...validators.field_rules import (
    PROFILE_RULES, SALARY_MESSAGE, first_violation, job_rules, not_blank, not_empty, parse_salary
)


def test_not_blank_and_not_empty():
    assert not_blank("Ana")
    assert not not_blank("  ")
    assert not not_blank(None)
    assert not_empty(" ")
    assert not not_empty("")
    assert not not_empty(None)


def test_first_violation_follows_declaration_order():
    violation = first_violation(PROFILE_RULES, {"full_name": "", "contract_type": ""})

    assert violation.field == "full_name"
    assert first_violation(PROFILE_RULES, {
        "full_name": "Ana", "education_level": "medio", "contract_type": "integral"
    }) is None


def test_job_rules_message_lists_labels():
    assert job_rules(["title"])[0].message == "Preencha título."
    assert job_rules(["title", "education_level", "contract_type"])[0].message == \
        "Preencha título, nível e tipo de contrato."
    assert job_rules(["custom"])[0].message == "Preencha custom."


@pytest.mark.parametrize("raw, expected", [
    (None, None),
    ("", None),
    ("   ", None),
    ("2500", 2500.0),
    (" 2500.75 ", 2500.75),
    ("2500,75", 2500.75),
    (0, 0.0),
    (1200, 1200.0),
])
def test_parse_salary(raw, expected):
    assert parse_salary(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "1.000,50", "-1", "NaN", "Infinity", True, float("inf")])
def test_parse_salary_rejects(raw):
    with pytest.raises(ValidationError) as excinfo:
        parse_salary(raw)

    assert excinfo.value.field == "salary"
    assert excinfo.value.message == SALARY_MESSAGE
