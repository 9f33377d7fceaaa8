from __future__ import annotations

import re

import pytest

from appraisal.services.identifiers import (
    department_abbreviation,
    employee_id_candidate,
    form_id_candidate,
    generate_employee_id,
    generate_form_id,
    role_abbreviation,
    to_base36,
)


def test_role_abbreviation_takes_initials():
    assert role_abbreviation("assistant-manager") == "AM"
    assert role_abbreviation("junior-dev") == "JD"
    assert role_abbreviation("manager") == "M"


def test_department_abbreviation_uses_first_three_chars():
    assert department_abbreviation("Engineering") == "ENG"
    assert department_abbreviation("hr") == "HR"


def test_employee_id_candidate_format():
    candidate = employee_id_candidate("assistant-manager", "Engineering")
    assert re.fullmatch(r"AM-ENG-[A-F0-9]{8}", candidate)


def test_to_base36():
    assert to_base36(0) == "0"
    assert to_base36(35) == "Z"
    assert to_base36(36) == "10"
    assert to_base36(36**3) == "1000"


def test_to_base36_rejects_negative():
    with pytest.raises(ValueError):
        to_base36(-1)


def test_form_id_candidate_uses_clock_suffix():
    now_ms = 36**4 + 1 * 36**3 + 2 * 36**2 + 3 * 36 + 4  # "11234" in base 36
    candidate = form_id_candidate(now_ms=now_ms)
    assert re.fullmatch(r"FORM-[0-9A-Z]{4}1234", candidate)


def test_form_id_candidate_custom_prefix():
    assert form_id_candidate("TPL").startswith("TPL-")
    assert re.fullmatch(r"TPL-[0-9A-Z]{8}", form_id_candidate("TPL"))


@pytest.mark.anyio
async def test_generate_employee_id_retries_on_collision(monkeypatch):
    candidates = iter(["JD-ENG-AAAAAAAA", "JD-ENG-BBBBBBBB"])
    monkeypatch.setattr(
        "appraisal.services.identifiers.employee_id_candidate",
        lambda role, department: next(candidates),
    )
    taken = {"JD-ENG-AAAAAAAA"}

    async def is_taken(candidate: str) -> bool:
        return candidate in taken

    assert await generate_employee_id("junior-dev", "Engineering", is_taken) == "JD-ENG-BBBBBBBB"


@pytest.mark.anyio
async def test_generated_employee_ids_are_unique_against_recorded_ids():
    seen: set[str] = set()

    async def is_taken(candidate: str) -> bool:
        return candidate in seen

    for _ in range(200):
        employee_id = await generate_employee_id("senior-dev", "Finance", is_taken)
        assert employee_id not in seen
        assert re.fullmatch(r"SD-FIN-[A-F0-9]{8}", employee_id)
        seen.add(employee_id)


@pytest.mark.anyio
async def test_generated_form_ids_are_unique_against_recorded_ids():
    seen: set[str] = set()

    async def is_taken(candidate: str) -> bool:
        return candidate in seen

    for _ in range(200):
        form_id = await generate_form_id(is_taken)
        assert form_id not in seen
        assert re.fullmatch(r"FORM-[0-9A-Z]{8}", form_id)
        seen.add(form_id)
