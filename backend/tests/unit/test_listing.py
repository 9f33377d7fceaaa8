from __future__ import annotations

from appraisal.models.employee import Employee
from appraisal.models.form import Form
from appraisal.services.hierarchy import with_supervisor_names
from appraisal.services.listing import (
    EmployeeSortField,
    SortOrder,
    filter_employees,
    filter_forms,
    paginate,
    sort_employees,
    sort_forms,
)
from tests.conftest import FORM_DOC, JUNIOR_DOC, MANAGER_DOC, SENIOR_DOC

EMPLOYEES = [Employee.model_validate(doc) for doc in (MANAGER_DOC, SENIOR_DOC, JUNIOR_DOC)]


def test_filter_employees_by_partial_id_ignores_case():
    assert [e.name for e in filter_employees(EMPLOYEES, "sd-eng")] == ["Sam Senior"]
    assert len(filter_employees(EMPLOYEES, "ENG")) == 3
    assert filter_employees(EMPLOYEES, None) == EMPLOYEES


def test_sort_employees_by_name():
    ascending = sort_employees(EMPLOYEES, EmployeeSortField.NAME)
    descending = sort_employees(EMPLOYEES, EmployeeSortField.NAME, SortOrder.DESC)

    assert [e.name for e in ascending] == ["Jo Junior", "Maria Manager", "Sam Senior"]
    assert [e.name for e in descending] == ["Sam Senior", "Maria Manager", "Jo Junior"]


def test_sort_rows_by_displayed_supervisor_name():
    rows = sort_employees(with_supervisor_names(EMPLOYEES), EmployeeSortField.SUPERVISOR)

    assert [row.supervisor_name for row in rows] == ["Admin", "Maria Manager", "Sam Senior"]


def test_sort_without_field_keeps_order():
    assert sort_employees(EMPLOYEES, None) is EMPLOYEES


def test_paginate():
    assert paginate([1, 2, 3, 4], skip=1, limit=2) == [2, 3]
    assert paginate([1, 2, 3], skip=2) == [3]
    assert paginate([1, 2], skip=5, limit=1) == []


def test_forms_filter_and_sort_by_creation():
    older = Form.model_validate(FORM_DOC)
    newer = Form.model_validate(
        dict(FORM_DOC, formId="FORM-ZZ990000", createdAt="2024-05-01T00:00:00+00:00")
    )

    assert filter_forms([older, newer], "zz99") == [newer]
    assert sort_forms([newer, older]) == [older, newer]
    assert sort_forms([older, newer], SortOrder.DESC) == [newer, older]
