from __future__ import annotations

import pytest

from hrms_lite.core.enums import Department
from hrms_lite.core.exceptions import ConflictError, NotFoundError, ValidationError
from hrms_lite.employees.service import format_employee_code


def _payload(**overrides) -> dict:
    payload = {"name": "Jane Smith", "email": "Jane.Smith@Company.com", "department": "Marketing"}
    payload.update(overrides)
    return payload


def test_create_generates_first_code_and_normalizes_email(container):
    emp = container.employee_service.create(_payload())

    assert emp.employee_code == "EMP001"
    assert emp.email == "jane.smith@company.com"
    assert emp.department == Department.MARKETING
    assert emp.created_at is not None


def test_generated_code_follows_highest_existing_number(container):
    container.employee_service.create(_payload(employeeCode="EMP041", email="a@company.com"))
    container.employee_service.create(_payload(employeeCode="EMP007", email="b@company.com"))

    emp = container.employee_service.create(_payload(email="c@company.com"))

    assert emp.employee_code == "EMP042"


def test_code_numbers_past_999_keep_growing():
    assert format_employee_code(1) == "EMP001"
    assert format_employee_code(1000) == "EMP1000"


def test_empty_code_is_treated_as_absent(container):
    emp = container.employee_service.create(_payload(employeeCode=""))

    assert emp.employee_code == "EMP001"


def test_lowercase_code_is_upper_cased(container):
    emp = container.employee_service.create(_payload(employeeCode="emp123"))

    assert emp.employee_code == "EMP123"


def test_duplicate_code_conflicts_and_persists_nothing(container, employees_repo):
    container.employee_service.create(_payload(employeeCode="EMP010", email="first@company.com"))

    with pytest.raises(ConflictError) as exc:
        container.employee_service.create(_payload(employeeCode="EMP010", email="second@company.com"))

    assert "already exists" in str(exc.value)
    assert employees_repo.count() == 1


def test_duplicate_email_is_case_insensitive(container, employees_repo):
    container.employee_service.create(_payload(email="dup@company.com"))

    with pytest.raises(ConflictError) as exc:
        container.employee_service.create(_payload(name="Other Person", email="DUP@Company.COM"))

    assert "already registered" in str(exc.value)
    assert employees_repo.count() == 1


def test_generated_code_retries_when_taken_concurrently(container, employees_repo, monkeypatch):
    container.employee_service.create(_payload(employeeCode="EMP005", email="taken@company.com"))
    stale = iter([4, 5])
    # First lookup returns a stale maximum, as if another request inserted in between.
    monkeypatch.setattr(employees_repo, "max_code_number", lambda: next(stale))

    emp = container.employee_service.create(_payload(email="new@company.com"))

    assert emp.employee_code == "EMP006"
    assert employees_repo.count() == 2


def test_create_reports_every_invalid_field(container):
    with pytest.raises(ValidationError) as exc:
        container.employee_service.create(
            {"employeeCode": "E1", "name": "J", "email": "not-an-email", "department": "Legal"}
        )

    assert {e.field for e in exc.value.errors} == {"employeeCode", "name", "email", "department"}


def test_name_rejects_digits(container):
    with pytest.raises(ValidationError) as exc:
        container.employee_service.create(_payload(name="R2 D2"))

    assert exc.value.errors[0].message == "Name can only contain letters, spaces, hyphens, and apostrophes"


def test_name_allows_hyphen_and_apostrophe(container):
    emp = container.employee_service.create(_payload(name="Mary-Jane O'Neil"))

    assert emp.name == "Mary-Jane O'Neil"


def test_update_changes_subset_of_fields(container):
    emp = container.employee_service.create(_payload())

    updated = container.employee_service.update(emp.employee_id, {"department": "Sales"})

    assert updated.department == Department.SALES
    assert updated.name == emp.name
    assert updated.email == emp.email


def test_update_to_other_employees_email_conflicts(container):
    container.employee_service.create(_payload(email="one@company.com"))
    second = container.employee_service.create(_payload(email="two@company.com"))

    with pytest.raises(ConflictError):
        container.employee_service.update(second.employee_id, {"email": "ONE@company.com"})


def test_update_with_own_email_is_allowed(container):
    emp = container.employee_service.create(_payload(email="same@company.com"))

    updated = container.employee_service.update(emp.employee_id, {"email": "same@company.com", "name": "New Name"})

    assert updated.name == "New Name"


def test_update_missing_employee_raises_not_found(container):
    with pytest.raises(NotFoundError):
        container.employee_service.update(99, {"name": "Nobody Here"})


def test_invalid_id_format_is_a_validation_error(container):
    with pytest.raises(ValidationError) as exc:
        container.employee_service.get("abc")

    assert str(exc.value) == "Invalid id format"


def test_delete_cascades_to_attendance(container, attendance_repo, make_employee):
    emp = make_employee()
    keep = make_employee()
    ids = [
        container.attendance_service.mark({"employeeId": emp.employee_id, "date": d, "status": "Present"}).record.attendance_id
        for d in ("2025-06-07", "2025-06-08", "2025-06-09")
    ]
    container.attendance_service.mark({"employeeId": keep.employee_id, "date": "2025-06-09", "status": "Absent"})

    removed = container.employee_service.delete(emp.employee_id)

    assert removed == 3
    assert all(r.employee_id == keep.employee_id for r in attendance_repo.all_records())
    for attendance_id in ids:
        with pytest.raises(NotFoundError):
            container.attendance_service.get(attendance_id)
    with pytest.raises(NotFoundError):
        container.employee_service.get(emp.employee_id)


def test_summary_includes_attendance_totals(container, make_employee):
    emp = make_employee()
    for d, s in (("2025-06-07", "Present"), ("2025-06-08", "Absent"), ("2025-06-09", "Present")):
        container.attendance_service.mark({"employeeId": emp.employee_id, "date": d, "status": s})

    summary = container.employee_service.get_summary(emp.employee_id).to_dict()

    assert summary["attendanceStats"] == {"Present": 2, "Absent": 1, "Total": 3}
    assert summary["employeeCode"] == emp.employee_code


def test_list_filters_by_department_and_search(container):
    container.employee_service.create(_payload(name="Alice Walker", email="alice@company.com", department="Engineering"))
    container.employee_service.create(_payload(name="Bob Stone", email="bob@company.com", department="Engineering"))
    container.employee_service.create(_payload(name="Alicia Keys", email="keys@company.com", department="Sales"))

    page = container.employee_service.list({"department": "Engineering", "search": "ALI"})

    assert [e.name for e in page.items] == ["Alice Walker"]
    assert page.pagination.total_records == 1


def test_list_search_matches_code(container):
    container.employee_service.create(_payload(employeeCode="EMP777", email="x@company.com"))
    container.employee_service.create(_payload(employeeCode="EMP100", email="y@company.com"))

    page = container.employee_service.list({"search": "emp77"})

    assert [e.employee_code for e in page.items] == ["EMP777"]


def test_list_rejects_limit_over_maximum(container):
    with pytest.raises(ValidationError) as exc:
        container.employee_service.list({"limit": "101"})

    assert exc.value.errors[0].field == "limit"
