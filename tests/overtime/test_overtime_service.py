from __future__ import annotations

from datetime import date, datetime

import pytest

from src.hris.hris.core.enums import ContractType, OvertimeStatus, Role
from src.hris.hris.core.exceptions import AuthorizationError, NotFoundError, OvertimeStateError, ValidationError
from src.hris.hris.employees.model import EmployeeContract
from src.hris.hris.overtime.model import OvertimeRecord
from src.hris.hris.overtime.service import OvertimeService, parse_decision
from tests.fakes import InMemoryEmployees, InMemoryOvertime

NOW = datetime(2026, 3, 3, 9, 0)


def _pending(overtime_id: int, *, day: date = date(2026, 3, 2), hours: float = 2.0) -> OvertimeRecord:
    return OvertimeRecord(
        overtime_id=overtime_id,
        employee_id=1,
        overtime_date=day,
        start_time=datetime.combine(day, datetime.min.time()).replace(hour=17),
        end_time=datetime.combine(day, datetime.min.time()).replace(hour=17 + int(hours)),
        duration_hours=hours,
        multiplier=1.5,
        status=OvertimeStatus.PENDING,
    )


@pytest.fixture
def contract() -> EmployeeContract:
    return EmployeeContract(
        contract_id=1,
        employee_id=1,
        contract_type=ContractType.PERMANENT,
        start_date=date(2025, 1, 1),
        salary_base=17_300_000,
    )


def _service(employee, records=(), contracts=()):
    overtime = InMemoryOvertime(records)
    svc = OvertimeService(overtime, InMemoryEmployees([employee], contracts))
    return svc, overtime


def test_parse_decision_accepts_both_spellings():
    assert parse_decision("approve") == OvertimeStatus.APPROVED
    assert parse_decision("Approved") == OvertimeStatus.APPROVED
    assert parse_decision("REJECT") == OvertimeStatus.REJECTED
    with pytest.raises(ValidationError):
        parse_decision("Pending")


def test_only_admin_can_decide(employee):
    svc, _ = _service(employee, [_pending(1)])

    with pytest.raises(AuthorizationError):
        svc.approve(1, 5, "Approved", current_role=Role.STAFF, now=NOW)


def test_approve_computes_compensation_from_active_contract(employee, contract):
    svc, _ = _service(employee, [_pending(1)], [contract])

    rec = svc.approve(1, 5, "Approved", current_role=Role.ADMIN, now=NOW)

    # 2h x 1.5 x (17,300,000 / 173)
    assert rec.status == OvertimeStatus.APPROVED
    assert rec.total_compensation == pytest.approx(300_000.0)
    assert rec.approver_id == 5
    assert rec.approved_at == NOW


def test_approve_without_contract_leaves_compensation_empty(employee):
    svc, _ = _service(employee, [_pending(1)])

    rec = svc.approve(1, 5, "approve", current_role=Role.ADMIN, now=NOW)

    assert rec.status == OvertimeStatus.APPROVED
    assert rec.total_compensation is None


def test_rejection_requires_notes(employee):
    svc, overtime = _service(employee, [_pending(1)])

    with pytest.raises(ValidationError):
        svc.approve(1, 5, "Rejected", "  ", current_role=Role.ADMIN, now=NOW)
    assert overtime.records[1].is_pending

    rec = svc.approve(1, 5, "Rejected", "Not pre-approved", current_role=Role.ADMIN, now=NOW)
    assert rec.status == OvertimeStatus.REJECTED
    assert rec.notes == "Not pre-approved"
    assert rec.total_compensation is None


def test_decided_record_cannot_be_decided_again(employee):
    svc, _ = _service(employee, [_pending(1)])
    svc.approve(1, 5, "Approved", current_role=Role.ADMIN, now=NOW)

    with pytest.raises(OvertimeStateError):
        svc.approve(1, 5, "Rejected", "changed my mind", current_role=Role.ADMIN, now=NOW)


def test_concurrent_decision_loses(employee):
    svc, overtime = _service(employee, [_pending(1)])
    overtime.lose_decision_race = True

    with pytest.raises(OvertimeStateError):
        svc.approve(1, 5, "Approved", current_role=Role.ADMIN, now=NOW)


def test_unknown_record(employee):
    svc, _ = _service(employee)
    with pytest.raises(NotFoundError):
        svc.approve(42, 5, "Approved", current_role=Role.ADMIN, now=NOW)


def test_request_overtime_validates_interval(employee):
    svc, _ = _service(employee)

    with pytest.raises(ValidationError):
        svc.request_overtime(employee_id=1, start_time=datetime(2026, 3, 2, 19, 0), end_time=datetime(2026, 3, 2, 18, 0))

    rec = svc.request_overtime(
        employee_id=1,
        start_time=datetime(2026, 3, 2, 17, 0),
        end_time=datetime(2026, 3, 2, 20, 30),
        reason="Month-end closing",
    )
    assert rec.status == OvertimeStatus.PENDING
    assert rec.duration_hours == pytest.approx(3.5)
    assert rec.overtime_date == date(2026, 3, 2)


def test_records_filter_by_status(employee, contract):
    svc, _ = _service(employee, [_pending(1), _pending(2, day=date(2026, 3, 4))], [contract])
    svc.approve(2, 5, "Approved", current_role=Role.ADMIN, now=NOW)

    assert [r.overtime_id for r in svc.get_records(status="Pending")] == [1]
    assert [r.overtime_id for r in svc.get_records(start_date="2026-03-03")] == [2]
    with pytest.raises(ValidationError):
        svc.get_records(status="Done")


def test_monthly_summary_counts_only_approved_money(employee, contract):
    records = [
        _pending(1, day=date(2026, 3, 2), hours=2.0),
        _pending(2, day=date(2026, 3, 9), hours=1.0),
        _pending(3, day=date(2026, 3, 16), hours=3.0),
        _pending(4, day=date(2026, 4, 1), hours=4.0),
    ]
    svc, _ = _service(employee, records, [contract])
    svc.approve(1, 5, "Approved", current_role=Role.ADMIN, now=NOW)
    svc.approve(2, 5, "Rejected", "duplicate", current_role=Role.ADMIN, now=NOW)

    summary = svc.get_summary(1, "2026-03")

    assert summary.total_records == 3
    assert summary.total_hours == pytest.approx(6.0)
    assert summary.approved_hours == pytest.approx(2.0)
    assert summary.total_compensation == pytest.approx(300_000.0)
    assert (summary.pending_count, summary.approved_count, summary.rejected_count) == (1, 1, 1)


def test_summary_rejects_bad_month(employee):
    svc, _ = _service(employee)
    with pytest.raises(ValidationError):
        svc.get_summary(1, "03-2026")
