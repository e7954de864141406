from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time

import pytest

from src.hris.hris.attendance.service import AttendanceService
from src.hris.hris.core.enums import AttendanceStatus, OvertimeStatus
from src.hris.hris.core.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    AuthorizationError,
    NotCheckedInYetError,
    NotFoundError,
    OutOfRangeError,
)
from src.hris.hris.geofence.model import Coordinate
from src.hris.hris.geofence.provider import StaticLocationProvider
from src.hris.hris.shifts.model import WorkShift
from tests.fakes import (
    FakeTransaction,
    InMemoryAttendance,
    InMemoryEmployees,
    InMemoryLocations,
    InMemoryOvertime,
    InMemorySchedules,
    InMemoryShifts,
)

INSIDE = Coordinate(-6.2003, 106.8166)
OUTSIDE = Coordinate(-6.2100, 106.8166)
DAY = date(2026, 3, 2)


@pytest.fixture
def repos(employee, day_shift, office):
    return {
        "attendance": InMemoryAttendance(),
        "employees": InMemoryEmployees([employee]),
        "shifts": InMemoryShifts([day_shift]),
        "locations": InMemoryLocations([office]),
        "schedules": InMemorySchedules(),
        "overtime": InMemoryOvertime(),
        "tx": FakeTransaction(),
    }


@pytest.fixture
def svc(repos):
    return AttendanceService(
        repos["attendance"],
        repos["employees"],
        repos["shifts"],
        repos["locations"],
        repos["schedules"],
        repos["overtime"],
        tx=repos["tx"],
    )


def test_check_in_inside_geofence_on_time(svc):
    rec = svc.check_in(1, INSIDE, now=datetime(2026, 3, 2, 7, 58))

    assert rec.status == AttendanceStatus.PRESENT
    assert rec.is_late is False
    assert rec.work_date == DAY
    assert rec.location_id == 1
    # No personal shift: the position's first shift applies.
    assert rec.shift_id == 1
    assert rec.check_out is None


def test_check_in_late(svc):
    rec = svc.check_in(1, INSIDE, now=datetime(2026, 3, 2, 8, 17))

    assert rec.status == AttendanceStatus.LATE
    assert rec.is_late is True
    assert rec.late_minutes == 12


def test_check_in_outside_every_location_creates_nothing(svc, repos):
    with pytest.raises(OutOfRangeError):
        svc.check_in(1, OUTSIDE, now=datetime(2026, 3, 2, 8, 0))

    assert repos["attendance"].records == {}


def test_second_check_in_same_day_is_rejected(svc):
    svc.check_in(1, INSIDE, now=datetime(2026, 3, 2, 8, 0))

    with pytest.raises(AlreadyCheckedInError):
        svc.check_in(1, INSIDE, now=datetime(2026, 3, 2, 9, 0))


def test_unknown_employee(svc):
    with pytest.raises(NotFoundError):
        svc.check_in(99, INSIDE, now=datetime(2026, 3, 2, 8, 0))


def test_wifi_reported_by_device_is_recorded(svc):
    provider = StaticLocationProvider(INSIDE, wifi_ssid="HQ-Staff", wifi_mac="aa:bb:cc:dd:ee:ff")

    rec = svc.check_in(1, provider, now=datetime(2026, 3, 2, 8, 0))

    assert rec.wifi_id == 7


def test_scheduled_shift_makes_check_in_late(repos, employee):
    # Personal shift starts at 10:00 (08:06 would be on time) but the
    # schedule assigns the 08:00 shift for the day.
    late_start = WorkShift(
        shift_id=2, position_id=10, name="Late", start_time=time(10, 0), end_time=time(18, 0), duration_hours=8.0
    )
    repos["shifts"].shifts[2] = late_start
    repos["employees"].employees[1] = replace(employee, shift_id=2)
    repos["schedules"].upsert(employee_id=1, work_date=DAY, shift_id=1)

    svc = AttendanceService(repos["attendance"], repos["employees"], repos["shifts"], repos["locations"], repos["schedules"])
    rec = svc.check_in(1, INSIDE, now=datetime(2026, 3, 2, 8, 6))

    assert rec.shift_id == 1
    assert rec.status == AttendanceStatus.LATE


def test_personal_shift_used_without_schedule(repos, employee):
    late_start = WorkShift(
        shift_id=2, position_id=10, name="Late", start_time=time(10, 0), end_time=time(18, 0), duration_hours=8.0
    )
    repos["shifts"].shifts[2] = late_start
    repos["employees"].employees[1] = replace(employee, shift_id=2)
    svc = AttendanceService(repos["attendance"], repos["employees"], repos["shifts"], repos["locations"])

    rec = svc.check_in(1, INSIDE, now=datetime(2026, 3, 2, 9, 0))

    assert rec.shift_id == 2
    assert rec.status == AttendanceStatus.PRESENT


def test_check_out_records_hours_and_seeds_pending_overtime(svc, repos):
    rec = svc.check_in(1, INSIDE, now=datetime(2026, 3, 2, 8, 0))

    done = svc.check_out(rec.attendance_id, INSIDE, now=datetime(2026, 3, 2, 19, 0), employee_id=1)

    assert done.check_out == datetime(2026, 3, 2, 19, 0)
    assert done.working_hours == pytest.approx(11.0)
    assert done.overtime_hours == pytest.approx(2.0)

    (ot,) = repos["overtime"].records.values()
    assert ot.status == OvertimeStatus.PENDING
    assert ot.attendance_id == rec.attendance_id
    assert ot.start_time == datetime(2026, 3, 2, 17, 0)
    assert ot.duration_hours == pytest.approx(2.0)
    assert ot.multiplier == 1.5


def test_check_out_within_shift_has_no_overtime(svc, repos):
    rec = svc.check_in(1, INSIDE, now=datetime(2026, 3, 2, 8, 0))

    done = svc.check_out(rec.attendance_id, INSIDE, now=datetime(2026, 3, 2, 16, 30))

    assert done.overtime_hours == 0.0
    assert repos["overtime"].records == {}


def test_check_out_twice_is_rejected(svc):
    rec = svc.check_in(1, INSIDE, now=datetime(2026, 3, 2, 8, 0))
    svc.check_out(rec.attendance_id, INSIDE, now=datetime(2026, 3, 2, 17, 0))

    with pytest.raises(AlreadyCheckedOutError):
        svc.check_out(rec.attendance_id, INSIDE, now=datetime(2026, 3, 2, 17, 5))


def test_check_out_lost_race_is_already_checked_out(svc, repos):
    rec = svc.check_in(1, INSIDE, now=datetime(2026, 3, 2, 8, 0))
    repos["attendance"].lose_checkout_race = True

    with pytest.raises(AlreadyCheckedOutError):
        svc.check_out(rec.attendance_id, INSIDE, now=datetime(2026, 3, 2, 19, 0))

    assert repos["overtime"].records == {}


def test_check_out_of_another_employees_row_is_forbidden(svc):
    rec = svc.check_in(1, INSIDE, now=datetime(2026, 3, 2, 8, 0))

    with pytest.raises(AuthorizationError):
        svc.check_out(rec.attendance_id, INSIDE, now=datetime(2026, 3, 2, 17, 0), employee_id=2)


def test_check_out_outside_geofence_is_rejected(svc):
    rec = svc.check_in(1, INSIDE, now=datetime(2026, 3, 2, 8, 0))

    with pytest.raises(OutOfRangeError):
        svc.check_out(rec.attendance_id, OUTSIDE, now=datetime(2026, 3, 2, 17, 0))


def test_check_out_today_without_check_in(svc):
    with pytest.raises(NotCheckedInYetError):
        svc.check_out_today(1, INSIDE, now=datetime(2026, 3, 2, 17, 0))


def test_today_status_tracks_progress(svc):
    before = svc.get_my_attendance_today(1, work_date=DAY)
    assert before.can_check_in and not before.can_check_out
    assert before.shift.shift_id == 1

    svc.check_in(1, INSIDE, now=datetime(2026, 3, 2, 8, 0))
    during = svc.get_my_attendance_today(1, work_date=DAY)
    assert not during.can_check_in and during.can_check_out

    svc.check_out_today(1, INSIDE, now=datetime(2026, 3, 2, 17, 0))
    after = svc.get_my_attendance_today(1, work_date=DAY)
    assert not after.can_check_in and not after.can_check_out


def test_history_is_newest_first(svc):
    svc.check_in(1, INSIDE, now=datetime(2026, 3, 2, 8, 0))
    svc.check_in(1, INSIDE, now=datetime(2026, 3, 3, 8, 0))

    history = svc.get_history(1, limit=5)

    assert [r.work_date for r in history] == [date(2026, 3, 3), DAY]


def _night_shift() -> WorkShift:
    return WorkShift(
        shift_id=3, position_id=10, name="Night", start_time=time(22, 0), end_time=time(6, 0), duration_hours=8.0
    )


def test_check_out_today_finds_overnight_row_from_previous_day(repos, employee):
    repos["shifts"].shifts[3] = _night_shift()
    repos["employees"].employees[1] = replace(employee, shift_id=3)
    svc = AttendanceService(
        repos["attendance"], repos["employees"], repos["shifts"], repos["locations"], repos["schedules"], repos["overtime"]
    )
    rec = svc.check_in(1, INSIDE, now=datetime(2026, 3, 2, 21, 58))

    done = svc.check_out_today(1, INSIDE, now=datetime(2026, 3, 3, 6, 30))

    assert done.attendance_id == rec.attendance_id
    assert done.work_date == DAY
    assert done.overtime_hours == pytest.approx(0.5)
    (ot,) = repos["overtime"].records.values()
    assert ot.start_time == datetime(2026, 3, 3, 6, 0)


def test_check_out_today_ignores_open_day_shift_row_from_yesterday(svc):
    svc.check_in(1, INSIDE, now=datetime(2026, 3, 2, 8, 0))

    with pytest.raises(NotCheckedInYetError):
        svc.check_out_today(1, INSIDE, now=datetime(2026, 3, 3, 8, 30))


def test_check_out_and_overtime_share_one_transaction(svc, repos):
    rec = svc.check_in(1, INSIDE, now=datetime(2026, 3, 2, 8, 0))

    svc.check_out(rec.attendance_id, INSIDE, now=datetime(2026, 3, 2, 17, 30))

    assert repos["tx"].events == ["begin", "commit"]
    assert len(repos["overtime"].records) == 1


class _FailingOvertime(InMemoryOvertime):
    def create_pending(self, **kwargs) -> int:
        raise RuntimeError("overtime insert failed")


def test_failed_overtime_insert_rolls_back_check_out(repos):
    tx = repos["tx"]
    attendance = repos["attendance"]
    complete = attendance.complete_check_out

    def tracked_complete(**kwargs):
        tx.events.append("complete_check_out")
        return complete(**kwargs)

    attendance.complete_check_out = tracked_complete
    svc = AttendanceService(
        attendance,
        repos["employees"],
        repos["shifts"],
        repos["locations"],
        repos["schedules"],
        _FailingOvertime(),
        tx=tx,
    )
    rec = svc.check_in(1, INSIDE, now=datetime(2026, 3, 2, 8, 0))

    with pytest.raises(RuntimeError):
        svc.check_out(rec.attendance_id, INSIDE, now=datetime(2026, 3, 2, 17, 30))

    assert tx.events == ["begin", "complete_check_out", "rollback"]
