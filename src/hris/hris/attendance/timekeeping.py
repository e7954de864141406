"""Time accounting for attendance rows.

Everything here is pure: callers pass the clock in, nothing is read from the
environment, so check-in and check-out rules can be exercised directly.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from ..common.datetime_utils import hours_between
from ..core.exceptions import InvalidTimestampError
from ..shifts.model import WorkShift

_DAY_SECONDS = 24 * 3600


@dataclass(frozen=True)
class CheckInEvaluation:
    is_late: bool
    late_minutes: int
    shift_start: Optional[datetime] = None


@dataclass(frozen=True)
class CheckOutEvaluation:
    working_hours: float
    overtime_hours: float
    shift_end: Optional[datetime] = None


def shift_duration_hours(start: time, end: time) -> float:
    """Length of a shift, wrapping past midnight when end is before start."""

    start_s = start.hour * 3600 + start.minute * 60 + start.second
    end_s = end.hour * 3600 + end.minute * 60 + end.second
    return ((end_s - start_s) % _DAY_SECONDS) / 3600


def shift_window(shift: WorkShift, work_date: date) -> tuple[datetime, datetime]:
    start = datetime.combine(work_date, shift.start_time)
    end = datetime.combine(work_date, shift.end_time)
    if end <= start:
        end += timedelta(days=1)
    return start, end


def evaluate_check_in(now: datetime, shift: Optional[WorkShift], work_date: date) -> CheckInEvaluation:
    """Late iff ``now`` is past shift start plus tolerance.

    Late minutes count from that threshold and are rounded up, so one second
    past the grace period is one minute late. Without a shift nobody is late.
    """

    if shift is None:
        return CheckInEvaluation(is_late=False, late_minutes=0)

    start, _ = shift_window(shift, work_date)
    threshold = start + timedelta(minutes=max(0, int(shift.tolerance_minutes)))
    if now <= threshold:
        return CheckInEvaluation(is_late=False, late_minutes=0, shift_start=start)

    late_minutes = math.ceil((now - threshold).total_seconds() / 60)
    return CheckInEvaluation(is_late=True, late_minutes=late_minutes, shift_start=start)


def evaluate_check_out(
    check_in: datetime,
    check_out: datetime,
    shift: Optional[WorkShift],
    *,
    work_date: Optional[date] = None,
) -> CheckOutEvaluation:
    if check_out < check_in:
        raise InvalidTimestampError("Check-out time cannot be earlier than check-in time")

    working_hours = hours_between(check_in, check_out)
    if shift is None:
        return CheckOutEvaluation(working_hours=working_hours, overtime_hours=0.0)

    _, shift_end = shift_window(shift, work_date or check_in.date())
    overtime_hours = max(0.0, hours_between(shift_end, check_out))
    return CheckOutEvaluation(working_hours=working_hours, overtime_hours=overtime_hours, shift_end=shift_end)
