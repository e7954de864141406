from datetime import date, datetime

from src.hris.hris.attendance.factory import AttendanceStrategyFactory
from src.hris.hris.attendance.strategies.late_strategy import LateStrategy
from src.hris.hris.attendance.strategies.normal_strategy import NormalStrategy
from src.hris.hris.attendance.timekeeping import evaluate_check_in
from src.hris.hris.core.enums import AttendanceStatus


def test_factory_checkin_on_time_within_tolerance(day_shift):
    evaluation = evaluate_check_in(datetime(2026, 1, 5, 8, 4, 59), day_shift, date(2026, 1, 5))

    strategy = AttendanceStrategyFactory().for_checkin(evaluation)
    decision = strategy.decide_checkin(evaluation)

    assert isinstance(strategy, NormalStrategy)
    assert decision.status == AttendanceStatus.PRESENT
    assert decision.is_late is False
    assert decision.late_minutes == 0


def test_factory_checkin_late_after_tolerance(day_shift):
    evaluation = evaluate_check_in(datetime(2026, 1, 5, 8, 12), day_shift, date(2026, 1, 5))

    strategy = AttendanceStrategyFactory().for_checkin(evaluation)
    decision = strategy.decide_checkin(evaluation)

    assert isinstance(strategy, LateStrategy)
    assert decision.status == AttendanceStatus.LATE
    assert decision.is_late is True
    assert decision.late_minutes == 7
