from __future__ import annotations

from datetime import date, datetime

from src.hris.hris.common.results import ActionResult, server_action, to_jsonable
from src.hris.hris.core.enums import AttendanceStatus
from src.hris.hris.core.exceptions import ConflictError, NotFoundError, ValidationError
from src.hris.hris.geofence.model import Coordinate


class Actions:
    @server_action("Failed to load")
    def missing(self):
        raise NotFoundError("Employee not found")

    @server_action("Failed to save")
    def crash(self):
        raise KeyError("db exploded")

    @server_action(success_message="Saved")
    def ok(self):
        return {"day": date(2026, 3, 2), "status": AttendanceStatus.LATE}

    @server_action()
    def passthrough(self):
        return ActionResult.fail("custom", status_code=418)


def test_domain_errors_keep_their_message():
    result = Actions().missing()

    assert result.success is False
    assert result.error == "Employee not found"
    assert result.status_code == 404
    assert result.to_dict() == {"success": False, "error": "Employee not found"}


def test_unexpected_errors_are_hidden():
    result = Actions().crash()

    assert result.success is False
    assert result.error == "Failed to save"
    assert result.status_code == 500


def test_success_payload_is_json_ready():
    result = Actions().ok()

    assert result.to_dict() == {
        "success": True,
        "data": {"day": "2026-03-02", "status": "Terlambat"},
        "message": "Saved",
    }


def test_action_result_is_returned_as_is():
    assert Actions().passthrough().status_code == 418


def test_to_jsonable_handles_dataclasses():
    assert to_jsonable(Coordinate(1.5, 2.5)) == {"latitude": 1.5, "longitude": 2.5}
    assert to_jsonable((datetime(2026, 1, 1, 8, 0),)) == ["2026-01-01T08:00:00"]


def test_hr_actions_fold_check_in_errors(hr_actions):
    outside = Coordinate(-6.3, 106.8166)

    result = hr_actions.check_in(1, outside, now=datetime(2026, 3, 2, 8, 0))

    assert result.success is False
    assert result.status_code == 400
    assert "not within any allowed location" in result.error


def test_hr_actions_check_in_then_duplicate(hr_actions):
    inside = Coordinate(-6.2001, 106.8166)

    first = hr_actions.check_in(1, inside, now=datetime(2026, 3, 2, 8, 0))
    second = hr_actions.check_in(1, inside, now=datetime(2026, 3, 2, 8, 1))

    assert first.success and first.message == "Check-in recorded"
    assert first.to_dict()["data"]["status"] == "Hadir"
    assert second.status_code == 409


def test_hr_actions_validate_dates(hr_actions):
    result = hr_actions.generate_attendance_report(1, "daily", "", "2026-03-02", generated_at=datetime(2026, 3, 3))

    assert result.success is False
    assert result.error == "Start date is required"


def test_hr_actions_today_card(hr_actions):
    result = hr_actions.get_my_attendance_today(1, work_date=date(2026, 3, 2))

    data = result.to_dict()["data"]
    assert data["can_check_in"] is True
    assert data["record"] is None
    assert data["shift"]["name"] == "Day"


def test_conflict_maps_to_409():
    class A:
        @server_action()
        def go(self):
            raise ConflictError("dup")

        @server_action()
        def bad(self):
            raise ValidationError("bad")

    assert A().go().status_code == 409
    assert A().bad().status_code == 400
