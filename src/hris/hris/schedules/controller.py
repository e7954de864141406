from __future__ import annotations

from datetime import timedelta

from flask import Flask, request

from ..common.auth import admin_required, current_employee_id, current_role, login_required
from ..common.datetime_utils import now_in
from ..common.http import arg_int, request_data, respond
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/schedules", methods=["GET"], endpoint="schedules_list")
    @login_required
    def schedules_list():
        today = now_in(container.timezone).date()
        start_s = request.args.get("start") or today.strftime("%Y-%m-%d")
        end_s = request.args.get("end") or (today + timedelta(days=7)).strftime("%Y-%m-%d")
        employee_id = arg_int("employee_id") if current_role() == Role.ADMIN else current_employee_id()
        return respond(container.actions.get_shift_schedules(start_s, end_s, employee_id))

    @app.route("/api/admin/schedules", methods=["POST"], endpoint="schedules_assign")
    @admin_required
    def schedules_assign():
        data = request_data()
        return respond(
            container.actions.assign_shift_schedule(
                data.get("employee_id"),
                data.get("work_date"),
                data.get("shift_id"),
                data.get("notes"),
            )
        )

    @app.route("/api/admin/schedules/bulk", methods=["POST"], endpoint="schedules_bulk_assign")
    @admin_required
    def schedules_bulk_assign():
        data = request_data()
        return respond(
            container.actions.bulk_assign_shift_schedules(
                data.get("employee_ids") or [],
                data.get("start"),
                data.get("end"),
                data.get("shift_id"),
                data.get("notes"),
            )
        )

    @app.route("/api/admin/schedules/<int:schedule_id>", methods=["DELETE"], endpoint="schedules_delete")
    @admin_required
    def schedules_delete(schedule_id: int):
        return respond(container.actions.delete_shift_schedule(schedule_id, now=now_in(container.timezone)))
