from __future__ import annotations

from datetime import datetime

from flask import Flask, jsonify, request

from ..common.auth import admin_required, current_employee_id, current_role, login_required
from ..common.datetime_utils import now_in
from ..common.http import arg_int, request_data, respond
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    def _scoped_employee_id():
        # Staff only ever see their own overtime.
        if current_role() == Role.ADMIN:
            return arg_int("employee_id")
        return current_employee_id()

    def _no_employee():
        return jsonify({"success": False, "error": "Your account is not linked to an employee"}), 400

    @app.route("/api/overtime", methods=["GET"], endpoint="overtime_list")
    @login_required
    def overtime_list():
        employee_id = _scoped_employee_id()
        if current_role() != Role.ADMIN and not employee_id:
            return _no_employee()
        return respond(
            container.actions.get_overtime_records(
                employee_id=employee_id,
                status=request.args.get("status") or None,
                start_date=request.args.get("start") or None,
                end_date=request.args.get("end") or None,
            )
        )

    @app.route("/api/overtime", methods=["POST"], endpoint="overtime_request")
    @login_required
    def overtime_request():
        employee_id = current_employee_id()
        if not employee_id:
            return _no_employee()

        data = request_data()
        try:
            start_time = datetime.fromisoformat(str(data.get("start_time") or ""))
            end_time = datetime.fromisoformat(str(data.get("end_time") or ""))
        except ValueError:
            return jsonify({"success": False, "error": "start_time and end_time must be ISO datetimes"}), 400

        return respond(container.actions.request_overtime(employee_id, start_time, end_time, data.get("reason")))

    @app.route("/api/overtime/<int:overtime_id>/decision", methods=["POST"], endpoint="overtime_decide")
    @admin_required
    def overtime_decide(overtime_id: int):
        data = request_data()
        approver_id = current_employee_id()
        if not approver_id:
            return _no_employee()

        return respond(
            container.actions.approve_overtime(
                overtime_id,
                approver_id,
                data.get("action") or data.get("status") or "",
                data.get("notes"),
                current_role=current_role(),
                now=now_in(container.timezone),
            )
        )

    @app.route("/api/overtime/summary", methods=["GET"], endpoint="overtime_summary")
    @login_required
    def overtime_summary():
        employee_id = _scoped_employee_id() or current_employee_id()
        if not employee_id:
            return jsonify({"success": False, "error": "employee_id is required"}), 400
        month = request.args.get("month") or now_in(container.timezone).strftime("%Y-%m")
        return respond(container.actions.get_overtime_summary(employee_id, month))
