from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.auth import admin_required, current_employee_id, login_required
from ..common.datetime_utils import now_in, parse_iso_date
from ..common.http import arg_int, company_scope, request_data, respond
from ..container import Container
from ..core.exceptions import ValidationError
from ..geofence.provider import PayloadLocationProvider


def register(app: Flask, container: Container) -> None:
    def _no_employee():
        return jsonify({"success": False, "error": "Your account is not linked to an employee"}), 400

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @login_required
    def check_in():
        employee_id = current_employee_id()
        if not employee_id:
            return _no_employee()
        data = request_data()
        result = container.actions.check_in(
            employee_id,
            PayloadLocationProvider(data),
            now=now_in(container.timezone),
            notes=data.get("notes"),
        )
        return respond(result)

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @login_required
    def check_out():
        employee_id = current_employee_id()
        if not employee_id:
            return _no_employee()
        data = request_data()
        provider = PayloadLocationProvider(data)
        now = now_in(container.timezone)

        attendance_id = data.get("attendance_id")
        if attendance_id:
            result = container.actions.check_out(
                attendance_id,
                provider,
                now=now,
                employee_id=employee_id,
                notes=data.get("notes"),
            )
        else:
            result = container.actions.check_out_today(employee_id, provider, now=now, notes=data.get("notes"))
        return respond(result)

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def my_today():
        employee_id = current_employee_id()
        if not employee_id:
            return _no_employee()
        work_date = now_in(container.timezone).date()
        return respond(container.actions.get_my_attendance_today(employee_id, work_date=work_date))

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @login_required
    def history():
        employee_id = current_employee_id()
        if not employee_id:
            return _no_employee()
        return respond(container.actions.get_attendance_history(employee_id, arg_int("limit") or 15))

    @app.route("/api/admin/attendance/today", methods=["GET"], endpoint="admin_attendance_today")
    @admin_required
    def company_today():
        company_id = company_scope()
        if not company_id:
            return jsonify({"success": False, "error": "company_id is required"}), 400

        date_s = request.args.get("date")
        try:
            work_date = parse_iso_date(date_s) if date_s else now_in(container.timezone).date()
        except ValidationError as e:
            return jsonify({"success": False, "error": str(e)}), 400
        return respond(container.actions.get_today_attendance(company_id, work_date=work_date))
