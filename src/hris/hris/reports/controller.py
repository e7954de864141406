from __future__ import annotations

import csv
import io

from flask import Flask, jsonify, request

from ..common.auth import admin_required
from ..common.datetime_utils import now_in, parse_iso_date
from ..common.http import arg_int, company_scope, request_data, respond
from ..container import Container
from ..core.constants import DEFAULT_REPORT_LIMIT
from ..core.exceptions import ValidationError

CSV_FIELDS = [
    "work_date",
    "employee_id",
    "full_name",
    "department",
    "shift",
    "check_in",
    "check_out",
    "status",
    "late_minutes",
    "worked_hours",
    "overtime_hours",
    "location",
    "notes",
]


def register(app: Flask, container: Container) -> None:
    def _write_report_csv(*, rows: list[dict], filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=CSV_FIELDS, extrasaction="ignore")
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/admin/reports", methods=["POST"], endpoint="reports_generate")
    @admin_required
    def reports_generate():
        data = request_data()
        company_id = data.get("company_id") or company_scope()
        if not company_id:
            return jsonify({"success": False, "error": "company_id is required"}), 400
        return respond(
            container.actions.generate_attendance_report(
                int(company_id),
                data.get("report_type", ""),
                data.get("start_date"),
                data.get("end_date"),
                generated_at=now_in(container.timezone),
            )
        )

    @app.route("/api/admin/reports", methods=["GET"], endpoint="reports_list")
    @admin_required
    def reports_list():
        company_id = company_scope()
        if not company_id:
            return jsonify({"success": False, "error": "company_id is required"}), 400
        return respond(
            container.actions.get_attendance_reports(
                company_id,
                request.args.get("type") or None,
                arg_int("limit") or DEFAULT_REPORT_LIMIT,
            )
        )

    @app.route("/api/admin/reports/export.csv", methods=["GET"], endpoint="reports_export_csv")
    @admin_required
    def reports_export_csv():
        company_id = company_scope()
        start_s = request.args.get("start")
        end_s = request.args.get("end")
        if not company_id or not start_s or not end_s:
            return jsonify({"success": False, "error": "company_id, start and end are required"}), 400

        try:
            start = parse_iso_date(start_s)
            end = parse_iso_date(end_s)
        except ValidationError as e:
            return jsonify({"success": False, "error": str(e)}), 400

        rows = container.report_service.export_rows(company_id, start_date=start, end_date=end)
        filename = f"attendance_{company_id}_{start:%Y%m%d}_{end:%Y%m%d}.csv"
        return _write_report_csv(rows=rows, filename=filename)
