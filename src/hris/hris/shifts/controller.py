from __future__ import annotations

from flask import Flask

from ..common.auth import admin_required, login_required
from ..common.datetime_utils import now_in
from ..common.http import arg_int, request_data, respond
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/work-shifts", methods=["GET"], endpoint="shifts_list")
    @login_required
    def shifts_list():
        return respond(container.actions.get_work_shifts(arg_int("position_id")))

    @app.route("/api/admin/work-shifts", methods=["POST"], endpoint="shifts_save")
    @admin_required
    def shifts_save():
        return respond(container.actions.upsert_work_shift(request_data(), now=now_in(container.timezone)))

    @app.route("/api/admin/work-shifts/bulk", methods=["POST"], endpoint="shifts_bulk_create")
    @admin_required
    def shifts_bulk_create():
        data = request_data()
        return respond(container.actions.bulk_create_work_shifts(data.get("position_ids") or [], data))

    @app.route("/api/admin/work-shifts/<int:shift_id>", methods=["DELETE"], endpoint="shifts_delete")
    @admin_required
    def shifts_delete(shift_id: int):
        return respond(container.actions.delete_work_shift(shift_id, now=now_in(container.timezone)))
