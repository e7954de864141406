from __future__ import annotations

from typing import Callable

from flask import Flask

from ..common.auth import admin_required, login_required
from ..common.datetime_utils import now_in
from ..common.http import arg_int, request_data, respond
from ..container import Container


def register(app: Flask, container: Container) -> None:
    actions = container.actions

    def _crud(name: str, *, list_fn: Callable, save_fn: Callable, delete_fn: Callable) -> None:
        """GET /api/<name>, POST /api/admin/<name>, DELETE /api/admin/<name>/<id>."""

        @login_required
        def list_view():
            return respond(list_fn())

        @admin_required
        def save_view():
            return respond(save_fn(request_data(), now=now_in(container.timezone)))

        @admin_required
        def delete_view(row_id: int):
            return respond(delete_fn(row_id, now=now_in(container.timezone)))

        endpoint = name.replace("-", "_")
        app.add_url_rule(f"/api/{name}", f"{endpoint}_list", list_view, methods=["GET"])
        app.add_url_rule(f"/api/admin/{name}", f"{endpoint}_save", save_view, methods=["POST"])
        app.add_url_rule(f"/api/admin/{name}/<int:row_id>", f"{endpoint}_delete", delete_view, methods=["DELETE"])

    _crud(
        "companies",
        list_fn=actions.get_companies,
        save_fn=actions.upsert_company,
        delete_fn=actions.delete_company,
    )
    _crud(
        "departments",
        list_fn=lambda: actions.get_departments(arg_int("company_id")),
        save_fn=actions.upsert_department,
        delete_fn=actions.delete_department,
    )
    _crud(
        "position-levels",
        list_fn=actions.get_position_levels,
        save_fn=actions.upsert_position_level,
        delete_fn=actions.delete_position_level,
    )
    _crud(
        "positions",
        list_fn=lambda: actions.get_positions(arg_int("department_id")),
        save_fn=actions.upsert_position,
        delete_fn=actions.delete_position,
    )
    _crud(
        "roles",
        list_fn=actions.get_roles,
        save_fn=actions.upsert_role,
        delete_fn=actions.delete_role,
    )
