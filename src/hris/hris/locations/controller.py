from __future__ import annotations

from flask import Flask

from ..common.auth import admin_required, login_required
from ..common.datetime_utils import now_in
from ..common.http import company_scope, request_data, respond
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/locations", methods=["GET"], endpoint="locations_list")
    @login_required
    def locations_list():
        return respond(container.actions.get_locations(company_scope()))

    @app.route("/api/locations/<int:location_id>", methods=["GET"], endpoint="locations_get")
    @login_required
    def locations_get(location_id: int):
        return respond(container.actions.get_location(location_id))

    @app.route("/api/admin/locations", methods=["POST"], endpoint="locations_save")
    @admin_required
    def locations_save():
        return respond(container.actions.upsert_location(request_data(), now=now_in(container.timezone)))

    @app.route("/api/admin/locations/<int:location_id>", methods=["DELETE"], endpoint="locations_delete")
    @admin_required
    def locations_delete(location_id: int):
        return respond(container.actions.delete_location(location_id, now=now_in(container.timezone)))

    @app.route("/api/admin/locations/<int:location_id>/wifi", methods=["POST"], endpoint="locations_wifi_save")
    @admin_required
    def locations_wifi_save(location_id: int):
        return respond(container.actions.upsert_location_wifi(location_id, request_data()))

    @app.route("/api/admin/wifi/<int:wifi_id>", methods=["DELETE"], endpoint="locations_wifi_delete")
    @admin_required
    def locations_wifi_delete(wifi_id: int):
        return respond(container.actions.delete_location_wifi(wifi_id, now=now_in(container.timezone)))
