from __future__ import annotations

from flask import Flask, request

from ..common.auth import admin_required
from ..common.datetime_utils import now_in
from ..common.http import company_scope, request_data, respond
from ..container import Container


def register(app: Flask, container: Container) -> None:
    actions = container.actions

    @app.route("/api/admin/employees", methods=["GET"], endpoint="employees_list")
    @admin_required
    def employees_list():
        include_deleted = request.args.get("include_deleted") in {"1", "true"}
        return respond(actions.get_employees(company_scope(), include_deleted))

    @app.route("/api/admin/employees/<int:employee_id>", methods=["GET"], endpoint="employees_get")
    @admin_required
    def employees_get(employee_id: int):
        return respond(actions.get_employee(employee_id, today=now_in(container.timezone).date()))

    @app.route("/api/admin/employees", methods=["POST"], endpoint="employees_create")
    @admin_required
    def employees_create():
        return respond(actions.create_employee_with_user(request_data(), today=now_in(container.timezone).date()))

    @app.route("/api/admin/employees/<int:employee_id>", methods=["PUT"], endpoint="employees_update")
    @admin_required
    def employees_update(employee_id: int):
        return respond(actions.update_employee(employee_id, request_data(), now=now_in(container.timezone)))

    @app.route("/api/admin/employees/<int:employee_id>/personnel", methods=["PUT"], endpoint="employees_personnel")
    @admin_required
    def employees_personnel(employee_id: int):
        return respond(actions.update_personnel_details(employee_id, request_data()))

    @app.route("/api/admin/employees/<int:employee_id>", methods=["DELETE"], endpoint="employees_delete")
    @admin_required
    def employees_delete(employee_id: int):
        return respond(actions.soft_delete_employee(employee_id, now=now_in(container.timezone)))

    @app.route("/api/admin/employees/<int:employee_id>/restore", methods=["POST"], endpoint="employees_restore")
    @admin_required
    def employees_restore(employee_id: int):
        return respond(actions.restore_employee(employee_id))

    @app.route("/api/admin/employees/<int:employee_id>/educations", methods=["GET"], endpoint="educations_list")
    @admin_required
    def educations_list(employee_id: int):
        return respond(actions.get_employee_educations(employee_id))

    @app.route("/api/admin/employees/<int:employee_id>/educations", methods=["POST"], endpoint="educations_create")
    @admin_required
    def educations_create(employee_id: int):
        return respond(actions.create_employee_education(employee_id, request_data()))

    @app.route("/api/admin/educations/<int:education_id>", methods=["PUT"], endpoint="educations_update")
    @admin_required
    def educations_update(education_id: int):
        return respond(actions.update_employee_education(education_id, request_data()))

    @app.route("/api/admin/educations/<int:education_id>", methods=["DELETE"], endpoint="educations_delete")
    @admin_required
    def educations_delete(education_id: int):
        return respond(actions.delete_employee_education(education_id, now=now_in(container.timezone)))
