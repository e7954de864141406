from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, session

from ..common.auth import login_required
from ..common.http import request_data, respond
from ..container import Container


def register(app: Flask, container: Container, *, session_days: int = 7) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = request_data()
        result = container.actions.login(data.get("username", ""), data.get("password", ""))
        if result.success:
            s_user = result.data
            session.clear()
            session.permanent = bool(data.get("remember_me"))
            app.permanent_session_lifetime = timedelta(days=session_days)

            session["user_id"] = s_user.user_id
            session["employee_id"] = s_user.employee_id
            session["company_id"] = s_user.company_id
            session["name"] = s_user.full_name
            session["role"] = s_user.role.value
        return respond(result)

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True, "message": "Signed out"})

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return jsonify(
            {
                "success": True,
                "data": {
                    "user_id": session.get("user_id"),
                    "employee_id": session.get("employee_id"),
                    "company_id": session.get("company_id"),
                    "name": session.get("name"),
                    "role": session.get("role"),
                },
            }
        )

    @app.route("/api/auth/password", methods=["POST"], endpoint="change_password")
    @login_required
    def change_password():
        data = request_data()
        return respond(
            container.actions.change_password(
                int(session["user_id"]),
                data.get("current_password", ""),
                data.get("new_password", ""),
            )
        )
