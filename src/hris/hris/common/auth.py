from __future__ import annotations

from functools import wraps

from flask import jsonify, session

from ..core.enums import Role


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "error": "Please sign in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "error": "Please sign in to continue"}), 401

        if session.get("role") != Role.ADMIN.value:
            return jsonify({"success": False, "error": "You do not have permission"}), 403

        return view(*args, **kwargs)

    return wrapper


def current_role() -> Role:
    return Role(session.get("role", Role.STAFF.value))


def current_employee_id() -> int | None:
    value = session.get("employee_id")
    return int(value) if value else None
