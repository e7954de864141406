from __future__ import annotations

from typing import Any, Optional

from flask import jsonify, request, session

from .results import ActionResult


def respond(result: ActionResult):
    return jsonify(result.to_dict()), result.status_code


def request_data() -> dict[str, Any]:
    """JSON body, falling back to form fields."""

    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def arg_int(name: str) -> Optional[int]:
    value = request.args.get(name, "")
    return int(value) if value.isdigit() else None


def company_scope() -> Optional[int]:
    """``?company_id=`` if given, else the signed-in user's company."""

    return arg_int("company_id") or session.get("company_id")
