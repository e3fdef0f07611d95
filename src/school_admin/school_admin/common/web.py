"""Helpers shared by the JSON controllers."""
from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import jsonify, request, session

from ..core.enums import Role

ADMIN_ROLES = {Role.SCHOOL_ADMIN.value, Role.OWNER.value}


def json_error(message: str, status: int):
    return jsonify({"error": message}), status


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return json_error("Login required", 401)

        if session.get("role") not in ADMIN_ROLES:
            return json_error("Forbidden", 403)

        return view(*args, **kwargs)

    return wrapper


def optional_int(value) -> Optional[int]:
    if value is None or str(value).strip() == "":
        return None
    return int(value)


def current_tenant_id() -> Optional[int]:
    """The session's tenant; an OWNER may act on any tenant via tenantId."""
    if session.get("role") == Role.OWNER.value:
        body = request.get_json(silent=True) if request.is_json else None
        override = (
            request.args.get("tenantId")
            or request.form.get("tenantId")
            or (body.get("tenantId") if isinstance(body, dict) else None)
        )
        if override is not None and str(override).isdigit():
            return int(override)
    return optional_int(session.get("tenant_id"))
