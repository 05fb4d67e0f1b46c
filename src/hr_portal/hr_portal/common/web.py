"""Shared helpers for the JSON controllers: session guards, responses, client IP."""
from __future__ import annotations

import hmac
import logging
from functools import wraps
from typing import Optional

from flask import current_app, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import DomainError, ValidationError
from ..users.model import SessionUser

logger = logging.getLogger(__name__)

_IP_HEADERS = (
    "X-Real-IP",
    "X-Forwarded-For",
    "CF-Connecting-IP",
    "True-Client-IP",
    "X-Client-IP",
    "X-Cluster-Client-IP",
    "Forwarded",
)


def current_actor() -> SessionUser:
    return SessionUser(
        employee_id=int(session["employee_id"]),
        full_name=session.get("name") or "",
        role=Role(session.get("role")),
        dept_id=session.get("dept_id"),
    )


def fail(message: str, status: int = 400):
    return jsonify({"success": False, "message": message}), status


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "employee_id" not in session:
            return fail("Unauthorized", 401)
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role, denied_status: int = 403):
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "employee_id" not in session:
                return fail("Unauthorized", 401)
            if session.get("role") not in allowed:
                return fail("Unauthorized" if denied_status == 401 else "Forbidden", denied_status)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def cron_secret_required(view):
    """Allow only callers presenting `Authorization: Bearer <CRON_SECRET>`."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        expected = f"Bearer {current_app.config.get('CRON_SECRET', '')}"
        provided = request.headers.get("Authorization", "")
        if not current_app.config.get("CRON_SECRET") or not hmac.compare_digest(provided, expected):
            return fail("Unauthorized", 401)
        return view(*args, **kwargs)

    return wrapper


def get_client_ip() -> str:
    for header in _IP_HEADERS:
        value = request.headers.get(header)
        if value:
            ip = value.split(",")[0].strip()
            if ip:
                return ip
    return request.remote_addr or "unknown"


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def optional_int(value) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid number: {value!r}")


def json_flag(data: dict, key: str, default: bool) -> bool:
    """Read a JSON boolean; a missing key gives `default`, anything but true/false is rejected."""
    if key not in data:
        return default
    value = data[key]
    if not isinstance(value, bool):
        raise ValidationError(f"{key} must be true or false")
    return value


def api_errors(view):
    """Translate domain errors into JSON failures; log anything unexpected."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            return fail(str(e), e.status_code)
        except Exception as e:
            logger.exception("[api] %s %s failed", request.method, request.path)
            if current_app.config.get("DEBUG"):
                return fail(f"Internal server error: {e}", 500)
            return fail("Internal server error", 500)

    return wrapper
