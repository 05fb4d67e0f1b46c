from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: Optional[str]) -> str:
    email = require_non_empty(value, "Email").lower()
    local, sep, domain = email.partition("@")
    if not sep or not local or "." not in domain:
        raise ValidationError("Email is invalid")
    return email


def parse_month_year(month, year) -> tuple[int, int]:
    try:
        m = int(month)
        y = int(year)
    except (TypeError, ValueError):
        raise ValidationError("Month and year required")
    if not 1 <= m <= 12:
        raise ValidationError("Month must be between 1 and 12")
    return m, y
