from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Holiday:
    holiday_id: int
    name: str
    holiday_date: date
    is_optional: bool = False
    description: Optional[str] = None
