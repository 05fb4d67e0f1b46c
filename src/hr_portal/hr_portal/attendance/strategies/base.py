from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ...core.enums import AttendanceStatus


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: Optional[str] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide the status of a finished work day."""

    @abstractmethod
    def decide_punch_out(self, *, worked_hours: float, threshold_hours: float) -> StatusDecision:
        raise NotImplementedError
