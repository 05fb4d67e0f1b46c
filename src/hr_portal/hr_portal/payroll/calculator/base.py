from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Mapping

from ...attendance.model import AttendanceRecord, AttendanceReportRow
from ..model import PayrollFigures


class WorkedHoursCalculator(ABC):
    """Calculator interface for the hours report (Strategy Pattern)."""

    @abstractmethod
    def worked_hours(self, row: AttendanceReportRow) -> float:
        raise NotImplementedError


class PayrollCalculator(ABC):
    """Calculator interface for monthly salary (Strategy Pattern)."""

    @abstractmethod
    def present_days(self, records: Mapping[date, AttendanceRecord], *, start: date, end: date) -> float:
        raise NotImplementedError

    @abstractmethod
    def compute(self, *, monthly_salary: float, present_days: float, working_days: int) -> PayrollFigures:
        raise NotImplementedError
