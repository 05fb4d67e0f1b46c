from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.activity_repository import ActivityLogRepository
from .attendance.cascade import WeekendCascade
from .attendance.daily import DailyAttendanceService
from .attendance.factory import AttendanceStrategyFactory
from .attendance.heartbeat import HeartbeatService
from .attendance.mysql_activity_repository import MySQLActivityLogRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .attendance.suspicious import SuspiciousActivityService
from .core import constants
from .database.connection import DBConfig, DatabaseConnection
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.repository import HolidayRepository
from .holidays.service import HolidayService
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveService
from .payroll.calculator.fixed_salary_calculator import FixedSalaryCalculator
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.report_service import PayrollReportService
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService
from .users.department_repository import DepartmentRepository
from .users.mysql_department_repository import MySQLDepartmentRepository
from .users.mysql_employee_repository import MySQLEmployeeRepository
from .users.repository import EmployeeRepository
from .users.service import AuthService, DepartmentService, EmployeeService, TeamAccess


@dataclass(frozen=True)
class Tuning:
    """Business thresholds read from settings."""

    idle_threshold_minutes: float = constants.IDLE_THRESHOLD_MINUTES
    auto_heartbeat_stale_minutes: float = constants.AUTO_HEARTBEAT_STALE_MINUTES
    half_day_threshold_hours: float = constants.HALF_DAY_THRESHOLD_HOURS
    professional_tax: float = constants.PROFESSIONAL_TAX

    @classmethod
    def from_settings(cls, settings) -> "Tuning":
        return cls(
            idle_threshold_minutes=float(getattr(settings, "IDLE_THRESHOLD_MINUTES", cls.idle_threshold_minutes)),
            auto_heartbeat_stale_minutes=float(
                getattr(settings, "AUTO_HEARTBEAT_STALE_MINUTES", cls.auto_heartbeat_stale_minutes)
            ),
            half_day_threshold_hours=float(getattr(settings, "HALF_DAY_THRESHOLD_HOURS", cls.half_day_threshold_hours)),
            professional_tax=float(getattr(settings, "PROFESSIONAL_TAX", cls.professional_tax)),
        )


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    employees_repo: EmployeeRepository
    departments_repo: DepartmentRepository
    attendance_repo: AttendanceRepository
    activity_repo: ActivityLogRepository
    holidays_repo: HolidayRepository
    leaves_repo: LeaveRepository
    payroll_repo: PayrollRepository

    team_access: TeamAccess
    auth_service: AuthService
    employee_service: EmployeeService
    department_service: DepartmentService
    attendance_service: AttendanceService
    heartbeat_service: HeartbeatService
    daily_attendance_service: DailyAttendanceService
    suspicious_activity_service: SuspiciousActivityService
    holiday_service: HolidayService
    leave_service: LeaveService
    payroll_service: PayrollService
    payroll_report_service: PayrollReportService


def wire(
    *,
    employees_repo: EmployeeRepository,
    departments_repo: DepartmentRepository,
    attendance_repo: AttendanceRepository,
    activity_repo: ActivityLogRepository,
    holidays_repo: HolidayRepository,
    leaves_repo: LeaveRepository,
    payroll_repo: PayrollRepository,
    tuning: Optional[Tuning] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build services on top of any repository implementations (MySQL or in-memory)."""

    tuning = tuning or Tuning()
    team_access = TeamAccess(employees_repo)
    cascade = WeekendCascade(attendance_repo)

    attendance_service = AttendanceService(
        attendance_repo,
        activity_repo,
        employees_repo,
        team_access,
        strategy_factory=AttendanceStrategyFactory(half_day_threshold_hours=tuning.half_day_threshold_hours),
        cascade=cascade,
        idle_threshold_minutes=tuning.idle_threshold_minutes,
    )
    heartbeat_service = HeartbeatService(
        attendance_repo,
        activity_repo,
        team_access,
        idle_threshold_minutes=tuning.idle_threshold_minutes,
        stale_minutes=tuning.auto_heartbeat_stale_minutes,
    )

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        departments_repo=departments_repo,
        attendance_repo=attendance_repo,
        activity_repo=activity_repo,
        holidays_repo=holidays_repo,
        leaves_repo=leaves_repo,
        payroll_repo=payroll_repo,
        team_access=team_access,
        auth_service=AuthService(employees_repo),
        employee_service=EmployeeService(employees_repo, team_access),
        department_service=DepartmentService(departments_repo),
        attendance_service=attendance_service,
        heartbeat_service=heartbeat_service,
        daily_attendance_service=DailyAttendanceService(employees_repo, attendance_repo, holidays_repo, cascade=cascade),
        suspicious_activity_service=SuspiciousActivityService(activity_repo),
        holiday_service=HolidayService(holidays_repo),
        leave_service=LeaveService(leaves_repo, attendance_repo, team_access),
        payroll_service=PayrollService(
            payroll_repo,
            employees_repo,
            attendance_repo,
            team_access,
            calculator=FixedSalaryCalculator(professional_tax=tuning.professional_tax),
        ),
        payroll_report_service=PayrollReportService(attendance_repo, team_access),
    )


def build_container(*, db_config: dict, tuning: Optional[Tuning] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire(
        employees_repo=MySQLEmployeeRepository(conn),
        departments_repo=MySQLDepartmentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        activity_repo=MySQLActivityLogRepository(conn),
        holidays_repo=MySQLHolidayRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        payroll_repo=MySQLPayrollRepository(conn),
        tuning=tuning,
        conn=conn,
    )
