from __future__ import annotations

from datetime import timedelta
from typing import Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_date, parse_iso_datetime
from ..common.web import (
    api_errors,
    cron_secret_required,
    current_actor,
    get_client_ip,
    json_body,
    json_flag,
    login_required,
    optional_int,
    roles_required,
)
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container
from .heartbeat import SweepReport
from .model import ActivityLog, AttendanceRecord


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def record_json(r: AttendanceRecord) -> dict:
    return {
        "attendanceId": r.attendance_id,
        "employeeId": r.employee_id,
        "date": r.work_date.isoformat(),
        "status": r.status.value,
        "punchIn": _iso(r.punch_in),
        "punchOut": _iso(r.punch_out),
        "breakStart": _iso(r.break_start),
        "breakEnd": _iso(r.break_end),
        "breakHours": r.break_hours,
        "totalHours": r.total_hours,
        "idleHours": r.idle_hours,
        "punchInIp": r.punch_in_ip,
        "punchOutIp": r.punch_out_ip,
        "note": r.note,
    }


def activity_json(a: ActivityLog) -> dict:
    return {
        "logId": a.log_id,
        "timestamp": a.logged_at.isoformat(),
        "active": a.active,
        "suspicious": a.suspicious,
        "patternType": a.pattern_type,
        "patternDetails": a.pattern_details,
        "ipAddress": a.ip_address,
        "userAgent": a.user_agent,
    }


def sweep_json(report: SweepReport) -> dict:
    return {
        "success": True,
        "processed": report.processed,
        "heartbeatsCreated": report.heartbeats_created,
        "timestamp": report.timestamp.isoformat(),
        "results": [
            {
                "employeeId": r.employee_id,
                "employeeName": r.employee_name,
                "lastHeartbeat": r.last_heartbeat.isoformat(),
                "minutesSince": r.minutes_since,
                "action": r.action.value,
            }
            for r in report.results
        ],
    }


def _parse_status(value) -> AttendanceStatus:
    try:
        return AttendanceStatus(str(value).upper())
    except ValueError:
        raise ValidationError("Invalid status")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_action")
    @login_required
    @api_errors
    def attendance_action():
        data = json_body()
        actor = current_actor()
        action = data.get("action")

        if not action:
            # Manual record creation by an admin or manager.
            if actor.role == Role.EMPLOYEE:
                raise AuthorizationError("Forbidden")
            employee_id = optional_int(data.get("employeeId"))
            if employee_id is None or not data.get("date") or not data.get("status"):
                raise ValidationError("Employee, date and status are required")
            record = container.attendance_service.create_manual(
                actor,
                employee_id=employee_id,
                work_date=parse_iso_date(data["date"]),
                status=_parse_status(data["status"]),
                punch_in=parse_iso_datetime(data.get("punchIn")),
                punch_out=parse_iso_datetime(data.get("punchOut")),
                note=data.get("note"),
            )
            return jsonify({"success": True, "attendance": record_json(record)}), 201

        employee_id = container.team_access.resolve_target(actor, optional_int(data.get("employeeId")))
        service = container.attendance_service

        if action == "punch-in":
            record = service.punch_in(employee_id, ip=get_client_ip())
        elif action == "punch-out":
            record = service.punch_out(employee_id, ip=get_client_ip())
        elif action == "break-start":
            record = service.start_break(employee_id)
        elif action == "break-end":
            record = service.end_break(employee_id)
        else:
            raise ValidationError("Invalid action")

        return jsonify({"success": True, "attendance": record_json(record)})

    @app.route("/api/attendance", methods=["PUT"], endpoint="attendance_update")
    @roles_required(Role.ADMIN, Role.MANAGER)
    @api_errors
    def attendance_update():
        data = json_body()
        attendance_id = optional_int(data.get("attendanceId") or data.get("id"))
        if attendance_id is None:
            raise ValidationError("Attendance id is required")

        total_hours = data.get("totalHours")
        idle = data.get("idleHours")
        try:
            total_hours = float(total_hours) if total_hours is not None else None
            idle = float(idle) if idle is not None else None
        except (TypeError, ValueError):
            raise ValidationError("Invalid hours")

        record = container.attendance_service.update_record(
            current_actor(),
            attendance_id=attendance_id,
            status=_parse_status(data["status"]) if data.get("status") else None,
            punch_in=parse_iso_datetime(data.get("punchIn")),
            punch_out=parse_iso_datetime(data.get("punchOut")),
            total_hours=total_hours,
            idle_hours=idle,
            note=data.get("note"),
        )
        return jsonify({"success": True, "attendance": record_json(record)})

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @login_required
    @api_errors
    def attendance_list():
        args = request.args
        records = container.attendance_service.list_records(
            current_actor(),
            employee_id=optional_int(args.get("employeeId")),
            day=parse_iso_date(args["date"]) if args.get("date") else None,
            start=parse_iso_date(args["startDate"]) if args.get("startDate") else None,
            end=parse_iso_date(args["endDate"]) if args.get("endDate") else None,
        )
        return jsonify({"success": True, "attendance": [record_json(r) for r in records]})

    @app.route("/api/attendance/heartbeat", methods=["POST"], endpoint="attendance_heartbeat")
    @login_required
    @api_errors
    def heartbeat():
        data = json_body()
        result = container.heartbeat_service.record_heartbeat(
            current_actor().employee_id,
            active=json_flag(data, "active", True),
            suspicious=json_flag(data, "suspicious", False),
            pattern_type=data.get("patternType"),
            pattern_details=data.get("patternDetails"),
            ip=get_client_ip(),
            user_agent=request.headers.get("User-Agent"),
        )
        return jsonify(
            {
                "success": True,
                "idleTime": result.idle_hours,
                "lastHeartbeat": result.last_heartbeat.isoformat(),
                "botDetected": result.bot_detected,
                "effectiveActive": result.effective_active,
            }
        )

    @app.route("/api/attendance/activity", methods=["GET"], endpoint="attendance_activity")
    @login_required
    @api_errors
    def activity():
        attendance_id = optional_int(request.args.get("attendanceId"))
        if attendance_id is None:
            raise ValidationError("Attendance ID required")

        record, logs = container.heartbeat_service.activity_timeline(current_actor(), attendance_id)
        return jsonify(
            {
                "success": True,
                "attendance": record_json(record),
                "activityLogs": [activity_json(a) for a in logs],
            }
        )

    @app.route("/api/attendance/auto-heartbeat", methods=["POST"], endpoint="attendance_auto_heartbeat")
    @cron_secret_required
    @api_errors
    def auto_heartbeat():
        report = container.heartbeat_service.run_auto_heartbeat()
        return jsonify(sweep_json(report))

    @app.route("/api/attendance/auto-heartbeat", methods=["GET"], endpoint="attendance_auto_heartbeat_info")
    def auto_heartbeat_info():
        return jsonify(
            {
                "message": "Auto-heartbeat endpoint",
                "usage": "POST with 'Authorization: Bearer <CRON_SECRET>' header",
                "description": (
                    "Adds an inactive heartbeat for every punched-in employee "
                    "whose last heartbeat is older than the stale threshold"
                ),
                "recommendedSchedule": "every 3 minutes",
            }
        )

    @app.route("/api/cron/daily-attendance", methods=["GET"], endpoint="cron_daily_attendance")
    @cron_secret_required
    @api_errors
    def daily_attendance_yesterday():
        yesterday = now_local().date() - timedelta(days=1)
        report = container.daily_attendance_service.run(yesterday)
        return jsonify({"success": True, **report.as_dict()})

    @app.route("/api/cron/daily-attendance", methods=["POST"], endpoint="cron_daily_attendance_for_date")
    @cron_secret_required
    @api_errors
    def daily_attendance_for_date():
        data = json_body()
        if not data.get("date"):
            raise ValidationError("Date is required")
        report = container.daily_attendance_service.run(parse_iso_date(data["date"]))
        return jsonify({"success": True, **report.as_dict()})

    @app.route("/api/admin/force-punchout", methods=["POST"], endpoint="admin_force_punchout")
    @roles_required(Role.ADMIN)
    @api_errors
    def force_punchout():
        employee_id = optional_int(json_body().get("employeeId"))
        if employee_id is None:
            raise ValidationError("Employee ID is required")
        record = container.attendance_service.force_punch_out(employee_id)
        return jsonify({"success": True, "message": "Employee punched out", "attendance": record_json(record)})

    @app.route("/api/admin/force-punchout", methods=["GET"], endpoint="admin_open_sessions")
    @roles_required(Role.ADMIN)
    @api_errors
    def open_sessions():
        sessions = container.attendance_service.open_sessions()
        return jsonify(
            {
                "success": True,
                "count": len(sessions),
                "sessions": [
                    {
                        "attendanceId": s.attendance_id,
                        "employeeId": s.employee_id,
                        "employeeName": s.employee_name,
                        "punchIn": s.punch_in.isoformat(),
                        "lastHeartbeat": _iso(s.last_heartbeat),
                    }
                    for s in sessions
                ],
            }
        )

    @app.route("/api/admin/suspicious-activity", methods=["GET"], endpoint="admin_suspicious_activity")
    @roles_required(Role.ADMIN, denied_status=401)
    @api_errors
    def suspicious_activity():
        args = request.args
        report = container.suspicious_activity_service.build_report(
            start=parse_iso_datetime(args.get("startDate")),
            end=parse_iso_datetime(args.get("endDate")),
            employee_id=optional_int(args.get("employeeId")),
        )
        return jsonify(
            {
                "success": True,
                "totalLogs": len(report.logs),
                "summary": report.summary,
                "logs": [
                    {
                        "logId": log.log_id,
                        "employeeId": log.employee_id,
                        "employeeName": log.full_name,
                        "date": log.work_date.isoformat(),
                        "timestamp": log.logged_at.isoformat(),
                        "patternType": log.pattern_type,
                        "patternDetails": log.pattern_details,
                        "ipAddress": log.ip_address,
                        "userAgent": log.user_agent,
                    }
                    for log in report.logs
                ],
            }
        )
