from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.web import api_errors, json_body, json_flag, login_required, optional_int, roles_required
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container
from .model import Holiday


def holiday_json(h: Holiday) -> dict:
    return {
        "holidayId": h.holiday_id,
        "name": h.name,
        "date": h.holiday_date.isoformat(),
        "isOptional": h.is_optional,
        "description": h.description,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/holidays", methods=["GET"], endpoint="holidays_list")
    @login_required
    @api_errors
    def list_holidays():
        year = optional_int(request.args.get("year")) or now_local().year
        month = optional_int(request.args.get("month"))
        holidays = container.holiday_service.list_holidays(year=year, month=month)
        return jsonify({"success": True, "holidays": [holiday_json(h) for h in holidays]})

    @app.route("/api/holidays", methods=["POST"], endpoint="holidays_create")
    @roles_required(Role.ADMIN)
    @api_errors
    def create_holiday():
        data = json_body()
        if not data.get("date"):
            raise ValidationError("Name and date are required")
        holiday_id = container.holiday_service.create(
            name=data.get("name", ""),
            holiday_date=parse_iso_date(data["date"]),
            is_optional=json_flag(data, "isOptional", False),
            description=data.get("description"),
        )
        return jsonify({"success": True, "holidayId": holiday_id}), 201

    @app.route("/api/holidays/<int:holiday_id>", methods=["DELETE"], endpoint="holidays_delete")
    @roles_required(Role.ADMIN)
    @api_errors
    def delete_holiday(holiday_id: int):
        container.holiday_service.delete(holiday_id)
        return jsonify({"success": True})
