"""Example: drive the service layer directly (no Flask).

Controllers stay thin; the business rules live in the services.
"""

import importlib
from datetime import date

from config import get_settings_module

from src.hr_portal.hr_portal.container import Tuning, build_container
from src.hr_portal.hr_portal.core.enums import Role
from src.hr_portal.hr_portal.users.model import SessionUser


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, tuning=Tuning.from_settings(settings))

    admin = SessionUser(employee_id=1, full_name="Admin Demo", role=Role.ADMIN, dept_id=None)
    for record in container.attendance_service.list_records(admin, day=date.today()):
        print(record.employee_id, record.status.value, record.total_hours, record.idle_hours)

    for session in container.attendance_service.open_sessions():
        print("open:", session.employee_name, session.punch_in, session.last_heartbeat)


if __name__ == "__main__":
    main()
