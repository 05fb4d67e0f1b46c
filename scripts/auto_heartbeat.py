"""Run one auto-heartbeat sweep without going through HTTP.

Schedule it every few minutes (cron, systemd timer) as an alternative to
calling `POST /api/attendance/auto-heartbeat`.
"""
from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.hr_portal.hr_portal.common.log_config import configure_logging
from src.hr_portal.hr_portal.container import Tuning, build_container


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(db_config=dict(settings.DB_CONFIG), tuning=Tuning.from_settings(settings))
    report = container.heartbeat_service.run_auto_heartbeat()

    for entry in report.results:
        print(f"{entry.employee_name}: {entry.minutes_since:.1f} min since last heartbeat -> {entry.action.value}")
    print(f"OK: processed={report.processed} heartbeatsCreated={report.heartbeats_created}")


if __name__ == "__main__":
    main()
