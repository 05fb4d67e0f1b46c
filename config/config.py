"""Settings shared by every environment module."""
import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "hr-portal-secret"

    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "hr_portal")

    # Shared secret for the cron endpoints (Authorization: Bearer <CRON_SECRET>)
    CRON_SECRET = os.environ.get("CRON_SECRET", "")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    IDLE_THRESHOLD_MINUTES = float(os.environ.get("IDLE_THRESHOLD_MINUTES", "5"))
    AUTO_HEARTBEAT_STALE_MINUTES = float(os.environ.get("AUTO_HEARTBEAT_STALE_MINUTES", "3.5"))
    HALF_DAY_THRESHOLD_HOURS = float(os.environ.get("HALF_DAY_THRESHOLD_HOURS", "6"))
    PROFESSIONAL_TAX = float(os.environ.get("PROFESSIONAL_TAX", "200"))


DB_CONFIG = {
    "host": Config.DB_HOST,
    "port": Config.DB_PORT,
    "user": Config.DB_USER,
    "password": Config.DB_PASSWORD,
    "database": Config.DB_NAME,
}
