import os

from .config import Config, DB_CONFIG  # noqa: F401

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

CRON_SECRET = os.getenv("CRON_SECRET", "dev-cron-secret")

IDLE_THRESHOLD_MINUTES = Config.IDLE_THRESHOLD_MINUTES
AUTO_HEARTBEAT_STALE_MINUTES = Config.AUTO_HEARTBEAT_STALE_MINUTES
HALF_DAY_THRESHOLD_HOURS = Config.HALF_DAY_THRESHOLD_HOURS
PROFESSIONAL_TAX = Config.PROFESSIONAL_TAX

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
