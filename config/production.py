import os

from .config import Config, DB_CONFIG  # noqa: F401

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DEBUG = False
LOG_LEVEL = Config.LOG_LEVEL

# Empty secret disables the cron endpoints (every call answers 401).
CRON_SECRET = Config.CRON_SECRET

IDLE_THRESHOLD_MINUTES = Config.IDLE_THRESHOLD_MINUTES
AUTO_HEARTBEAT_STALE_MINUTES = Config.AUTO_HEARTBEAT_STALE_MINUTES
HALF_DAY_THRESHOLD_HOURS = Config.HALF_DAY_THRESHOLD_HOURS
PROFESSIONAL_TAX = Config.PROFESSIONAL_TAX

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
