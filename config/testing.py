import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_portal_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

CRON_SECRET = "test-cron-secret"

IDLE_THRESHOLD_MINUTES = 5
AUTO_HEARTBEAT_STALE_MINUTES = 3.5
HALF_DAY_THRESHOLD_HOURS = 6
PROFESSIONAL_TAX = 200

AUTO_INIT_DB = False
AUTO_SEED_DB = False
