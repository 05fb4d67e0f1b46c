"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

IDLE_THRESHOLD_MINUTES = 5
AUTO_HEARTBEAT_STALE_MINUTES = 3.5
HALF_DAY_THRESHOLD_HOURS = 6

PROFESSIONAL_TAX = 200
PAYROLL_DAYS_PER_MONTH = 30

SUSPICIOUS_LOOKBACK_DAYS = 30
SUSPICIOUS_LOG_LIMIT = 500

DEFAULT_SESSION_DAYS = 7
DEFAULT_REPORT_DAYS = 7
MIN_PASSWORD_LENGTH = 6
DEFAULT_ATTENDANCE_DAYS = 30
