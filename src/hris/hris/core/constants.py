"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_TOLERANCE_MINUTES = 5
DEFAULT_REPORT_LIMIT = 10
DEFAULT_LIST_LIMIT = 200

EARTH_RADIUS_METERS = 6_371_000.0

DEFAULT_OVERTIME_MULTIPLIER = 1.5
# Monthly salary / 173 gives the hourly base for overtime pay.
DEFAULT_OVERTIME_HOURLY_DIVISOR = 173

DEFAULT_TIMEZONE = "Asia/Jakarta"
