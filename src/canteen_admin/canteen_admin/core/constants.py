"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
STUDENTS_PER_PAGE = 10
RECENT_ATTENDANCE_LIMIT = 5
DEFAULT_NOTIFICATION_LIMIT = 50
DEFAULT_LOW_TOKEN_THRESHOLD = 3
MEALS_PER_DAY = 3

# Hour boundaries [start, end) used to pick the current meal slot.
BREAKFAST_HOURS = (6, 11)
LUNCH_HOURS = (11, 16)

ADMISSION_LOCK_TIMEOUT_SECONDS = 5.0
STORE_CONNECT_TIMEOUT_SECONDS = 5
STORE_LOCK_WAIT_TIMEOUT_SECONDS = 5

QR_PAYLOAD_PREFIX = "CANTEEN-STUDENT:"
MIN_PASSWORD_LENGTH = 6
