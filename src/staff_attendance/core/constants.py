"""Constants and defaults.

Note: Keep constants here to avoid magic values spread across code.
"""

from datetime import datetime

ALL = "all"
NOT_AVAILABLE = "N/A"

# Bounds used by the "all" date window
ALL_RANGE_START = datetime(2000, 1, 1)
ALL_RANGE_END = datetime(2099, 12, 31)

DEFAULT_SESSION_HOURS = 24
MIN_PASSWORD_LENGTH = 6

# Longest leave span (inclusive days) a single request may cover
MAX_LEAVE_DAYS = 90
