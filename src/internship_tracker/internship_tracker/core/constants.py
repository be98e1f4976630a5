"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_LATE_CUTOFF = time(8, 0)
DEFAULT_TOKEN_EXPIRE_HOURS = 4
DEFAULT_HISTORY_LIMIT = 5
DEFAULT_DASHBOARD_LIMIT = 5
STUDENT_DASHBOARD_LIMIT = 3
MIN_PASSWORD_LENGTH = 6

# journals.hours_worked is DECIMAL(5, 2)
MAX_JOURNAL_HOURS = 24
JOURNAL_HOURS_PLACES = 2
