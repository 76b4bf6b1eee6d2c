"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_CATEGORY = "General"
DEFAULT_PROGRESS_LOG_LIMIT = 5
MAX_PROGRESS_LOG_LIMIT = 100

PROGRESS_MIN = 0
PROGRESS_MAX = 100

# (max days left, minimum progress) bands, tightest first.
RISK_BANDS = (
    (3, 90),
    (7, 80),
    (14, 50),
)
