"""Constants for taskcadence.

This module centralizes the scheduling numbers used throughout the engine.
"""

# Share of a period after which an occurrence's soft target falls
TARGET_DATE_RATIO = 0.6

# Default offsets (days) for occurrences without a day pattern or interval
DEFAULT_TARGET_OFFSET_DAYS = 1
DEFAULT_LIMIT_OFFSET_DAYS = 7

# Weekly periods
DAYS_PER_WEEK = 7

# Fixed tasks
DEFAULT_FIXED_WINDOW_DAYS = 30
DEFAULT_FIXED_SPACING_DAYS = 1

# Backlog
SEVERE_BACKLOG_THRESHOLD = 5
