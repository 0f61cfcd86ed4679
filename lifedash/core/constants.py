"""
Application-wide constants
"""

# Weekday indices, Sunday=0 through Saturday=6
ALL_DAYS = [0, 1, 2, 3, 4, 5, 6]
DAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

# How far back a streak walk may go
STREAK_LOOKBACK_DAYS = 365

# Header carrying the owner of the records for a request
USER_ID_HEADER = "X-User-Id"

# Scheduler job ids
MARK_MISSED_JOB_ID = "mark_missed_habits"
