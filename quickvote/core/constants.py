"""Application constants.

This module contains magic strings and numbers used throughout the application.
Centralizing these values makes them easier to maintain and modify.
"""

# Vote Modes
# How a session's vote_count constrains the number of options a voter selects
VOTE_MODE_EXACTLY = "exactly"
VOTE_MODE_MINIMUM = "minimum"
VOTE_MODE_MAXIMUM = "maximum"
VOTE_MODES = (VOTE_MODE_EXACTLY, VOTE_MODE_MINIMUM, VOTE_MODE_MAXIMUM)

# Session Configuration
# Sessions need at least two options to be worth voting on
MIN_OPTIONS = 2

# Session IDs are 7-character lowercase base-36 strings (e.g. "k3x9q2a")
SESSION_ID_LENGTH = 7
SESSION_ID_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
SESSION_ID_MAX_ATTEMPTS = 10

# Sessions live for 30 days and are not renewable
# NOTE: overridable via SESSION_TTL_DAYS in app settings
SESSION_TTL_DAYS = 30

# Expired sessions are swept every 6 hours
CLEANUP_INTERVAL_HOURS = 6

# Date availability entries use calendar-date strings
DATE_FORMAT = "%Y-%m-%d"

# Realtime event names shared by the WebSocket and SSE transports
EVENT_JOIN_SESSION = "joinSession"
EVENT_SESSION_UPDATE = "sessionUpdate"
EVENT_ERROR = "error"

# SQLite file name inside DB_PATH
DATABASE_FILENAME = "voting.db"
