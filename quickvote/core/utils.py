"""General utility functions."""
import math
import secrets
from datetime import datetime, timezone

from quickvote.core.constants import SESSION_ID_ALPHABET, SESSION_ID_LENGTH


def generate_session_id(length: int = SESSION_ID_LENGTH) -> str:
    """Generate a short, URL-friendly session id (lowercase base-36)."""
    return "".join(secrets.choice(SESSION_ID_ALPHABET) for _ in range(length))


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """Convert datetime to UTC timezone."""
    if dt.tzinfo is None:
        # SQLite drops tzinfo; stored values are always UTC
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def is_expired(expires_at: datetime, now: datetime = None) -> bool:
    """
    Check whether a session has reached its expiry time.

    A session is usable only while now < expires_at.
    """
    now = to_utc(now) if now is not None else utcnow()
    return to_utc(expires_at) <= now


def round_half_up(value: float) -> int:
    """Round a non-negative number to the nearest integer, halves rounding up."""
    return int(math.floor(value + 0.5))
