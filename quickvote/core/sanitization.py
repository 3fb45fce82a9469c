"""Input sanitization utilities."""
import re
from datetime import datetime
from typing import Optional

from quickvote.core.constants import DATE_FORMAT, SESSION_ID_ALPHABET, SESSION_ID_LENGTH


# Maximum length constraints for security
MAX_QUESTION_LENGTH = 500     # Room for a full sentence or two
MAX_OPTION_LENGTH = 200       # Reasonable limit for an option label
MAX_VOTER_NAME_LENGTH = 100   # Display label shown next to results
MAX_VOTER_ID_LENGTH = 100     # Client ids are ~13 chars of base-36
MAX_OPTIONS = 50
MAX_DATES = 366

_DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')
_SESSION_ID_PATTERN = re.compile(rf'^[{SESSION_ID_ALPHABET}]{{1,{SESSION_ID_LENGTH * 2}}}$')


def sanitize_text(text: str, max_length: Optional[int] = None) -> str:
    """
    Normalize free-text input.

    Note: Markup is neither stripped nor escaped. Labels such as "Under <$20"
    or "2 > 1" are legitimate and must round-trip unchanged; the client escapes
    output when rendering.

    Args:
        text: The input text to sanitize
        max_length: Optional maximum length to enforce

    Returns:
        Text with surrounding whitespace trimmed and internal runs collapsed

    Raises:
        ValueError: If text is not a string or exceeds max_length
    """
    if not isinstance(text, str):
        raise ValueError("Input must be a string")

    sanitized = text.strip()

    if max_length and len(sanitized) > max_length:
        raise ValueError(f"Input exceeds maximum length of {max_length} characters")

    # Normalize internal whitespace (replace multiple spaces with single space)
    return re.sub(r'\s+', ' ', sanitized)


def sanitize_question(question: str) -> str:
    """
    Sanitize a session question.

    Empty questions are allowed through so the service can report them
    with its own message.
    """
    return sanitize_text(question, max_length=MAX_QUESTION_LENGTH)


def sanitize_option(option: str) -> str:
    """Sanitize a single option label."""
    return sanitize_text(option, max_length=MAX_OPTION_LENGTH)


def sanitize_voter_name(name: str) -> str:
    """Sanitize a voter's display name."""
    return sanitize_text(name, max_length=MAX_VOTER_NAME_LENGTH)


def validate_voter_id(voter_id: str) -> str:
    """
    Validate a client-generated voter id.

    Voter ids are opaque and self-asserted; only their shape is checked here.

    Raises:
        ValueError: If the voter id is empty, too long, or has invalid characters
    """
    if not isinstance(voter_id, str):
        raise ValueError("Voter id must be a string")

    voter_id = voter_id.strip()

    if not voter_id:
        raise ValueError("Voter id cannot be empty")

    if len(voter_id) > MAX_VOTER_ID_LENGTH:
        raise ValueError(f"Voter id exceeds maximum length of {MAX_VOTER_ID_LENGTH} characters")

    if not re.match(r'^[A-Za-z0-9_-]+$', voter_id):
        raise ValueError("Voter id can only contain letters, numbers, hyphens and underscores")

    return voter_id


def is_valid_session_id(session_id: str) -> bool:
    """Check that a session id has the generated shape before querying for it."""
    return isinstance(session_id, str) and bool(_SESSION_ID_PATTERN.match(session_id))


def validate_date_string(value: str) -> str:
    """
    Validate a calendar date in YYYY-MM-DD form.

    Raises:
        ValueError: If the string is not a real calendar date
    """
    if not isinstance(value, str) or not _DATE_PATTERN.match(value.strip()):
        raise ValueError(f"Invalid date format: {value!r} (expected YYYY-MM-DD)")

    value = value.strip()
    try:
        datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        raise ValueError(f"Invalid calendar date: {value}")

    return value
