"""Domain error taxonomy.

Every error a client can see carries a short human-readable ``message``;
the API layer maps each class to an HTTP status code.
"""
from typing import Optional


class QuickVoteError(Exception):
    """Base exception for all domain-level errors."""

    status_code = 500

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(QuickVoteError):
    """Raised when a create-session request is malformed."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class VoteRejected(QuickVoteError):
    """Raised when a submitted vote violates one of the session's rules."""

    status_code = 400

    def __init__(self, message: str, code: str = "VOTE_REJECTED") -> None:
        super().__init__(message, code=code)


class DuplicateVoter(VoteRejected):
    """Raised when a voter already has a recorded vote for the session."""

    def __init__(self, message: str = "Looks like you already voted") -> None:
        super().__init__(message, code="DUPLICATE_VOTER")


class SessionNotFound(QuickVoteError):
    """Raised for unknown or expired sessions."""

    status_code = 404

    def __init__(self, session_id: str, message: str = "Session not found") -> None:
        super().__init__(message, code="SESSION_NOT_FOUND")
        self.session_id = session_id


class DuplicateIdentifier(QuickVoteError):
    """Raised by a store when a session id is already taken."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session id '{session_id}' already exists", code="DUPLICATE_IDENTIFIER")
        self.session_id = session_id


class StorageFault(QuickVoteError):
    """Raised for unexpected persistence failures."""

    status_code = 500

    def __init__(self, message: str = "Storage failure") -> None:
        super().__init__(message, code="STORAGE_FAULT")
