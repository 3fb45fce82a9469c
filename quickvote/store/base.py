"""
Session Store contract.

Abstract base class defining how sessions and votes are persisted. The
service layer depends only on this interface so the persistence backend can
be swapped (SQLAlchemy in production, in-memory in unit tests).
"""
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from quickvote.core.utils import to_utc, utcnow
from quickvote.schemas import SessionDetail


class SessionStore(ABC):
    """Abstract store for voting sessions and their votes."""

    def __init__(self, ttl: timedelta, clock: Callable[[], datetime] = utcnow) -> None:
        self._ttl = ttl
        self._clock = clock

    def now(self) -> datetime:
        return to_utc(self._clock())

    @abstractmethod
    def create(
        self,
        session_id: str,
        question: str,
        options: List[str],
        dates: Optional[List[str]],
        vote_count: int,
        vote_mode: str,
    ) -> SessionDetail:
        """Insert a new session with no votes.

        expires_at is fixed at created_at + ttl and never renewed.

        Raises:
            DuplicateIdentifier: If session_id is already taken.
        """
        ...

    @abstractmethod
    def get(self, session_id: str) -> Optional[SessionDetail]:
        """Return the session with all votes keyed by voter id.

        An expired session is deleted on the spot and None is returned.
        """
        ...

    @abstractmethod
    def exists(self, session_id: str) -> bool:
        """Check whether a session row exists, expired or not."""
        ...

    @abstractmethod
    def delete(self, session_id: str) -> bool:
        """Delete a session and all of its votes.

        Returns:
            True if a session was deleted.
        """
        ...

    @abstractmethod
    def add_vote(
        self,
        session_id: str,
        voter_id: str,
        name: str,
        choices: List[str],
        dates: Optional[List[str]],
    ) -> None:
        """Record one vote. The store sets the timestamp.

        Raises:
            DuplicateVoter: If the voter already voted in this session.
            SessionNotFound: If the session no longer exists.
        """
        ...

    @abstractmethod
    def has_voted(self, session_id: str, voter_id: str) -> bool:
        """Advisory check; add_vote's uniqueness constraint is authoritative."""
        ...

    @abstractmethod
    def sweep_expired(self, now: Optional[datetime] = None) -> int:
        """Delete every session with expires_at < now, with its votes.

        Returns:
            Number of sessions deleted.
        """
        ...
