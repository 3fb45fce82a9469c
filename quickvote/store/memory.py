"""In-memory implementation of the session store."""
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from quickvote.core.exceptions import DuplicateIdentifier, DuplicateVoter, SessionNotFound
from quickvote.core.utils import is_expired, to_utc, utcnow
from quickvote.schemas import SessionDetail, VoteDetail
from quickvote.store.base import SessionStore


class InMemorySessionStore(SessionStore):
    """Dict-backed store with the same semantics as the SQL store.

    Returned sessions are deep copies, so callers never share state with
    the store.
    """

    def __init__(self, ttl: timedelta, clock: Callable[[], datetime] = utcnow) -> None:
        super().__init__(ttl, clock)
        self._sessions: Dict[str, SessionDetail] = {}

    def create(self, session_id, question, options, dates, vote_count, vote_mode) -> SessionDetail:
        if session_id in self._sessions:
            raise DuplicateIdentifier(session_id)

        created_at = self.now()
        session = SessionDetail(
            id=session_id,
            question=question,
            options=list(options),
            dates=list(dates) if dates is not None else None,
            vote_count=vote_count,
            vote_mode=vote_mode,
            created_at=created_at,
            expires_at=created_at + self._ttl,
            votes={},
        )
        self._sessions[session_id] = session
        return session.model_copy(deep=True)

    def get(self, session_id: str) -> Optional[SessionDetail]:
        session = self._sessions.get(session_id)
        if session is None:
            return None

        if is_expired(session.expires_at, self.now()):
            self.delete(session_id)
            return None

        return session.model_copy(deep=True)

    def exists(self, session_id: str) -> bool:
        return session_id in self._sessions

    def delete(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def add_vote(self, session_id, voter_id, name, choices, dates) -> None:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)

        if voter_id in session.votes:
            raise DuplicateVoter()

        session.votes[voter_id] = VoteDetail(
            name=name,
            choices=list(choices),
            dates=list(dates) if dates is not None else None,
            timestamp=self.now(),
        )

    def has_voted(self, session_id: str, voter_id: str) -> bool:
        session = self._sessions.get(session_id)
        return session is not None and voter_id in session.votes

    def sweep_expired(self, now: Optional[datetime] = None) -> int:
        now = to_utc(now) if now is not None else self.now()
        expired = [
            session_id
            for session_id, session in self._sessions.items()
            if to_utc(session.expires_at) < now
        ]
        for session_id in expired:
            del self._sessions[session_id]
        return len(expired)
