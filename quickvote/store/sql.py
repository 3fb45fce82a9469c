"""SQLAlchemy implementation of the session store."""
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from quickvote.core.exceptions import (
    DuplicateIdentifier,
    DuplicateVoter,
    SessionNotFound,
    StorageFault,
)
from quickvote.core.logging_config import get_logger
from quickvote.core.utils import is_expired, to_utc, utcnow
from quickvote.db.models import Vote, VotingSession
from quickvote.schemas import SessionDetail, VoteDetail
from quickvote.store.base import SessionStore

logger = get_logger(__name__)


def _is_unique_violation(error: IntegrityError, constraint: str) -> bool:
    message = str(error.orig if error.orig is not None else error)
    return constraint in message or "unique constraint" in message.lower()


def to_session_detail(row: VotingSession, votes: List[Vote]) -> SessionDetail:
    """Build the API view of a session row and its vote rows."""
    return SessionDetail(
        id=row.id,
        question=row.question,
        options=row.options,
        dates=row.dates,
        vote_count=row.vote_count,
        vote_mode=row.vote_mode,
        created_at=to_utc(row.created_at),
        expires_at=to_utc(row.expires_at),
        votes={
            vote.voter_id: VoteDetail(
                name=vote.voter_name,
                choices=vote.choices,
                dates=vote.dates,
                timestamp=to_utc(vote.timestamp),
            )
            for vote in votes
        },
    )


class SqlSessionStore(SessionStore):
    """Store backed by the ``sessions`` and ``votes`` tables."""

    def __init__(self, db: Session, ttl: timedelta, clock: Callable[[], datetime] = utcnow) -> None:
        super().__init__(ttl, clock)
        self.db = db

    def create(self, session_id, question, options, dates, vote_count, vote_mode) -> SessionDetail:
        if self.exists(session_id):
            raise DuplicateIdentifier(session_id)

        created_at = self.now()
        row = VotingSession(
            id=session_id,
            question=question,
            options=list(options),
            dates=list(dates) if dates is not None else None,
            vote_count=vote_count,
            vote_mode=vote_mode,
            created_at=created_at,
            expires_at=created_at + self._ttl,
        )

        try:
            self.db.add(row)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if _is_unique_violation(e, "sessions_pkey"):
                raise DuplicateIdentifier(session_id)
            logger.error("session_insert_failed", session_id=session_id, error=str(e))
            raise StorageFault("Failed to create session")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("session_insert_failed", session_id=session_id, error=str(e))
            raise StorageFault("Failed to create session")

        self.db.refresh(row)
        return to_session_detail(row, [])

    def get(self, session_id: str) -> Optional[SessionDetail]:
        row = self.db.query(VotingSession).filter(VotingSession.id == session_id).first()
        if not row:
            return None

        if is_expired(row.expires_at, self.now()):
            logger.info("expired_session_removed_on_read", session_id=session_id)
            self.delete(session_id)
            return None

        votes = (
            self.db.query(Vote)
            .filter(Vote.session_id == session_id)
            .order_by(Vote.id)
            .all()
        )
        return to_session_detail(row, votes)

    def exists(self, session_id: str) -> bool:
        return self.db.query(VotingSession.id).filter(VotingSession.id == session_id).first() is not None

    def delete(self, session_id: str) -> bool:
        try:
            # Delete votes explicitly so the cascade does not depend on the
            # backend enforcing foreign keys
            self.db.query(Vote).filter(Vote.session_id == session_id).delete(synchronize_session=False)
            deleted = (
                self.db.query(VotingSession)
                .filter(VotingSession.id == session_id)
                .delete(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("session_delete_failed", session_id=session_id, error=str(e))
            raise StorageFault("Failed to delete session")
        return deleted > 0

    def add_vote(self, session_id, voter_id, name, choices, dates) -> None:
        vote_record = Vote(
            session_id=session_id,
            voter_id=voter_id,
            voter_name=name,
            choices=list(choices),
            dates=list(dates) if dates is not None else None,
            timestamp=self.now(),
        )

        try:
            self.db.add(vote_record)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            # Concurrent duplicate from the same voter lost the race on
            # the (session_id, voter_id) unique constraint
            if _is_unique_violation(e, "uq_session_voter"):
                raise DuplicateVoter()
            # Foreign key failure: the session was swept underneath us
            raise SessionNotFound(session_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("vote_insert_failed", session_id=session_id, error=str(e))
            raise StorageFault("Failed to submit vote")

    def has_voted(self, session_id: str, voter_id: str) -> bool:
        existing = self.db.query(Vote.id).filter(
            Vote.session_id == session_id,
            Vote.voter_id == voter_id
        ).first()
        return existing is not None

    def sweep_expired(self, now: Optional[datetime] = None) -> int:
        now = to_utc(now) if now is not None else self.now()
        expired_ids = select(VotingSession.id).where(VotingSession.expires_at < now)

        try:
            self.db.query(Vote).filter(Vote.session_id.in_(expired_ids)).delete(
                synchronize_session=False
            )
            removed = (
                self.db.query(VotingSession)
                .filter(VotingSession.expires_at < now)
                .delete(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("expired_sweep_failed", error=str(e))
            raise StorageFault("Failed to sweep expired sessions")

        return removed
