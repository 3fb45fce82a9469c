"""Session business logic."""
import asyncio
from typing import Any, Callable, Dict, List, Optional, Set

from quickvote.core.constants import MIN_OPTIONS, SESSION_ID_MAX_ATTEMPTS, VOTE_MODES
from quickvote.core.exceptions import (
    DuplicateIdentifier,
    DuplicateVoter,
    SessionNotFound,
    StorageFault,
    ValidationError,
    VoteRejected,
)
from quickvote.core.logging_config import get_logger
from quickvote.core.sanitization import is_valid_session_id, validate_date_string
from quickvote.core.utils import generate_session_id
from quickvote.realtime.notifier import Notifier
from quickvote.schemas import SessionDetail, SessionResults
from quickvote.services.results import build_results
from quickvote.services.validator import validate_vote
from quickvote.store.base import SessionStore

logger = get_logger(__name__)

# Publishes still in flight; holds references so tasks are not garbage collected
_pending_publishes: Set[asyncio.Task] = set()


async def drain_publishes() -> None:
    """Wait for every scheduled session update to finish (shutdown, tests)."""
    if _pending_publishes:
        await asyncio.gather(*list(_pending_publishes), return_exceptions=True)


def validate_session_request(
    question: str,
    options: List[str],
    dates: Optional[List[str]],
    vote_count: int,
    vote_mode: str,
) -> None:
    """
    Check a create-session request.

    Raises:
        ValidationError: Naming the first problem found
    """
    if not question or not question.strip():
        raise ValidationError("No question to vote on", field="question")

    if not options or len(options) < MIN_OPTIONS:
        raise ValidationError(f"Provide at least {MIN_OPTIONS} options to vote on", field="options")

    if any(not option or not option.strip() for option in options):
        raise ValidationError("Options cannot be empty", field="options")

    if vote_mode not in VOTE_MODES:
        raise ValidationError(
            f"Vote mode must be one of: {', '.join(VOTE_MODES)}", field="voteMode"
        )

    if vote_count < 1:
        raise ValidationError("Vote count must be at least 1", field="voteCount")

    if len(options) < vote_count:
        raise ValidationError("Not enough options to vote on", field="options")

    if dates is not None:
        if len(dates) == 0:
            raise ValidationError("Select at least one date", field="dates")
        for date in dates:
            try:
                validate_date_string(date)
            except ValueError as e:
                raise ValidationError(str(e), field="dates")


class SessionService:
    """
    Create, read and vote on sessions.

    The store and notifier are injected so the service can run against an
    in-memory store and a fake notifier in tests.
    """

    def __init__(
        self,
        store: SessionStore,
        notifier: Notifier,
        id_factory: Callable[[], str] = generate_session_id,
        max_id_attempts: int = SESSION_ID_MAX_ATTEMPTS,
    ) -> None:
        self.store = store
        self.notifier = notifier
        self._id_factory = id_factory
        self._max_id_attempts = max_id_attempts

    def create_session(
        self,
        question: str,
        options: List[str],
        dates: Optional[List[str]],
        vote_count: int,
        vote_mode: str,
    ) -> SessionDetail:
        """Validate the request and persist a new session under a fresh id."""
        validate_session_request(question, options, dates, vote_count, vote_mode)

        for _ in range(self._max_id_attempts):
            session_id = self._id_factory()
            if self.store.exists(session_id):
                continue
            try:
                session = self.store.create(
                    session_id, question.strip(), options, dates, vote_count, vote_mode
                )
            except DuplicateIdentifier:
                # Another request took the id between the check and the insert
                continue

            logger.info(
                "session_created",
                session_id=session.id,
                options=len(session.options),
                dates=len(session.dates) if session.dates else 0,
                vote_mode=session.vote_mode,
                vote_count=session.vote_count,
            )
            return session

        logger.error("session_id_exhausted", attempts=self._max_id_attempts)
        raise StorageFault("Failed to create session")

    def get_session(self, session_id: str) -> SessionDetail:
        # Ids that could never have been generated skip the store entirely
        if not is_valid_session_id(session_id):
            raise SessionNotFound(session_id)

        session = self.store.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def has_voted(self, session_id: str, voter_id: str) -> bool:
        self.get_session(session_id)
        return self.store.has_voted(session_id, voter_id)

    def get_results(self, session_id: str) -> SessionResults:
        return build_results(self.get_session(session_id))

    async def submit_vote(
        self,
        session_id: str,
        voter_id: str,
        name: str,
        choices: List[str],
        dates: Optional[List[str]],
    ) -> SessionDetail:
        """
        Record a vote and broadcast the refreshed session.

        The returned snapshot is re-read after the insert, so it also contains
        any votes other voters recorded concurrently.

        Raises:
            SessionNotFound: Unknown or expired session (or swept mid-request)
            VoteRejected: A session rule was violated
            DuplicateVoter: The voter already voted, including a lost race
        """
        session = self.get_session(session_id)

        try:
            validate_vote(session, voter_id, name, choices, dates)
        except VoteRejected as e:
            logger.info("vote_rejected", session_id=session_id, reason=e.message, code=e.code)
            raise

        # Sessions without dates never store date selections
        vote_dates = list(dates) if session.dates is not None else None

        try:
            self.store.add_vote(session_id, voter_id, name.strip(), choices, vote_dates)
        except DuplicateVoter:
            logger.info("vote_rejected", session_id=session_id, reason="duplicate (constraint)")
            raise

        updated = self.get_session(session_id)
        logger.info("vote_recorded", session_id=session_id, total_votes=len(updated.votes))

        self._schedule_publish(session_id, updated.to_payload())
        return updated

    def _schedule_publish(self, session_id: str, payload: Dict[str, Any]) -> None:
        """Broadcast in the background so slow viewers never delay the voter."""
        task = asyncio.create_task(self.notifier.publish(session_id, payload))
        _pending_publishes.add(task)

        def _done(finished: asyncio.Task) -> None:
            _pending_publishes.discard(finished)
            if finished.cancelled():
                return
            error = finished.exception()
            if error is not None:
                # The vote is committed; viewers resync on their next fetch
                logger.error(
                    "session_update_publish_failed",
                    session_id=session_id,
                    error=str(error),
                    exception_type=type(error).__name__,
                )

        task.add_done_callback(_done)
