"""Helpers shared by unit and integration tests."""
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from quickvote.schemas import SessionDetail, VoteDetail


class FakeClock:
    """Controllable clock for stores: call it to get the current fake time."""

    def __init__(self, start: Optional[datetime] = None):
        self.current = start or datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


class RecordingNotifier:
    """Notifier double that records every publish."""

    def __init__(self):
        self.published: List[tuple] = []

    def subscribe(self, subscriber, session_id):
        pass

    def unsubscribe(self, subscriber, session_id):
        pass

    def disconnect(self, subscriber):
        pass

    async def publish(self, session_id: str, session: Dict[str, Any]) -> int:
        self.published.append((session_id, session))
        return 0

    def subscriber_count(self, session_id=None) -> int:
        return 0


def make_session(
    options: List[str],
    votes: Optional[Dict[str, List[str]]] = None,
    vote_count: int = 1,
    vote_mode: str = "exactly",
    dates: Optional[List[str]] = None,
    date_votes: Optional[Dict[str, List[str]]] = None,
    session_id: str = "abc1234",
) -> SessionDetail:
    """Build a SessionDetail directly, without a store."""
    now = datetime.now(timezone.utc)
    date_votes = date_votes or {}
    return SessionDetail(
        id=session_id,
        question="Test question?",
        options=options,
        dates=dates,
        vote_count=vote_count,
        vote_mode=vote_mode,
        created_at=now,
        expires_at=now + timedelta(days=30),
        votes={
            voter_id: VoteDetail(
                name=f"Voter {voter_id}",
                choices=choices,
                dates=date_votes.get(voter_id),
                timestamp=now,
            )
            for voter_id, choices in (votes or {}).items()
        },
    )


def wait_for(condition: Callable[[], bool], timeout: float = 2.0, interval: float = 0.01) -> bool:
    """Poll until condition() is true; used to sync with the server's event loop."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(interval)
    return condition()
