"""Fixtures for unit tests: in-memory store, fake clock, recording notifier."""
from datetime import timedelta

import pytest

from quickvote.services.sessions import SessionService
from quickvote.store.memory import InMemorySessionStore
from tests.utils import FakeClock, RecordingNotifier


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_store(clock):
    return InMemorySessionStore(ttl=timedelta(days=30), clock=clock)


@pytest.fixture
def recording_notifier():
    return RecordingNotifier()


@pytest.fixture
def service(memory_store, recording_notifier):
    ids = iter(f"sess{n:03d}" for n in range(1000))
    return SessionService(memory_store, recording_notifier, id_factory=lambda: next(ids))
