"""Shared API dependencies."""
from contextlib import contextmanager
from datetime import timedelta
from fastapi import Depends
from sqlalchemy.orm import Session

from quickvote.core.config import settings
from quickvote.db import get_db, get_db_context
from quickvote.realtime.notifier import Notifier, notifier
from quickvote.services.sessions import SessionService
from quickvote.store.base import SessionStore
from quickvote.store.sql import SqlSessionStore

SESSION_TTL = timedelta(days=settings.SESSION_TTL_DAYS)


def get_store(db: Session = Depends(get_db)) -> SessionStore:
    """Store bound to the request's database session."""
    return SqlSessionStore(db, ttl=SESSION_TTL)


def get_notifier() -> Notifier:
    """Process-wide channel registry."""
    return notifier


def get_session_service(
    store: SessionStore = Depends(get_store),
    session_notifier: Notifier = Depends(get_notifier),
) -> SessionService:
    return SessionService(store, session_notifier)


@contextmanager
def store_context():
    """Store with its own database session, for work outside a request."""
    with get_db_context() as db:
        yield SqlSessionStore(db, ttl=SESSION_TTL)


__all__ = [
    "get_db",
    "get_db_context",
    "get_store",
    "get_notifier",
    "get_session_service",
    "store_context",
]
