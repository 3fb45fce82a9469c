"""Session store backends."""
from quickvote.store.base import SessionStore
from quickvote.store.memory import InMemorySessionStore
from quickvote.store.sql import SqlSessionStore

__all__ = ["SessionStore", "InMemorySessionStore", "SqlSessionStore"]
