"""Database package."""
from quickvote.db.session import engine, SessionLocal, get_db, get_db_context, init_db
from quickvote.db.base import Base

__all__ = ["engine", "SessionLocal", "get_db", "get_db_context", "init_db", "Base"]
