"""Database models."""
from quickvote.db.models.session import VotingSession
from quickvote.db.models.vote import Vote

__all__ = ["VotingSession", "Vote"]
