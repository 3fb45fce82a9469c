"""VotingSession model."""
from sqlalchemy import Column, Integer, String, Text, DateTime, Index
from sqlalchemy.orm import relationship

from quickvote.db.base import Base
from quickvote.db.codec import StringList


class VotingSession(Base):
    __tablename__ = "sessions"

    id = Column(String(32), primary_key=True)
    question = Column(Text, nullable=False)
    options = Column(StringList, nullable=False)
    dates = Column(StringList, nullable=True)  # NULL: no date availability collected
    vote_count = Column(Integer, nullable=False)
    vote_mode = Column(String(16), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    # Relationships
    votes = relationship(
        "Vote",
        back_populates="session",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Vote.id",
    )

    __table_args__ = (Index("idx_sessions_expires", "expires_at"),)
