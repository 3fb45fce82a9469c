"""Vote model."""
from datetime import datetime, timezone as tz
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship

from quickvote.db.base import Base
from quickvote.db.codec import StringList


class Vote(Base):
    __tablename__ = "votes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(String(32), ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False)
    voter_id = Column(String(100), nullable=False)
    voter_name = Column(String(100), nullable=False)
    choices = Column(StringList, nullable=False)
    dates = Column(StringList, nullable=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))

    # Relationships
    session = relationship("VotingSession", back_populates="votes")

    __table_args__ = (
        Index("idx_votes_session", "session_id"),
        UniqueConstraint("session_id", "voter_id", name="uq_session_voter"),
    )
