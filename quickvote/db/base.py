"""Database base class and model imports."""
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Import all models here so metadata.create_all sees them
from quickvote.db.models.session import VotingSession  # noqa: F401, E402
from quickvote.db.models.vote import Vote  # noqa: F401, E402
