"""Session and vote schemas."""
from datetime import datetime
from typing import Dict, List, Optional
from pydantic import Field, field_validator

from quickvote.core.sanitization import (
    MAX_DATES,
    MAX_OPTIONS,
    sanitize_option,
    sanitize_question,
    sanitize_voter_name,
    validate_date_string,
    validate_voter_id,
)
from quickvote.schemas.common import CamelModel


class VoteDetail(CamelModel):
    """One voter's recorded choices."""
    name: str
    choices: List[str]
    dates: Optional[List[str]] = None
    timestamp: datetime


class SessionDetail(CamelModel):
    """A voting session with every recorded vote keyed by voter id."""
    id: str
    question: str
    options: List[str]
    dates: Optional[List[str]] = None
    vote_count: int
    vote_mode: str
    created_at: datetime
    expires_at: datetime
    votes: Dict[str, VoteDetail] = Field(default_factory=dict)

    def to_payload(self) -> dict:
        """JSON-ready dict with camelCase keys, as sent to clients."""
        return self.model_dump(mode="json", by_alias=True)


class SessionCreate(CamelModel):
    question: str = Field(..., max_length=1000)
    options: List[str] = Field(..., max_length=MAX_OPTIONS)
    dates: Optional[List[str]] = Field(None, max_length=MAX_DATES)
    vote_count: int = 1
    vote_mode: str = "exactly"

    @field_validator('question')
    @classmethod
    def sanitize_question_field(cls, v: str) -> str:
        return sanitize_question(v)

    @field_validator('options')
    @classmethod
    def sanitize_options_field(cls, v: List[str]) -> List[str]:
        """Sanitize each option label, keeping order and duplicates."""
        return [sanitize_option(option) for option in v]

    @field_validator('dates')
    @classmethod
    def validate_dates_field(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        return [validate_date_string(date) for date in v]


class CreateSessionResponse(CamelModel):
    session_id: str
    session: SessionDetail


class VoteRequest(CamelModel):
    voter_name: str = Field(..., max_length=1000)
    choices: List[str] = Field(..., max_length=MAX_OPTIONS)
    dates: Optional[List[str]] = Field(None, max_length=MAX_DATES)
    voter_id: str
    # Sent by the web client; the session's stored rule is what gets enforced
    vote_mode: Optional[str] = None
    vote_count: Optional[int] = None

    @field_validator('voter_name')
    @classmethod
    def sanitize_voter_name_field(cls, v: str) -> str:
        return sanitize_voter_name(v)

    @field_validator('voter_id')
    @classmethod
    def validate_voter_id_field(cls, v: str) -> str:
        return validate_voter_id(v)


class VoterStatus(CamelModel):
    has_voted: bool
