"""Pydantic schemas for request/response validation."""
from quickvote.schemas.session import (
    SessionCreate,
    SessionDetail,
    VoteDetail,
    VoteRequest,
    CreateSessionResponse,
    VoterStatus,
)
from quickvote.schemas.results import OptionResult, DateResult, SessionResults
from quickvote.schemas.common import CamelModel, ErrorResponse

__all__ = [
    "SessionCreate",
    "SessionDetail",
    "VoteDetail",
    "VoteRequest",
    "CreateSessionResponse",
    "VoterStatus",
    "OptionResult",
    "DateResult",
    "SessionResults",
    "CamelModel",
    "ErrorResponse",
]
