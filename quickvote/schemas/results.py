"""Results schemas."""
from typing import List

from quickvote.schemas.common import CamelModel


class OptionResult(CamelModel):
    option: str
    votes: int
    percentage: int


class DateResult(CamelModel):
    date: str
    votes: int
    percentage: int


class SessionResults(CamelModel):
    session_id: str
    total_voters: int
    options: List[OptionResult]
    dates: List[DateResult]
