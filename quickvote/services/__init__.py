from .cleanup import ExpirySweeper
from .results import build_results, tally_dates, tally_options
from .sessions import SessionService, drain_publishes, validate_session_request
from .validator import check_vote_count, validate_vote

__all__ = [
    # sessions
    "SessionService",
    "drain_publishes",
    "validate_session_request",
    # validation
    "check_vote_count",
    "validate_vote",
    # results
    "build_results",
    "tally_dates",
    "tally_options",
    # maintenance
    "ExpirySweeper",
]
