"""Vote validation rules.

Pure decision logic: given a session and a proposed vote, either return
quietly or raise VoteRejected naming the first rule the vote breaks.
"""
from typing import List, Optional

from quickvote.core.constants import VOTE_MODE_EXACTLY, VOTE_MODE_MAXIMUM, VOTE_MODE_MINIMUM
from quickvote.core.exceptions import DuplicateVoter, VoteRejected
from quickvote.schemas import SessionDetail


def _plural(count: int) -> str:
    return "option" if count == 1 else "options"


def check_vote_count(vote_mode: str, vote_count: int, selected: int) -> None:
    """
    Enforce the session's count rule on the number of selected options.

    Raises:
        VoteRejected: With the numeric bound in the message
    """
    if vote_mode == VOTE_MODE_EXACTLY and selected != vote_count:
        raise VoteRejected(f"Must select exactly {vote_count} {_plural(vote_count)}")
    if vote_mode == VOTE_MODE_MINIMUM and selected < vote_count:
        raise VoteRejected(f"Must select at least {vote_count} {_plural(vote_count)}")
    if vote_mode == VOTE_MODE_MAXIMUM and selected > vote_count:
        raise VoteRejected(f"Can only select up to {vote_count} {_plural(vote_count)}")


def validate_vote(
    session: SessionDetail,
    voter_id: str,
    name: str,
    choices: List[str],
    dates: Optional[List[str]],
) -> None:
    """
    Check a proposed vote against the session's rules, first failure wins.

    The caller is responsible for loading an unexpired session.

    Raises:
        VoteRejected: Name, count, option or date rule violated
        DuplicateVoter: The voter already has a vote in session.votes
    """
    if not name or not name.strip():
        raise VoteRejected("Please enter your name")

    check_vote_count(session.vote_mode, session.vote_count, len(choices))

    valid_options = set(session.options)
    for choice in choices:
        if choice not in valid_options:
            raise VoteRejected(f"Invalid option: {choice}")
    if len(set(choices)) != len(choices):
        raise VoteRejected("Each option can only be selected once")

    if session.dates is not None:
        if not dates:
            raise VoteRejected("Must select at least one date")
        valid_dates = set(session.dates)
        for date in dates:
            if date not in valid_dates:
                raise VoteRejected(f"Invalid date: {date}")

    if voter_id in session.votes:
        raise DuplicateVoter()
