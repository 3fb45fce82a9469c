"""Results aggregation.

Percentages for options are normalized by voters * vote_count (the session's
configured count), not by how many options each voter actually picked. For
"minimum" sessions this can exceed 100 and for "maximum" sessions it can
undercount; the formula is kept as-is so every client shows the same numbers.
"""
from typing import Dict, List

from quickvote.core.utils import round_half_up
from quickvote.schemas import DateResult, OptionResult, SessionDetail, SessionResults


def _count(labels: List[str], selections: List[List[str]]) -> Dict[str, int]:
    """Count, for each label, how many selections contain it."""
    counts = {label: 0 for label in labels}
    for selected in selections:
        for label in set(selected):
            if label in counts:
                counts[label] += 1
    return counts


def tally_options(session: SessionDetail) -> List[OptionResult]:
    """Per-option vote counts, most voted first, ties in option order."""
    total_voters = len(session.votes)
    counts = _count(session.options, [vote.choices for vote in session.votes.values()])
    denominator = total_voters * session.vote_count

    results = [
        OptionResult(
            option=option,
            votes=counts[option],
            percentage=round_half_up(counts[option] / denominator * 100) if denominator else 0,
        )
        for option in session.options
    ]
    # sorted() is stable, so equal counts keep the session's option order
    return sorted(results, key=lambda result: result.votes, reverse=True)


def tally_dates(session: SessionDetail) -> List[DateResult]:
    """Per-date availability counts; empty when the session has no dates."""
    if session.dates is None:
        return []

    total_voters = len(session.votes)
    counts = _count(session.dates, [vote.dates or [] for vote in session.votes.values()])

    results = [
        DateResult(
            date=date,
            votes=counts[date],
            percentage=round_half_up(counts[date] / total_voters * 100) if total_voters else 0,
        )
        for date in session.dates
    ]
    return sorted(results, key=lambda result: result.votes, reverse=True)


def build_results(session: SessionDetail) -> SessionResults:
    return SessionResults(
        session_id=session.id,
        total_voters=len(session.votes),
        options=tally_options(session),
        dates=tally_dates(session),
    )
