"""Unit tests for results aggregation."""
import pytest

from quickvote.core.utils import round_half_up
from quickvote.services.results import build_results, tally_dates, tally_options
from tests.utils import make_session


@pytest.mark.unit
class TestTallyOptions:
    """Tests for tally_options."""

    def test_two_voters_same_option(self):
        """round(2 / (2 voters * voteCount 2) * 100) = 50."""
        session = make_session(
            ["A", "B", "C"],
            votes={"v1": ["A", "B"], "v2": ["A", "C"]},
            vote_count=2,
        )
        results = tally_options(session)

        assert results[0].option == "A"
        assert results[0].votes == 2
        assert results[0].percentage == 50

    def test_no_votes_gives_zero_percent(self):
        session = make_session(["A", "B"])
        results = tally_options(session)
        assert [(r.option, r.votes, r.percentage) for r in results] == [("A", 0, 0), ("B", 0, 0)]

    def test_sorted_descending_with_stable_ties(self):
        session = make_session(
            ["A", "B", "C", "D"],
            votes={"v1": ["C"], "v2": ["B"], "v3": ["C"]},
        )
        results = tally_options(session)
        # C leads; A, B, D keep option order among ties (B has 1, A and D have 0)
        assert [r.option for r in results] == ["C", "B", "A", "D"]

    def test_denominator_uses_configured_count_in_minimum_mode(self):
        """Minimum-mode percentages can exceed 100 with the configured-count denominator."""
        session = make_session(
            ["A", "B", "C"],
            votes={"v1": ["A", "B", "C"]},
            vote_count=1,
            vote_mode="minimum",
        )
        results = tally_options(session)
        assert all(r.percentage == 100 for r in results)

        session = make_session(
            ["A", "B", "C"],
            votes={"v1": ["A", "B", "C"], "v2": ["A"]},
            vote_count=1,
            vote_mode="minimum",
        )
        by_option = {r.option: r for r in tally_options(session)}
        assert by_option["A"].percentage == 100  # 2 / (2 * 1)
        assert by_option["B"].percentage == 50

    def test_denominator_uses_configured_count_in_maximum_mode(self):
        """Maximum-mode voters who pick fewer options lower everyone's share."""
        session = make_session(
            ["A", "B", "C"],
            votes={"v1": ["A"]},
            vote_count=3,
            vote_mode="maximum",
        )
        by_option = {r.option: r for r in tally_options(session)}
        assert by_option["A"].percentage == 33  # 1 / (1 * 3)

    def test_percentages_round_half_up(self):
        session = make_session(
            ["A", "B"],
            votes={f"v{i}": ["A"] for i in range(1, 8)} | {"v8": ["B"]},
        )
        # 1 / 8 = 12.5% rounds up to 13
        by_option = {r.option: r for r in tally_options(session)}
        assert by_option["B"].percentage == 13
        assert by_option["A"].percentage == 88


@pytest.mark.unit
class TestTallyDates:
    """Tests for tally_dates."""

    def test_no_dates_configured(self):
        session = make_session(["A", "B"], votes={"v1": ["A"]})
        assert tally_dates(session) == []

    def test_date_percentages_use_voter_count(self):
        session = make_session(
            ["A", "B"],
            votes={"v1": ["A"], "v2": ["B"], "v3": ["A"]},
            dates=["2025-01-01", "2025-01-02"],
            date_votes={
                "v1": ["2025-01-01", "2025-01-02"],
                "v2": ["2025-01-02"],
                "v3": ["2025-01-02"],
            },
        )
        results = tally_dates(session)

        assert [(r.date, r.votes, r.percentage) for r in results] == [
            ("2025-01-02", 3, 100),
            ("2025-01-01", 1, 33),
        ]

    def test_dates_with_no_voters(self):
        session = make_session(["A", "B"], dates=["2025-01-01"])
        results = tally_dates(session)
        assert results[0].votes == 0
        assert results[0].percentage == 0


@pytest.mark.unit
def test_build_results():
    session = make_session(["A", "B"], votes={"v1": ["A"], "v2": ["A"]})
    results = build_results(session)

    assert results.session_id == session.id
    assert results.total_voters == 2
    assert results.options[0].option == "A"
    assert results.options[0].percentage == 100
    assert results.dates == []


@pytest.mark.unit
@pytest.mark.parametrize("value,expected", [(0, 0), (0.4, 0), (0.5, 1), (12.5, 13), (33.3333, 33), (66.6667, 67)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected
