"""Unit tests for pool standings."""

from __future__ import annotations

import pytest

from bracket_pool.engine.scoring import ClassicScoring
from bracket_pool.engine.structure import Bracket
from bracket_pool.ingest.schema import BracketRecord
from bracket_pool.pool.standings import compute_standings

_RESULTS = {"East-r64-1": "east-1", "East-r64-2": "east-8"}


@pytest.fixture
def records(chalk_picks: dict[str, str]) -> list[BracketRecord]:
    """Two identical chalk entries, one empty entry and one chalk draft."""
    return [
        BracketRecord(id="b", entry_name="Bob", picks=chalk_picks, tie_breaker=150, status="submitted"),
        BracketRecord(id="a", entry_name="alice", picks=chalk_picks, tie_breaker=140, status="submitted"),
        BracketRecord(id="c", entry_name="Carol", picks={}, tie_breaker=145, status="submitted"),
        BracketRecord(id="d", entry_name="Dave", picks=chalk_picks, tie_breaker=146),
    ]


class TestComputeStandings:
    """Tests for compute_standings."""

    @pytest.mark.smoke
    def test_ties_share_rank(self, bracket: Bracket, records: list[BracketRecord]) -> None:
        rows = compute_standings(bracket, records, _RESULTS)
        assert [(r.rank, r.entry_id) for r in rows] == [(1, "a"), (1, "b"), (3, "c")]
        assert [r.points for r in rows] == [2, 2, 0]
        assert all(r.tie_breaker_diff is None for r in rows)

    def test_tie_breaker_decides_once_known(self, bracket: Bracket, records: list[BracketRecord]) -> None:
        rows = compute_standings(bracket, records, _RESULTS, championship_score=146)
        assert [(r.rank, r.entry_id, r.tie_breaker_diff) for r in rows] == [(1, "b", 4), (2, "a", 6), (3, "c", 1)]

    def test_missing_guess_ranks_behind_known_guess(self, bracket: Bracket, chalk_picks: dict[str, str]) -> None:
        records = [
            BracketRecord(id="x", entry_name="X", picks=chalk_picks, status="submitted"),
            BracketRecord(id="y", entry_name="Y", picks=chalk_picks, tie_breaker=400, status="submitted"),
        ]
        rows = compute_standings(bracket, records, _RESULTS, championship_score=140)
        assert [(r.rank, r.entry_id) for r in rows] == [(1, "y"), (2, "x")]

    def test_drafts_excluded_by_default(self, bracket: Bracket, records: list[BracketRecord]) -> None:
        assert "d" not in {r.entry_id for r in compute_standings(bracket, records, _RESULTS)}
        rows = compute_standings(bracket, records, _RESULTS, include_drafts=True)
        assert [(r.rank, r.entry_id) for r in rows] == [(1, "a"), (1, "b"), (1, "d"), (4, "c")]

    def test_row_details(self, bracket: Bracket, records: list[BracketRecord]) -> None:
        first, _, last = compute_standings(bracket, records, _RESULTS)
        assert first.champion == "East Team 1"
        assert first.correct_picks == 2
        assert first.max_possible == 168
        assert last.champion is None
        assert last.max_possible == 0

    def test_custom_rules(self, bracket: Bracket, records: list[BracketRecord]) -> None:
        rows = compute_standings(bracket, records, _RESULTS, rules=ClassicScoring())
        assert rows[0].max_possible == 192

    def test_no_entries(self, bracket: Bracket) -> None:
        assert compute_standings(bracket, [], _RESULTS) == []
