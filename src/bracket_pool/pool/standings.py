"""Pool standings: score every entry and rank them.

Entries are ordered by points (descending).  Ties on points are broken by
how close the entry's tie breaker (a guess at the combined Championship
score) came to the actual combined score; entries without a guess, or any
entry while the combined score is unknown, share the tie.  Equal entries
share a rank ("1, 1, 3").
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from bracket_pool.engine.propagation import apply_picks
from bracket_pool.engine.scoring import ScoringRule, max_possible_score, score_bracket
from bracket_pool.engine.structure import Bracket
from bracket_pool.ingest.schema import BracketRecord
from bracket_pool.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class StandingsEntry:
    """One ranked row of the standings table.

    Attributes:
        rank: Competition rank (ties share a rank).
        entry_id: Bracket record id.
        entry_name: Display name of the entry.
        points: Current score.
        max_possible: Current score plus all still-live picks.
        correct_picks: Number of correct picks so far.
        tie_breaker: Submitted combined-score guess.
        tie_breaker_diff: ``|guess - actual combined score|``, ``None`` when
            either is unknown.
        champion: Name of the picked champion, if any.
    """

    rank: int
    entry_id: str
    entry_name: str
    points: int
    max_possible: int
    correct_picks: int
    tie_breaker: int | None
    tie_breaker_diff: int | None
    champion: str | None


def _tie_breaker_diff(guess: int | None, championship_score: int | None) -> int | None:
    if guess is None or championship_score is None:
        return None
    return abs(guess - championship_score)


def compute_standings(  # noqa: PLR0913
    bracket: Bracket,
    records: Iterable[BracketRecord],
    actual_results: Mapping[str, str],
    championship_score: int | None = None,
    rules: ScoringRule | None = None,
    *,
    include_drafts: bool = False,
) -> list[StandingsEntry]:
    """Score and rank pool entries.

    Args:
        bracket: Bracket skeleton.
        records: Pool entries; only ``submitted`` ones are ranked unless
            *include_drafts* is set.
        actual_results: Game id → actual winning team id.
        championship_score: Actual combined Championship score, once known.
        rules: Scoring rule; defaults to ``"pool"``.
        include_drafts: Also rank ``in_progress`` entries.

    Returns:
        Ranked :class:`StandingsEntry` rows, best first.
    """
    rows: list[tuple[tuple[int, bool, int, str, str], BracketRecord, int, int, int, int | None, str | None]] = []
    for record in records:
        if record.status != "submitted" and not include_drafts:
            continue
        score = score_bracket(bracket, record.picks, actual_results, rules)
        ceiling = max_possible_score(bracket, record.picks, actual_results, rules)
        champion = apply_picks(bracket, record.picks).champion
        diff = _tie_breaker_diff(record.tie_breaker, championship_score)
        key = (-score.total, diff is None, diff or 0, record.entry_name.lower(), record.id)
        rows.append(
            (key, record, score.total, ceiling, score.correct_picks, diff, champion.name if champion else None)
        )

    rows.sort(key=lambda row: row[0])

    standings: list[StandingsEntry] = []
    previous_tie_key: tuple[int, bool, int] | None = None
    rank = 0
    for position, (key, record, points, ceiling, correct, diff, champion_name) in enumerate(rows, start=1):
        tie_key = key[:3]
        if tie_key != previous_tie_key:
            rank = position
            previous_tie_key = tie_key
        standings.append(
            StandingsEntry(
                rank=rank,
                entry_id=record.id,
                entry_name=record.entry_name,
                points=points,
                max_possible=ceiling,
                correct_picks=correct,
                tie_breaker=record.tie_breaker,
                tie_breaker_diff=diff,
                champion=champion_name,
            )
        )

    logger.info("Ranked %d entr%s", len(standings), "y" if len(standings) == 1 else "ies")
    return standings
