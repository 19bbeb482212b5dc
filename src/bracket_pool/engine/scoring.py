"""Bracket scoring against actual tournament results.

Scoring rules are small plugin classes registered by name (mirroring
the decorator registry pattern used elsewhere), so a pool can switch
rules through configuration:

* ``"pool"``: 1-2-4-8-12-16 plus a +2 underdog bonus in every round.
* ``"classic"``: 1-2-4-8-16-32, no bonus.

:func:`score_bracket` materializes the actual results with the
propagation engine to learn which two teams met in each resolved game,
so the underdog bonus can compare the correct pick's seed against the
seed of the team it actually beat.  Play-in games never appear in a
64-team bracket and are therefore never scored.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar, runtime_checkable

from bracket_pool.engine.propagation import apply_picks
from bracket_pool.engine.structure import ROUNDS, Bracket, Round
from bracket_pool.utils.logger import get_logger

logger = get_logger(__name__)

#: Name of the rule used when none is given.
DEFAULT_SCORING: str = "pool"

# ---------------------------------------------------------------------------
# Scoring registry
# ---------------------------------------------------------------------------

_ST = TypeVar("_ST")

_SCORING_REGISTRY: dict[str, type] = {}


class ScoringNotFoundError(KeyError):
    """Raised when a requested scoring name is not in the registry."""


def register_scoring(name: str) -> Callable[[_ST], _ST]:
    """Class decorator that registers a scoring rule class.

    Raises:
        ValueError: If *name* is already registered.
    """

    def decorator(cls: _ST) -> _ST:
        if name in _SCORING_REGISTRY:
            msg = f"Scoring name {name!r} is already registered to {_SCORING_REGISTRY[name].__name__}"
            raise ValueError(msg)
        _SCORING_REGISTRY[name] = cls  # type: ignore[assignment]
        return cls

    return decorator


def get_scoring(name: str) -> type:
    """Return the scoring class registered under *name*.

    Raises:
        ScoringNotFoundError: If *name* is not registered.
    """
    try:
        return _SCORING_REGISTRY[name]
    except KeyError:
        msg = f"No scoring registered with name {name!r}. Available: {list_scorings()}"
        raise ScoringNotFoundError(msg) from None


def list_scorings() -> list[str]:
    """Return all registered scoring names (sorted)."""
    return sorted(_SCORING_REGISTRY)


# ---------------------------------------------------------------------------
# Scoring rules
# ---------------------------------------------------------------------------


@runtime_checkable
class ScoringRule(Protocol):
    """Protocol for bracket scoring rules."""

    @property
    def name(self) -> str:
        """Human-readable name of the scoring rule."""
        ...

    def points_per_round(self, round_: Round) -> int:
        """Return points awarded for a correct pick in *round_*."""
        ...

    def upset_bonus(self, winner_seed: int, loser_seed: int) -> int:
        """Return bonus points for a correct pick of *winner_seed* over *loser_seed*."""
        ...


class _TableScoring:
    """Round-points table with a flat underdog bonus."""

    _POINTS: tuple[int, ...] = ()
    _UNDERDOG_BONUS: int = 0
    _NAME: str = ""

    @property
    def name(self) -> str:
        return self._NAME

    def points_per_round(self, round_: Round) -> int:
        return self._POINTS[ROUNDS.index(round_)]

    def upset_bonus(self, winner_seed: int, loser_seed: int) -> int:
        # Strictly worse (numerically higher) seed only; equal seeds earn nothing.
        return self._UNDERDOG_BONUS if winner_seed > loser_seed else 0


@register_scoring("pool")
class PoolScoring(_TableScoring):
    """Pool scoring: 1-2-4-8-12-16 plus +2 for every correctly picked upset."""

    _POINTS = (1, 2, 4, 8, 12, 16)
    _UNDERDOG_BONUS = 2
    _NAME = "pool"


@register_scoring("classic")
class ClassicScoring(_TableScoring):
    """Doubling scoring: 1-2-4-8-16-32 (192 for a perfect bracket), no bonus."""

    _POINTS = (1, 2, 4, 8, 16, 32)
    _NAME = "classic"


class DictScoring(_TableScoring):
    """Scoring rule from a mapping of round to points.

    Args:
        points: Mapping of :class:`Round` (or its token, e.g. ``"r64"``)
            to points, covering all six rounds.
        scoring_name: Name for this rule.
        underdog_bonus: Flat bonus for a correctly picked upset.

    Raises:
        ValueError: If *points* does not cover exactly the six rounds.
    """

    def __init__(
        self,
        points: Mapping[Round | str, int],
        scoring_name: str,
        underdog_bonus: int = 0,
    ) -> None:
        try:
            by_round = {Round(key): int(value) for key, value in points.items()}
        except ValueError as exc:
            msg = f"DictScoring keys must be rounds {[r.value for r in ROUNDS]}: {exc}"
            raise ValueError(msg) from None
        if set(by_round) != set(ROUNDS) or len(points) != len(ROUNDS):
            msg = f"DictScoring requires exactly {len(ROUNDS)} entries (one per round), got {len(points)}"
            raise ValueError(msg)
        self._POINTS = tuple(by_round[r] for r in ROUNDS)
        self._UNDERDOG_BONUS = underdog_bonus
        self._NAME = scoring_name


def scoring_from_config(config: Mapping[str, Any]) -> ScoringRule:
    """Create a scoring rule from a configuration dict.

    Dispatches on ``config["type"]``: any registered name (``"pool"``,
    ``"classic"``, …), or ``"dict"`` (requires ``points``; optional
    ``name`` and ``underdog_bonus``).

    Raises:
        ValueError: If ``type`` is unknown or required keys are missing.
    """
    if "type" not in config:
        msg = "Scoring config requires a 'type' key"
        raise ValueError(msg)
    scoring_type = config["type"]
    if scoring_type == "dict":
        if "points" not in config:
            msg = "Scoring type 'dict' requires a 'points' mapping"
            raise ValueError(msg)
        return DictScoring(config["points"], config.get("name", "dict"), config.get("underdog_bonus", 0))
    try:
        rule: ScoringRule = get_scoring(scoring_type)()
    except ScoringNotFoundError:
        msg = f"Unknown scoring type: {scoring_type!r}"
        raise ValueError(msg) from None
    return rule


# ---------------------------------------------------------------------------
# Score records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GameScore:
    """Scoring outcome of one resolved, picked game.

    Attributes:
        game_id: Stable game id.
        round: Round of the game.
        picked_team_id: Team the entry picked.
        actual_winner_id: Team that actually won.
        correct: Whether the pick matched the result.
        base_points: Round value when correct, else 0.
        bonus_points: Underdog bonus when correct and an upset, else 0.
    """

    game_id: str
    round: Round
    picked_team_id: str
    actual_winner_id: str
    correct: bool
    base_points: int
    bonus_points: int

    @property
    def points(self) -> int:
        """Return base plus bonus points."""
        return self.base_points + self.bonus_points


@dataclass(frozen=True)
class BracketScore:
    """Total and per-game breakdown of one scored bracket."""

    total: int
    breakdown: tuple[GameScore, ...]

    @property
    def correct_picks(self) -> int:
        """Return the number of correct picks."""
        return sum(1 for g in self.breakdown if g.correct)


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


def _resolve_rules(rules: ScoringRule | None) -> ScoringRule:
    if rules is not None:
        return rules
    default: ScoringRule = get_scoring(DEFAULT_SCORING)()
    return default


def score_bracket(
    bracket: Bracket,
    picks: Mapping[str, str],
    actual_results: Mapping[str, str],
    rules: ScoringRule | None = None,
) -> BracketScore:
    """Score *picks* against *actual_results*.

    A game contributes only when it has both a pick and a resolved actual
    winner.  The underdog bonus needs the beaten team, which is taken from
    the actual results' materialized bracket; if that game cannot be
    materialized (an inconsistent results feed), only base points apply.

    Args:
        bracket: Bracket skeleton.
        picks: Game id → picked team id.
        actual_results: Game id → actual winning team id.
        rules: Scoring rule; defaults to ``"pool"``.

    Returns:
        :class:`BracketScore` with breakdown entries in bracket order.
    """
    rules = _resolve_rules(rules)
    actual = apply_picks(bracket, actual_results)

    breakdown: list[GameScore] = []
    for game_id, game in actual.games.items():
        pick = picks.get(game_id)
        actual_winner = actual_results.get(game_id)
        if pick is None or actual_winner is None:
            continue

        correct = pick == actual_winner
        base = rules.points_per_round(game.round) if correct else 0
        bonus = 0
        loser = game.loser
        if correct and game.winner is not None and loser is not None:
            bonus = rules.upset_bonus(game.winner.seed, loser.seed)
        breakdown.append(
            GameScore(
                game_id=game_id,
                round=game.round,
                picked_team_id=pick,
                actual_winner_id=actual_winner,
                correct=correct,
                base_points=base,
                bonus_points=bonus,
            )
        )

    total = sum(g.points for g in breakdown)
    logger.debug("Scored %d resolved game(s) with %r: %d points", len(breakdown), rules.name, total)
    return BracketScore(total=total, breakdown=tuple(breakdown))


def points_by_round(score: BracketScore) -> dict[Round, int]:
    """Return points earned per round (every round present, zero-filled)."""
    by_round = dict.fromkeys(ROUNDS, 0)
    for game in score.breakdown:
        by_round[game.round] += game.points
    return by_round


def eliminated_teams(bracket: Bracket, actual_results: Mapping[str, str]) -> frozenset[str]:
    """Return the ids of teams that have lost a resolved game."""
    actual = apply_picks(bracket, actual_results)
    return frozenset(g.loser.id for g in actual.games.values() if g.loser is not None)


def max_possible_score(
    bracket: Bracket,
    picks: Mapping[str, str],
    actual_results: Mapping[str, str],
    rules: ScoringRule | None = None,
) -> int:
    """Return the current score plus the base value of every live pick.

    A pick is live when its game is still unresolved and its team has not
    been eliminated.  Underdog bonuses are not projected.
    """
    rules = _resolve_rules(rules)
    current = score_bracket(bracket, picks, actual_results, rules).total
    out = eliminated_teams(bracket, actual_results)
    remaining = sum(
        rules.points_per_round(game.round)
        for game_id, game in bracket.games.items()
        if game_id not in actual_results and game_id in picks and picks[game_id] not in out
    )
    return current + remaining
