"""Submission checks for a pool entry.

These are application-layer rules: they report problems as messages and
never raise, so the caller decides whether to block a submission.  The
engine itself tolerates every state checked here.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from bracket_pool.config import PoolSettings
from bracket_pool.engine.propagation import apply_picks
from bracket_pool.engine.structure import N_GAMES, Bracket

#: Maximum number of offending ids quoted in one message.
_MAX_LISTED: int = 5


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of :func:`validate_submission`."""

    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        """Return ``True`` when there are no errors."""
        return not self.errors


def _quote(ids: list[str]) -> str:
    shown = ", ".join(ids[:_MAX_LISTED])
    return f"{shown}..." if len(ids) > _MAX_LISTED else shown


def validate_tie_breaker(value: int | None, settings: PoolSettings) -> str | None:
    """Return an error message for *value*, or ``None`` when it is acceptable."""
    if value is None:
        return "Tie breaker is required"
    if not settings.tie_breaker_low <= value <= settings.tie_breaker_high:
        return f"Tie breaker must be between {settings.tie_breaker_low} and {settings.tie_breaker_high}"
    return None


def validate_submission(
    bracket: Bracket,
    picks: Mapping[str, str],
    tie_breaker: int | None,
    settings: PoolSettings | None = None,
) -> ValidationResult:
    """Check that an entry is complete and internally consistent.

    Errors cover the tie breaker, picks for unknown games, picks naming
    unknown teams, orphaned picks (recorded but not reachable through the
    entry's own earlier picks), and missing picks.

    Args:
        bracket: Bracket skeleton.
        picks: The entry's picks map.
        tie_breaker: Submitted combined-score guess.
        settings: Pool settings; defaults apply when ``None``.
    """
    settings = settings or PoolSettings()
    errors: list[str] = []
    warnings: list[str] = []

    tie_breaker_error = validate_tie_breaker(tie_breaker, settings)
    if tie_breaker_error is not None:
        errors.append(tie_breaker_error)

    unknown_games = sorted(gid for gid in picks if gid not in bracket.games)
    if unknown_games:
        errors.append(f"Picks for unknown games: {_quote(unknown_games)}")

    unknown_teams = sorted(
        f"{gid}: {tid}" for gid, tid in picks.items() if gid in bracket.games and tid not in bracket.teams
    )
    if unknown_teams:
        errors.append(f"Invalid team ids found: {_quote(unknown_teams)}")

    effective = apply_picks(bracket, picks).winners
    orphaned = sorted(
        gid
        for gid, tid in picks.items()
        if gid in bracket.games and tid in bracket.teams and effective.get(gid) != tid
    )
    if orphaned:
        errors.append(f"Picks do not advance from earlier rounds: {_quote(orphaned)}")

    missing = N_GAMES - len(effective)
    if missing > 0:
        errors.append(f"Missing picks for {missing} game(s)")

    if effective and len(effective) < N_GAMES // 2:
        warnings.append("Bracket is less than half complete")

    return ValidationResult(errors=tuple(errors), warnings=tuple(warnings))
