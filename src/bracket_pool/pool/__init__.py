"""Pool-level operations: submission validation and standings."""

from __future__ import annotations

from bracket_pool.pool.standings import StandingsEntry, compute_standings
from bracket_pool.pool.validation import ValidationResult, validate_submission, validate_tie_breaker

__all__ = [
    "StandingsEntry",
    "ValidationResult",
    "compute_standings",
    "validate_submission",
    "validate_tie_breaker",
]
