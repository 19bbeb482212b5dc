"""Pool-level settings.

Settings are a Pydantic model with defaults matching the site
configuration; a JSON file may override any subset of fields and is
validated through the model.

``scoring`` is either a registered rule name (``"pool"``, ``"classic"``)
or a rule config dict as accepted by
:func:`~bracket_pool.engine.scoring.scoring_from_config`, e.g.::

    {"scoring": {"type": "dict", "name": "fib",
                 "points": {"r64": 1, "r32": 2, "s16": 3, "e8": 5,
                            "final-four": 8, "championship": 13}}}

``year``, when set, pins the pool to one tournament; commands refuse
tournament data for any other year.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from bracket_pool.engine.scoring import DEFAULT_SCORING, ScoringRule, scoring_from_config


class YearMismatchError(ValueError):
    """Tournament data is for a different year than the pool."""


class PoolSettings(BaseModel):
    """Settings for one bracket pool."""

    tie_breaker_low: int = Field(default=50, ge=0)
    tie_breaker_high: int = Field(default=500, ge=0)
    scoring: str | dict[str, Any] = DEFAULT_SCORING
    year: int | None = None

    @field_validator("scoring")
    @classmethod
    def _check_scoring(cls, value: str | dict[str, Any]) -> str | dict[str, Any]:
        _build_rule(value)
        return value

    @model_validator(mode="after")
    def _check_tie_breaker_range(self) -> PoolSettings:
        if self.tie_breaker_low > self.tie_breaker_high:
            msg = f"tie_breaker_low ({self.tie_breaker_low}) must be <= tie_breaker_high ({self.tie_breaker_high})"
            raise ValueError(msg)
        return self

    def scoring_rule(self) -> ScoringRule:
        """Return a fresh instance of the configured scoring rule."""
        return _build_rule(self.scoring)

    def check_year(self, year: int) -> None:
        """Raise :class:`YearMismatchError` if the pool is pinned to another year."""
        if self.year is not None and self.year != year:
            msg = f"Tournament year {year} does not match pool year {self.year}"
            raise YearMismatchError(msg)


def _build_rule(scoring: str | dict[str, Any]) -> ScoringRule:
    return scoring_from_config({"type": scoring} if isinstance(scoring, str) else scoring)


def load_settings(path: Path | None = None) -> PoolSettings:
    """Return default settings, overridden by the JSON file at *path* if given.

    Raises:
        FileNotFoundError: If *path* is given but does not exist.
        pydantic.ValidationError: If the overrides are invalid.
    """
    if path is None:
        return PoolSettings()
    if not path.exists():
        msg = f"Config file not found: {path}"
        raise FileNotFoundError(msg)
    override = json.loads(path.read_text())
    return PoolSettings(**override)
