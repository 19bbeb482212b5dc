"""bracket_pool: single-elimination bracket pool engine."""

from __future__ import annotations

from bracket_pool.engine import apply_picks, build_bracket, on_pick_changed, score_bracket

__all__ = [
    "apply_picks",
    "build_bracket",
    "on_pick_changed",
    "score_bracket",
]
