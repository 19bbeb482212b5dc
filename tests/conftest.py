"""Shared pytest fixtures for the bracket_pool test suite.

Fixtures defined here are available to all tests without explicit imports.
The standard field has four regions (East, West, South, Midwest at the
TopLeft, BottomLeft, TopRight, BottomRight positions); team ids are
``"<region>-<seed>"`` in lower case, e.g. ``"east-1"``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from bracket_pool.engine import Bracket, apply_picks, build_bracket
from bracket_pool.ingest.schema import TournamentData

REGIONS: tuple[tuple[str, str], ...] = (
    ("East", "TopLeft"),
    ("West", "BottomLeft"),
    ("South", "TopRight"),
    ("Midwest", "BottomRight"),
)


def make_tournament_payload(year: int = 2026) -> dict[str, Any]:
    """Return raw tournament JSON for the standard 64-team field."""
    return {
        "year": year,
        "name": f"{year} Test Tournament",
        "regions": [
            {
                "name": name,
                "position": position,
                "teams": [
                    {"id": f"{name.lower()}-{seed}", "name": f"{name} Team {seed}", "seed": seed}
                    for seed in range(1, 17)
                ],
            }
            for name, position in REGIONS
        ],
    }


def make_chalk_picks(bracket: Bracket) -> dict[str, str]:
    """Pick the better (lower) seed in every game; ties go to team1."""
    picks: dict[str, str] = {}
    for game_id in bracket.games:
        game = apply_picks(bracket, picks).games[game_id]
        assert game.team1 is not None and game.team2 is not None
        favourite = game.team1 if game.team1.seed <= game.team2.seed else game.team2
        picks[game_id] = favourite.id
    return picks


@pytest.fixture
def temp_data_dir(tmp_path: Path) -> Path:
    """Provide an isolated temporary directory for bracket records."""
    data_dir = tmp_path / "test_data"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def tournament_payload() -> dict[str, Any]:
    """Return raw tournament JSON for the standard field."""
    return make_tournament_payload()


@pytest.fixture
def tournament(tournament_payload: dict[str, Any]) -> TournamentData:
    """Return validated tournament data for the standard field."""
    return TournamentData.model_validate(tournament_payload)


@pytest.fixture
def bracket(tournament: TournamentData) -> Bracket:
    """Return the skeleton built from the standard field."""
    return build_bracket(tournament)


@pytest.fixture
def chalk_picks(bracket: Bracket) -> dict[str, str]:
    """Return a complete picks map where every favourite wins."""
    return make_chalk_picks(bracket)


@pytest.fixture
def tournament_file(tmp_path: Path, tournament_payload: dict[str, Any]) -> Path:
    """Write the standard field to a JSON file and return its path."""
    path = tmp_path / "tournament.json"
    path.write_text(json.dumps(tournament_payload))
    return path
