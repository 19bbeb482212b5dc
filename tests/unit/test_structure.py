"""Unit tests for the bracket skeleton builder and game-id helpers."""

from __future__ import annotations

from typing import Any

import pytest

from bracket_pool.engine.structure import (
    CHAMPIONSHIP_ID,
    FINAL_FOUR_IDS,
    GAMES_PER_REGION,
    N_GAMES,
    REGIONAL_ROUNDS,
    ROUNDS,
    Bracket,
    GameKey,
    Round,
    build_bracket,
    games_in_round,
    make_game_id,
    parse_game_id,
    round_label,
)
from bracket_pool.ingest.schema import RegionPosition, TournamentData

_EXPECTED_R64_SEEDS = [(1, 16), (8, 9), (5, 12), (4, 13), (6, 11), (3, 14), (7, 10), (2, 15)]


class TestRounds:
    """Tests for Round helpers."""

    def test_round_order(self) -> None:
        assert ROUNDS == (Round.R64, Round.R32, Round.S16, Round.E8, Round.FINAL_FOUR, Round.CHAMPIONSHIP)
        assert REGIONAL_ROUNDS == ROUNDS[:4]

    def test_games_in_round(self) -> None:
        assert [games_in_round(r) for r in ROUNDS] == [8, 4, 2, 1, 2, 1]

    def test_every_round_has_a_label(self) -> None:
        labels = [round_label(r) for r in ROUNDS]
        assert labels == ["Round of 64", "Round of 32", "Sweet 16", "Elite 8", "Final Four", "Championship"]

    def test_round_tokens(self) -> None:
        assert Round("r64") is Round.R64
        assert Round("final-four") is Round.FINAL_FOUR


class TestGameIds:
    """Tests for make_game_id / parse_game_id."""

    @pytest.mark.parametrize(
        ("region", "round_", "number", "expected"),
        [
            ("East", Round.R64, 1, "East-r64-1"),
            ("East", Round.E8, 1, "East-e8-1"),
            ("West", Round.S16, 2, "West-s16-2"),
            (None, Round.FINAL_FOUR, 2, "final-four-2"),
            (None, Round.CHAMPIONSHIP, 1, "championship"),
        ],
    )
    def test_make_game_id(self, region: str | None, round_: Round, number: int, expected: str) -> None:
        assert make_game_id(region, round_, number) == expected

    def test_parse_regional_id(self) -> None:
        assert parse_game_id("Midwest-r32-4") == GameKey(region="Midwest", round=Round.R32, number=4)

    def test_parse_hyphenated_region_label(self) -> None:
        assert parse_game_id("North-East-s16-1") == GameKey(region="North-East", round=Round.S16, number=1)

    def test_parse_national_ids(self) -> None:
        assert parse_game_id("final-four-1") == GameKey(region=None, round=Round.FINAL_FOUR, number=1)
        assert parse_game_id("championship") == GameKey(region=None, round=Round.CHAMPIONSHIP, number=1)

    @pytest.mark.parametrize("bad", ["", "East", "East-r16-1", "East-r64-0", "final-four-3", "game-1"])
    def test_parse_malformed_returns_none(self, bad: str) -> None:
        assert parse_game_id(bad) is None


class TestBuildBracket:
    """Tests for build_bracket."""

    @pytest.mark.smoke
    def test_game_counts(self, bracket: Bracket) -> None:
        assert len(bracket.games) == N_GAMES
        for position in RegionPosition:
            games = bracket.regions[position]
            assert len(games) == GAMES_PER_REGION
            assert [g.round for g in games] == [Round.R64] * 8 + [Round.R32] * 4 + [Round.S16] * 2 + [Round.E8]
        assert len(bracket.final_four) == 2
        assert bracket.championship.id == CHAMPIONSHIP_ID

    def test_every_game_id_parses_back(self, bracket: Bracket) -> None:
        for game in bracket.games.values():
            key = parse_game_id(game.id)
            assert key is not None
            assert (key.region, key.round, key.number) == (game.region, game.round, game.number)

    def test_round_of_64_pairings_follow_seed_order(self, bracket: Bracket) -> None:
        for position in RegionPosition:
            r64 = bracket.region_games(position, Round.R64)
            seeds = [(g.team1.seed, g.team2.seed) for g in r64 if g.team1 and g.team2]
            assert seeds == _EXPECTED_R64_SEEDS

    def test_later_rounds_are_undetermined(self, bracket: Bracket) -> None:
        for game in bracket.games.values():
            if game.round is Round.R64:
                assert game.is_determined
            else:
                assert game.team1 is None and game.team2 is None

    def test_regional_feeders(self, bracket: Bracket) -> None:
        assert bracket.games["East-r32-1"].feeders == ("East-r64-1", "East-r64-2")
        assert bracket.games["East-r32-4"].feeders == ("East-r64-7", "East-r64-8")
        assert bracket.games["East-s16-2"].feeders == ("East-r32-3", "East-r32-4")
        assert bracket.games["East-e8-1"].feeders == ("East-s16-1", "East-s16-2")

    def test_final_four_pairing_mirrors_bracket_halves(self, bracket: Bracket) -> None:
        ff1, ff2 = bracket.final_four
        assert ff1.id == FINAL_FOUR_IDS[0]
        assert ff1.feeders == ("East-e8-1", "West-e8-1")
        assert ff2.feeders == ("South-e8-1", "Midwest-e8-1")
        assert bracket.championship.feeders == FINAL_FOUR_IDS

    def test_next_game_edges(self, bracket: Bracket) -> None:
        assert bracket.next_game["East-r64-3"] == "East-r32-2"
        assert bracket.next_game["West-e8-1"] == "final-four-1"
        assert bracket.next_game["final-four-2"] == CHAMPIONSHIP_ID
        assert CHAMPIONSHIP_ID not in bracket.next_game

    def test_path_to_championship(self, bracket: Bracket) -> None:
        assert bracket.path_to_championship("South-r64-8") == [
            "South-r32-4",
            "South-s16-2",
            "South-e8-1",
            "final-four-2",
            "championship",
        ]

    def test_teams_indexed_by_id(self, bracket: Bracket) -> None:
        assert len(bracket.teams) == 64
        team = bracket.teams["midwest-11"]
        assert team.seed == 11
        assert team.region == "Midwest"

    def test_region_lookup(self, bracket: Bracket) -> None:
        assert bracket.region_position("South") is RegionPosition.TOP_RIGHT
        assert bracket.region_position("Nowhere") is None
        assert bracket.game("not-a-game") is None

    def test_input_team_order_is_irrelevant(self, tournament_payload: dict[str, Any], bracket: Bracket) -> None:
        shuffled = dict(tournament_payload)
        shuffled["regions"] = [
            {**region, "teams": list(reversed(region["teams"]))}
            for region in reversed(tournament_payload["regions"])
        ]
        assert build_bracket(TournamentData.model_validate(shuffled)) == bracket

    def test_rebuild_is_structurally_equal(self, tournament: TournamentData) -> None:
        first = build_bracket(tournament)
        second = build_bracket(tournament)
        assert first is not second
        assert first == second
