"""Tournament bracket engine: structure, propagation, cascade, and scoring."""

from __future__ import annotations

from bracket_pool.engine.cascade import (
    clear_pick,
    find_downstream_games,
    on_pick_changed,
    prune_picks,
    reset_picks,
)
from bracket_pool.engine.propagation import MaterializedBracket, MaterializedGame, apply_picks
from bracket_pool.engine.scoring import (
    BracketScore,
    ClassicScoring,
    DictScoring,
    GameScore,
    PoolScoring,
    ScoringNotFoundError,
    ScoringRule,
    eliminated_teams,
    get_scoring,
    list_scorings,
    max_possible_score,
    points_by_round,
    register_scoring,
    score_bracket,
    scoring_from_config,
)
from bracket_pool.engine.structure import (
    CHAMPIONSHIP_ID,
    FINAL_FOUR_IDS,
    N_GAMES,
    REGIONAL_ROUNDS,
    ROUNDS,
    Bracket,
    Game,
    GameKey,
    Round,
    build_bracket,
    make_game_id,
    parse_game_id,
    round_label,
)

__all__ = [
    "CHAMPIONSHIP_ID",
    "FINAL_FOUR_IDS",
    "N_GAMES",
    "REGIONAL_ROUNDS",
    "ROUNDS",
    "Bracket",
    "BracketScore",
    "ClassicScoring",
    "DictScoring",
    "Game",
    "GameKey",
    "GameScore",
    "MaterializedBracket",
    "MaterializedGame",
    "PoolScoring",
    "Round",
    "ScoringNotFoundError",
    "ScoringRule",
    "apply_picks",
    "build_bracket",
    "clear_pick",
    "eliminated_teams",
    "find_downstream_games",
    "get_scoring",
    "list_scorings",
    "make_game_id",
    "max_possible_score",
    "on_pick_changed",
    "parse_game_id",
    "points_by_round",
    "prune_picks",
    "register_scoring",
    "reset_picks",
    "round_label",
    "score_bracket",
    "scoring_from_config",
]
