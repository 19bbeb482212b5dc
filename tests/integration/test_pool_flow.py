"""End-to-end pool flow: load the field, fill entries, submit, score and rank."""

from __future__ import annotations

from pathlib import Path

from bracket_pool.config import load_settings
from bracket_pool.engine import Bracket, apply_picks, build_bracket, on_pick_changed
from bracket_pool.ingest import BracketRecord, JsonBracketRepository, load_results, load_tournament_data
from bracket_pool.pool import compute_standings, validate_submission

_PLAYED_R64 = ("-r64-1", "-r64-3", "-r64-4", "-r64-5", "-r64-6", "-r64-7", "-r64-8")


def _fill(bracket: Bracket, favour_upsets: bool) -> dict[str, str]:
    """Click through every game in order, always taking the same kind of seed."""
    picks: dict[str, str] = {}
    for game_id in bracket.games:
        game = apply_picks(bracket, picks).games[game_id]
        assert game.team1 is not None and game.team2 is not None
        better, worse = sorted((game.team1, game.team2), key=lambda t: (t.seed, t.id))
        picks = on_pick_changed(bracket, game_id, (worse if favour_upsets else better).id, picks)
    return picks


def test_pool_flow(tournament_file: Path, temp_data_dir: Path, tmp_path: Path) -> None:
    bracket = build_bracket(load_tournament_data(tournament_file))
    settings = load_settings()
    repo = JsonBracketRepository(temp_data_dir)

    chalk = _fill(bracket, favour_upsets=False)
    upsets = _fill(bracket, favour_upsets=True)

    for bracket_id, picks, tie_breaker in (("chalk", chalk, 140), ("upsets", upsets, 150)):
        record = repo.save(BracketRecord(id=bracket_id, entry_name=bracket_id.title(), picks=picks))
        assert not validate_submission(bracket, record.picks, record.tie_breaker, settings).is_valid
        record = record.model_copy(update={"tie_breaker": tie_breaker})
        result = validate_submission(bracket, record.picks, record.tie_breaker, settings)
        assert result.is_valid, result.errors
        repo.save(record.model_copy(update={"status": "submitted"}))

    # Favourites win every Round of 64 game played so far, except one 8/9 game.
    rows = ["game_id,winner_id"]
    rows += [f"{game_id},{team_id}" for game_id, team_id in chalk.items() if game_id.endswith(_PLAYED_R64)]
    rows.append(f"East-r64-2,{upsets['East-r64-2']}")
    results_csv = tmp_path / "results.csv"
    results_csv.write_text("\n".join(rows) + "\n")
    results = load_results(results_csv)
    assert len(results) == 29

    standings = compute_standings(bracket, repo.list(), results, rules=settings.scoring_rule())
    by_id = {row.entry_id: row for row in standings}

    # chalk: 28 favourites at 1 point; upsets: the 9-over-8 game at 1 + 2.
    assert by_id["chalk"].points == 28
    assert by_id["upsets"].points == 3
    assert [row.entry_id for row in standings] == ["chalk", "upsets"]
    assert by_id["chalk"].champion == "East Team 1"
    assert by_id["chalk"].max_possible > by_id["upsets"].max_possible
