"""Typer CLI application for the bracket pool."""

from __future__ import annotations

import datetime
import json
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bracket_pool.config import PoolSettings, YearMismatchError, load_settings
from bracket_pool.engine import (
    ROUNDS,
    Bracket,
    apply_picks,
    build_bracket,
    on_pick_changed,
    round_label,
    score_bracket,
)
from bracket_pool.ingest import (
    BracketNotFoundError,
    BracketRecord,
    DataFormatError,
    InvalidBracketIdError,
    JsonBracketRepository,
    Team,
    load_results,
    load_tournament_data,
)
from bracket_pool.pool import compute_standings, validate_submission
from bracket_pool.utils.logger import configure_logging, get_logger

app = typer.Typer(help="Bracket pool CLI: pick, score, validate and rank brackets")
console = Console()
log = get_logger("cli")

_TOURNAMENT_OPTION = typer.Option(..., "--tournament", help="Tournament data JSON file")
_DATA_DIR_OPTION = typer.Option(Path("data/"), "--data-dir", help="Directory holding bracket records")
_CONFIG_OPTION = typer.Option(None, "--config", help="Path to JSON settings override")


@app.callback()
def _callback(
    log_level: str | None = typer.Option(
        None, "--log-level", help="QUIET, NORMAL, VERBOSE or DEBUG (default: $BRACKET_POOL_LOG_LEVEL, then NORMAL)"
    ),
) -> None:
    """Bracket pool: pick, score, validate and rank tournament brackets."""
    try:
        configure_logging(log_level)
    except ValueError as exc:
        raise _fail(str(exc)) from None


def _fail(message: str) -> typer.Exit:
    console.print(f"[red]Error: {escape(message)}[/red]")
    return typer.Exit(code=1)


def _load_bracket(tournament: Path) -> Bracket:
    try:
        return build_bracket(load_tournament_data(tournament))
    except (FileNotFoundError, DataFormatError) as exc:
        raise _fail(str(exc)) from None


def _load_settings(config: Path | None, bracket: Bracket) -> PoolSettings:
    try:
        settings = load_settings(config)
        settings.check_year(bracket.year)
    except (FileNotFoundError, json.JSONDecodeError, ValidationError, YearMismatchError) as exc:
        raise _fail(str(exc)) from None
    return settings


def _load_results(results: Path) -> dict[str, str]:
    try:
        return load_results(results)
    except (FileNotFoundError, DataFormatError) as exc:
        raise _fail(str(exc)) from None


def _load_record(repo: JsonBracketRepository, bracket_id: str) -> BracketRecord:
    try:
        return repo.get(bracket_id)
    except BracketNotFoundError:
        raise _fail(f"Unknown bracket {bracket_id!r}") from None
    except (DataFormatError, InvalidBracketIdError) as exc:
        raise _fail(str(exc)) from None


def _load_records(repo: JsonBracketRepository) -> list[BracketRecord]:
    try:
        return repo.list()
    except DataFormatError as exc:
        raise _fail(str(exc)) from None


def _team_label(team: Team | None) -> str:
    return f"({team.seed}) {team.name}" if team is not None else "-"


@app.command()
def show(
    tournament: Path = _TOURNAMENT_OPTION,
    bracket_id: str | None = typer.Option(None, "--bracket-id", help="Bracket record to overlay"),
    data_dir: Path = _DATA_DIR_OPTION,
) -> None:
    """Print the bracket, round by round, with an entry's picks applied."""
    bracket = _load_bracket(tournament)
    picks = _load_record(JsonBracketRepository(data_dir), bracket_id).picks if bracket_id else {}
    view = apply_picks(bracket, picks)

    for round_ in ROUNDS:
        table = Table(title=round_label(round_))
        table.add_column("Game")
        table.add_column("Team 1")
        table.add_column("Team 2")
        table.add_column("Pick", style="green")
        for game in view.games_in_round(round_):
            table.add_row(game.id, _team_label(game.team1), _team_label(game.team2), _team_label(game.winner))
        console.print(table)

    champion = view.champion
    console.print(f"Champion: {_team_label(champion)}" if champion else "Champion: not picked")


@app.command()
def pick(  # noqa: PLR0913
    tournament: Path = _TOURNAMENT_OPTION,
    bracket_id: str = typer.Option(..., "--bracket-id", help="Bracket record to edit (created if missing)"),
    game: str = typer.Option(..., "--game", help="Game id, e.g. East-r64-1"),
    team: str = typer.Option(..., "--team", help="Id of the team picked to win"),
    entry_name: str | None = typer.Option(None, "--entry-name", help="Entry name for a new record"),
    data_dir: Path = _DATA_DIR_OPTION,
) -> None:
    """Record one pick, clearing downstream picks that depended on the old one."""
    bracket = _load_bracket(tournament)
    repo = JsonBracketRepository(data_dir)
    try:
        record = repo.get(bracket_id)
    except BracketNotFoundError:
        record = BracketRecord(id=bracket_id, entry_name=entry_name or bracket_id, year=bracket.year)
    except (DataFormatError, InvalidBracketIdError) as exc:
        raise _fail(str(exc)) from None

    updated = on_pick_changed(bracket, game, team, record.picks)
    if updated.get(game) != team:
        raise _fail(f"Cannot pick {team!r} in {game!r}: the team is not playing in that game yet")

    cleared = sorted(gid for gid in record.picks if gid not in updated)
    repo.save(record.model_copy(update={"picks": updated}))
    log.info("Recorded %s=%s for %s", game, team, bracket_id)

    console.print(f"[green]Picked {team} in {game}[/green]")
    if cleared:
        console.print(f"[yellow]Cleared {len(cleared)} downstream pick(s): {', '.join(cleared)}[/yellow]")


@app.command()
def score(
    tournament: Path = _TOURNAMENT_OPTION,
    results: Path = typer.Option(..., "--results", help="Actual results (JSON or CSV)"),
    bracket_id: str = typer.Option(..., "--bracket-id", help="Bracket record to score"),
    data_dir: Path = _DATA_DIR_OPTION,
    config: Path | None = _CONFIG_OPTION,
) -> None:
    """Score one bracket against actual results."""
    bracket = _load_bracket(tournament)
    settings = _load_settings(config, bracket)
    record = _load_record(JsonBracketRepository(data_dir), bracket_id)
    rules = settings.scoring_rule()
    result = score_bracket(bracket, record.picks, _load_results(results), rules)

    table = Table(title=f"{record.entry_name or record.id} ({rules.name} scoring)")
    table.add_column("Game")
    table.add_column("Pick")
    table.add_column("Winner")
    table.add_column("Base", justify="right")
    table.add_column("Bonus", justify="right")
    for game in result.breakdown:
        style = "green" if game.correct else "red"
        table.add_row(
            game.game_id,
            f"[{style}]{game.picked_team_id}[/{style}]",
            game.actual_winner_id,
            str(game.base_points),
            str(game.bonus_points),
        )
    console.print(table)
    console.print(f"Total: [bold]{result.total}[/bold] ({result.correct_picks} correct)")


@app.command()
def validate(
    tournament: Path = _TOURNAMENT_OPTION,
    bracket_id: str = typer.Option(..., "--bracket-id", help="Bracket record to check"),
    submit: bool = typer.Option(False, "--submit", help="Mark the entry submitted when valid"),
    data_dir: Path = _DATA_DIR_OPTION,
    config: Path | None = _CONFIG_OPTION,
) -> None:
    """Check an entry for completeness and consistency."""
    bracket = _load_bracket(tournament)
    settings = _load_settings(config, bracket)
    repo = JsonBracketRepository(data_dir)
    record = _load_record(repo, bracket_id)

    result = validate_submission(bracket, record.picks, record.tie_breaker, settings)
    for warning in result.warnings:
        console.print(f"[yellow]Warning: {warning}[/yellow]")
    if not result.is_valid:
        for error in result.errors:
            console.print(f"[red]{error}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]{bracket_id} is valid[/green]")
    if submit:
        repo.save(
            record.model_copy(
                update={"status": "submitted", "submitted_at": datetime.datetime.now(datetime.timezone.utc)}
            )
        )
        console.print(f"[green]{bracket_id} submitted[/green]")


@app.command()
def standings(  # noqa: PLR0913
    tournament: Path = _TOURNAMENT_OPTION,
    results: Path = typer.Option(..., "--results", help="Actual results (JSON or CSV)"),
    championship_score: int | None = typer.Option(
        None, "--championship-score", help="Actual combined Championship score"
    ),
    include_drafts: bool = typer.Option(False, "--include-drafts", help="Also rank unsubmitted entries"),
    data_dir: Path = _DATA_DIR_OPTION,
    config: Path | None = _CONFIG_OPTION,
) -> None:
    """Rank every entry in the pool."""
    bracket = _load_bracket(tournament)
    settings = _load_settings(config, bracket)
    rows = compute_standings(
        bracket,
        _load_records(JsonBracketRepository(data_dir)),
        _load_results(results),
        championship_score,
        settings.scoring_rule(),
        include_drafts=include_drafts,
    )

    table = Table(title="Standings")
    table.add_column("Rank", justify="right")
    table.add_column("Entry")
    table.add_column("Points", justify="right")
    table.add_column("Max", justify="right")
    table.add_column("TB", justify="right")
    table.add_column("TB diff", justify="right")
    table.add_column("Champion")
    for row in rows:
        table.add_row(
            str(row.rank),
            row.entry_name or row.entry_id,
            str(row.points),
            str(row.max_possible),
            "" if row.tie_breaker is None else str(row.tie_breaker),
            "" if row.tie_breaker_diff is None else str(row.tie_breaker_diff),
            row.champion or "",
        )
    console.print(table)
