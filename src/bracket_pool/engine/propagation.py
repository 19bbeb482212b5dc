"""Pick propagation: project (skeleton, picks) onto a materialized bracket.

:func:`apply_picks` is a pure function.  It walks the arena in bracket
order (each region R64 → E8, then the Final Four, then the Championship),
so every feeder game is resolved before the game it feeds.  A later-round
slot is filled only by the *effective* winner of its feeder, and a pick
counts as a winner only if it names one of the game's two materialized
teams.  Stale picks, unknown game ids and unknown team ids are ignored
rather than raised.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from bracket_pool.engine.structure import Bracket, Game, Round
from bracket_pool.ingest.schema import RegionPosition, Team
from bracket_pool.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class MaterializedGame:
    """A game with its slots and winner derived from a picks map.

    Attributes:
        id: Stable game id.
        round: Round of the game.
        number: 1-based index within the round (and region).
        region: Region label, ``None`` for Final Four and Championship.
        team1: First team, ``None`` while undetermined.
        team2: Second team, ``None`` while undetermined.
        winner: Effective winner, ``None`` when unpicked or stale.
    """

    id: str
    round: Round
    number: int
    region: str | None
    team1: Team | None
    team2: Team | None
    winner: Team | None = None

    @property
    def is_determined(self) -> bool:
        """Return ``True`` when both team slots are filled."""
        return self.team1 is not None and self.team2 is not None

    @property
    def loser(self) -> Team | None:
        """Return the team beaten by :attr:`winner`, if both are known."""
        if self.winner is None or not self.is_determined:
            return None
        return self.team2 if self.winner == self.team1 else self.team1

    def team(self, team_id: str) -> Team | None:
        """Return the slotted team with *team_id*, or ``None``."""
        for team in (self.team1, self.team2):
            if team is not None and team.id == team_id:
                return team
        return None


@dataclass(frozen=True)
class MaterializedBracket:
    """Fully derived view of a bracket under one picks map.

    Attributes:
        bracket: The skeleton the view was derived from.
        games: Game id → :class:`MaterializedGame`, in bracket order.
    """

    bracket: Bracket
    games: dict[str, MaterializedGame]

    @property
    def regions(self) -> dict[RegionPosition, tuple[MaterializedGame, ...]]:
        """Return position → the region's 15 materialized games."""
        return {
            position: tuple(self.games[g.id] for g in region_games)
            for position, region_games in self.bracket.regions.items()
        }

    @property
    def final_four(self) -> tuple[MaterializedGame, ...]:
        """Return the two materialized Final Four games."""
        return tuple(self.games[g.id] for g in self.bracket.final_four)

    @property
    def championship(self) -> MaterializedGame:
        """Return the materialized Championship game."""
        return self.games[self.bracket.championship.id]

    @property
    def champion(self) -> Team | None:
        """Return the picked champion, if any."""
        return self.championship.winner

    @property
    def winners(self) -> dict[str, str]:
        """Return the effective picks map (game id → winning team id)."""
        return {gid: g.winner.id for gid, g in self.games.items() if g.winner is not None}

    @property
    def undetermined_slots(self) -> int:
        """Return the number of empty team slots across all games."""
        return sum((g.team1 is None) + (g.team2 is None) for g in self.games.values())

    @property
    def is_complete(self) -> bool:
        """Return ``True`` when every game has an effective winner."""
        return all(g.winner is not None for g in self.games.values())

    def game(self, game_id: str) -> MaterializedGame | None:
        """Return the materialized game with *game_id*, or ``None``."""
        return self.games.get(game_id)

    def games_in_round(self, round_: Round) -> tuple[MaterializedGame, ...]:
        """Return every materialized game of *round_* in bracket order."""
        return tuple(g for g in self.games.values() if g.round is round_)


def _materialize(game: Game, team1: Team | None, team2: Team | None, pick: str | None) -> MaterializedGame:
    winner: Team | None = None
    if pick is not None:
        winner = next((t for t in (team1, team2) if t is not None and t.id == pick), None)
        if winner is None:
            logger.debug("Ignoring stale pick %s=%s", game.id, pick)
    return MaterializedGame(
        id=game.id,
        round=game.round,
        number=game.number,
        region=game.region,
        team1=team1,
        team2=team2,
        winner=winner,
    )


def apply_picks(bracket: Bracket, picks: Mapping[str, str]) -> MaterializedBracket:
    """Derive the materialized bracket for *picks*.

    Neither argument is mutated.  With no picks, only Round-of-64 slots are
    filled; with a full consistent picks map, every slot is filled and the
    Championship has a winner.

    Args:
        bracket: Skeleton from :func:`~bracket_pool.engine.structure.build_bracket`.
        picks: Game id → picked team id.

    Returns:
        The :class:`MaterializedBracket` for *picks*.
    """
    unknown = [gid for gid in picks if gid not in bracket.games]
    if unknown:
        logger.debug("Ignoring picks for %d unknown game id(s): %s", len(unknown), sorted(unknown))

    winners: dict[str, Team] = {}
    games: dict[str, MaterializedGame] = {}
    for game in bracket.games.values():
        if game.feeders:
            team1 = winners.get(game.feeders[0])
            team2 = winners.get(game.feeders[1])
        else:
            team1, team2 = game.team1, game.team2

        materialized = _materialize(game, team1, team2, picks.get(game.id))
        if materialized.winner is not None:
            winners[game.id] = materialized.winner
        games[game.id] = materialized

    return MaterializedBracket(bracket=bracket, games=games)
