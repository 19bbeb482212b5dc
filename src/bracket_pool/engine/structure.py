"""Bracket skeleton: rounds, game ids, and the structure builder.

The bracket is stored as a flat arena of immutable :class:`Game` records
keyed by their stable id string, plus the forward edge map
``game_id → next game id``.  Nothing here depends on picks; the skeleton
is rebuilt from :class:`~bracket_pool.ingest.schema.TournamentData` and is
value-equal across rebuilds.

Game id format (load-bearing: cascade and propagation match on it):

* regional games: ``"<RegionLabel>-<round token>-<n>"``, e.g. ``East-r64-1``,
  ``East-e8-1``;
* national games: ``final-four-1``, ``final-four-2``, ``championship``.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import assert_never

from bracket_pool.ingest.schema import RegionPosition, Team, TournamentData
from bracket_pool.utils.logger import get_logger

logger = get_logger(__name__)

# ---------------------------------------------------------------------------
# Rounds
# ---------------------------------------------------------------------------


class Round(str, enum.Enum):
    """Tournament round; the value is the token used in game ids."""

    R64 = "r64"
    R32 = "r32"
    S16 = "s16"
    E8 = "e8"
    FINAL_FOUR = "final-four"
    CHAMPIONSHIP = "championship"


#: Rounds played inside a region, in order.
REGIONAL_ROUNDS: tuple[Round, ...] = (Round.R64, Round.R32, Round.S16, Round.E8)

#: All rounds in order.
ROUNDS: tuple[Round, ...] = (*REGIONAL_ROUNDS, Round.FINAL_FOUR, Round.CHAMPIONSHIP)

#: Total number of games in a 64-team bracket.
N_GAMES: int = 63

#: Games per region (8 + 4 + 2 + 1).
GAMES_PER_REGION: int = 15


def games_in_round(round_: Round) -> int:
    """Return the number of games in *round_* (per region for regional rounds)."""
    match round_:
        case Round.R64:
            return 8
        case Round.R32:
            return 4
        case Round.S16:
            return 2
        case Round.E8:
            return 1
        case Round.FINAL_FOUR:
            return 2
        case Round.CHAMPIONSHIP:
            return 1
        case _:
            assert_never(round_)


def round_label(round_: Round) -> str:
    """Return the display name of *round_*."""
    match round_:
        case Round.R64:
            return "Round of 64"
        case Round.R32:
            return "Round of 32"
        case Round.S16:
            return "Sweet 16"
        case Round.E8:
            return "Elite 8"
        case Round.FINAL_FOUR:
            return "Final Four"
        case Round.CHAMPIONSHIP:
            return "Championship"
        case _:
            assert_never(round_)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

#: Round-of-64 seed pairings per region; list position is the game number - 1.
_REGION_SEED_ORDER: tuple[tuple[int, int], ...] = (
    (1, 16),
    (8, 9),
    (5, 12),
    (4, 13),
    (6, 11),
    (3, 14),
    (7, 10),
    (2, 15),
)

#: Final Four pairing mirrors the visual bracket halves (left side, right side).
FINAL_FOUR_PAIRING: tuple[tuple[RegionPosition, RegionPosition], ...] = (
    (RegionPosition.TOP_LEFT, RegionPosition.BOTTOM_LEFT),
    (RegionPosition.TOP_RIGHT, RegionPosition.BOTTOM_RIGHT),
)

FINAL_FOUR_IDS: tuple[str, str] = ("final-four-1", "final-four-2")
CHAMPIONSHIP_ID: str = "championship"

_REGIONAL_ID_RE = re.compile(r"^(?P<region>.+)-(?P<round>r64|r32|s16|e8)-(?P<number>[1-9]\d*)$")

# ---------------------------------------------------------------------------
# Game ids
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GameKey:
    """Decoded game id.

    Attributes:
        region: Region label, ``None`` for Final Four and Championship.
        round: Round of the game.
        number: 1-based game number within the round (and region).
    """

    region: str | None
    round: Round
    number: int


def make_game_id(region: str | None, round_: Round, number: int) -> str:
    """Encode a game id from its region label, round and number."""
    if round_ is Round.CHAMPIONSHIP:
        return CHAMPIONSHIP_ID
    if round_ is Round.FINAL_FOUR:
        return f"{Round.FINAL_FOUR.value}-{number}"
    return f"{region}-{round_.value}-{number}"


def parse_game_id(game_id: str) -> GameKey | None:
    """Decode *game_id*, returning ``None`` when it is not well-formed.

    Only the shape is checked; whether the game exists in a particular
    bracket is answered by :meth:`Bracket.game`.
    """
    if game_id == CHAMPIONSHIP_ID:
        return GameKey(region=None, round=Round.CHAMPIONSHIP, number=1)
    if game_id in FINAL_FOUR_IDS:
        return GameKey(region=None, round=Round.FINAL_FOUR, number=int(game_id.rsplit("-", 1)[1]))
    match = _REGIONAL_ID_RE.match(game_id)
    if match is None:
        return None
    return GameKey(
        region=match["region"],
        round=Round(match["round"]),
        number=int(match["number"]),
    )


# ---------------------------------------------------------------------------
# Bracket data structures
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Game:
    """One game slot in the bracket skeleton.

    Attributes:
        id: Stable game id (see module docstring).
        round: Round the game belongs to.
        number: 1-based index within the round (and region).
        region: Region label, ``None`` for Final Four and Championship.
        team1: First team, ``None`` while undetermined.
        team2: Second team, ``None`` while undetermined.
        feeders: Ids of the two games whose winners fill ``team1`` and
            ``team2``.  Empty for Round of 64.
    """

    id: str
    round: Round
    number: int
    region: str | None = None
    team1: Team | None = None
    team2: Team | None = None
    feeders: tuple[str, ...] = ()

    @property
    def is_determined(self) -> bool:
        """Return ``True`` when both team slots are filled."""
        return self.team1 is not None and self.team2 is not None

    def has_team(self, team_id: str) -> bool:
        """Return ``True`` if *team_id* occupies either slot."""
        return any(t is not None and t.id == team_id for t in (self.team1, self.team2))


@dataclass(frozen=True)
class Bracket:
    """Immutable 63-game bracket skeleton.

    Attributes:
        year: Tournament year.
        regions: Position → the region's 15 games in round order.
        region_labels: Position → region label used in game ids.
        final_four: The two Final Four games.
        championship: The Championship game.
        teams: Team id → :class:`Team` for all 64 teams.
        games: Flat arena, game id → :class:`Game`, in bracket order.
        next_game: Game id → id of the game its winner advances to.
    """

    year: int
    regions: dict[RegionPosition, tuple[Game, ...]]
    region_labels: dict[RegionPosition, str]
    final_four: tuple[Game, Game]
    championship: Game
    teams: dict[str, Team]
    games: dict[str, Game]
    next_game: dict[str, str]

    def game(self, game_id: str) -> Game | None:
        """Return the game with *game_id*, or ``None`` if unknown."""
        return self.games.get(game_id)

    def region_position(self, label: str) -> RegionPosition | None:
        """Return the position of the region labelled *label*."""
        for position, region_label in self.region_labels.items():
            if region_label == label:
                return position
        return None

    def region_games(self, position: RegionPosition, round_: Round) -> tuple[Game, ...]:
        """Return the games of one region in *round_*."""
        return tuple(g for g in self.regions[position] if g.round is round_)

    def games_in_round(self, round_: Round) -> tuple[Game, ...]:
        """Return every game of *round_* in bracket order."""
        return tuple(g for g in self.games.values() if g.round is round_)

    def path_to_championship(self, game_id: str) -> list[str]:
        """Return the ids of the games a winner of *game_id* would play next."""
        path: list[str] = []
        current = self.next_game.get(game_id)
        while current is not None:
            path.append(current)
            current = self.next_game.get(current)
        return path


def _build_region(label: str, teams_by_seed: dict[int, Team]) -> tuple[Game, ...]:
    """Build one region's 15 games in round order."""
    games: list[Game] = [
        Game(
            id=make_game_id(label, Round.R64, number),
            round=Round.R64,
            number=number,
            region=label,
            team1=teams_by_seed[seed_a],
            team2=teams_by_seed[seed_b],
        )
        for number, (seed_a, seed_b) in enumerate(_REGION_SEED_ORDER, start=1)
    ]
    for previous, round_ in zip(REGIONAL_ROUNDS, REGIONAL_ROUNDS[1:]):
        for number in range(1, games_in_round(round_) + 1):
            games.append(
                Game(
                    id=make_game_id(label, round_, number),
                    round=round_,
                    number=number,
                    region=label,
                    feeders=(
                        make_game_id(label, previous, 2 * number - 1),
                        make_game_id(label, previous, 2 * number),
                    ),
                )
            )
    return tuple(games)


def build_bracket(tournament: TournamentData) -> Bracket:
    """Construct the 63-game skeleton from a seeded tournament field.

    Round-of-64 slots are filled directly from seeds; every later slot is
    undetermined.  Identical input always yields an equal :class:`Bracket`.

    Args:
        tournament: Validated tournament data (four regions of 16 seeds).

    Returns:
        Fully constructed :class:`Bracket`.
    """
    regions: dict[RegionPosition, tuple[Game, ...]] = {}
    labels: dict[RegionPosition, str] = {}
    teams: dict[str, Team] = {}

    for position in RegionPosition:
        region = tournament.region_at(position)
        labels[position] = region.name
        teams_by_seed = {t.seed: t for t in region.teams}
        regions[position] = _build_region(region.name, teams_by_seed)
        for seed in sorted(teams_by_seed):
            teams[teams_by_seed[seed].id] = teams_by_seed[seed]

    elite_eight = {position: make_game_id(labels[position], Round.E8, 1) for position in RegionPosition}
    final_four = tuple(
        Game(
            id=game_id,
            round=Round.FINAL_FOUR,
            number=number,
            feeders=(elite_eight[left], elite_eight[right]),
        )
        for number, (game_id, (left, right)) in enumerate(zip(FINAL_FOUR_IDS, FINAL_FOUR_PAIRING), start=1)
    )
    championship = Game(
        id=CHAMPIONSHIP_ID,
        round=Round.CHAMPIONSHIP,
        number=1,
        feeders=FINAL_FOUR_IDS,
    )

    games: dict[str, Game] = {}
    for position in RegionPosition:
        games.update((g.id, g) for g in regions[position])
    games.update((g.id, g) for g in final_four)
    games[championship.id] = championship

    next_game = {feeder: g.id for g in games.values() for feeder in g.feeders}

    logger.debug("Built %d-game bracket for %d", len(games), tournament.year)
    return Bracket(
        year=tournament.year,
        regions=regions,
        region_labels=labels,
        final_four=(final_four[0], final_four[1]),
        championship=championship,
        teams=teams,
        games=games,
        next_game=next_game,
    )
