"""Cascade invalidation of downstream picks.

When the pick for a game changes from team A to team B, any later pick
that still names A may describe a team that can no longer get there.  A
team's id never changes as it advances, so one comparison of every
downstream game against A finds every dependent pick without walking the
graph level by level.  Picks naming any other team are left alone.

One logical edit, in order:

1. compute the clear-set from the *old* picks and the previous value;
2. drop the cleared ids;
3. set the new pick;
4. re-derive the view with :func:`~bracket_pool.engine.propagation.apply_picks`.

:func:`on_pick_changed` performs steps 1-3; callers always do step 4.
"""

from __future__ import annotations

from collections.abc import Mapping

from bracket_pool.engine.propagation import apply_picks
from bracket_pool.engine.structure import REGIONAL_ROUNDS, Bracket, Game, Round
from bracket_pool.utils.logger import VERBOSE, get_logger

logger = get_logger(__name__)


def _downstream_candidates(bracket: Bracket, game: Game) -> list[Game]:
    """Return the games whose picks may depend on *game*, in bracket order."""
    if game.round is Round.CHAMPIONSHIP:
        return []
    if game.round is Round.FINAL_FOUR:
        return [bracket.championship]

    candidates: list[Game] = []
    position = bracket.region_position(game.region) if game.region is not None else None
    if position is not None:
        for round_ in REGIONAL_ROUNDS[REGIONAL_ROUNDS.index(game.round) + 1 :]:
            candidates.extend(bracket.region_games(position, round_))
    # A region's Elite-8 winner can reach either national game.
    candidates.extend(bracket.final_four)
    candidates.append(bracket.championship)
    return candidates


def find_downstream_games(
    bracket: Bracket,
    changed_game_id: str,
    previous_winner_id: str,
    picks: Mapping[str, str],
) -> set[str]:
    """Return the ids of downstream picks that still name *previous_winner_id*.

    Args:
        bracket: Bracket skeleton.
        changed_game_id: Game whose pick is changing.
        previous_winner_id: Team id recorded for that game before the change.
        picks: The picks map *before* the change.

    Returns:
        Ids of games to clear.  Empty for unknown game ids and for the
        Championship.
    """
    game = bracket.game(changed_game_id)
    if game is None:
        return set()
    return {g.id for g in _downstream_candidates(bracket, game) if picks.get(g.id) == previous_winner_id}


def on_pick_changed(
    bracket: Bracket,
    game_id: str,
    new_team_id: str,
    picks: Mapping[str, str],
) -> dict[str, str]:
    """Record *new_team_id* as the pick for *game_id* and cascade.

    The pick is rejected (an unchanged copy is returned) when the game is
    unknown, when either of its team slots is still undetermined, or when
    *new_team_id* is not one of the two teams currently in the game.

    Args:
        bracket: Bracket skeleton.
        game_id: Game being picked.
        new_team_id: Team picked to win.
        picks: Current picks map; not mutated.

    Returns:
        The updated picks map.
    """
    updated = dict(picks)
    target = apply_picks(bracket, picks).game(game_id)
    if target is None or not target.is_determined or target.team(new_team_id) is None:
        logger.log(VERBOSE, "Rejected pick %s=%s: team not playable in that game", game_id, new_team_id)
        return updated

    previous = picks.get(game_id)
    cleared: set[str] = set()
    if previous is not None and previous != new_team_id:
        cleared = find_downstream_games(bracket, game_id, previous, picks)
        for cleared_id in cleared:
            del updated[cleared_id]

    updated[game_id] = new_team_id
    logger.log(VERBOSE, "Pick %s: %s -> %s, cleared %s", game_id, previous, new_team_id, sorted(cleared) or "nothing")
    return updated


def clear_pick(bracket: Bracket, game_id: str, picks: Mapping[str, str]) -> dict[str, str]:
    """Remove the pick for *game_id* together with its downstream cascade."""
    updated = dict(picks)
    previous = updated.pop(game_id, None)
    if previous is None:
        return updated
    for cleared_id in find_downstream_games(bracket, game_id, previous, picks):
        del updated[cleared_id]
    return updated


def prune_picks(bracket: Bracket, picks: Mapping[str, str]) -> dict[str, str]:
    """Return only the picks that are effective winners in the derived view.

    Drops stale picks, picks for unknown games, and picks for games whose
    slots are undetermined.
    """
    effective = apply_picks(bracket, picks).winners
    dropped = set(picks) - set(effective)
    if dropped:
        logger.debug("Pruned %d orphaned pick(s): %s", len(dropped), sorted(dropped))
    return effective


def reset_picks() -> dict[str, str]:
    """Return an empty picks map."""
    return {}
