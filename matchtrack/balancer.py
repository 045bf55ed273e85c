"""Split selected players into two teams of near-equal total handicap."""

import logging
import zlib
from typing import Optional, Sequence

from .constants import MAX_REPAIR_ITERATIONS, REPAIR_TOLERANCE, SHUFFLE_SPREAD
from .models import Player, TeamAssignment

logger = logging.getLogger('matchtrack.balancer')


def team_handicap(team: Sequence[Player]) -> int:
    """Total handicap of a team."""
    return sum(p.handicap for p in team)


def _shuffle_rank(player_id: str, shuffle_key: int) -> int:
    """Reproducible pseudo-random rank of a player for a given shuffle key."""
    return zlib.crc32(f'{shuffle_key}:{player_id}'.encode('utf-8'))


def _sort_weight(player: Player, shuffle_key: int) -> float:
    """Handicap plus a key-seeded offset in [0, SHUFFLE_SPREAD)."""
    steps = int(SHUFFLE_SPREAD * 1000)
    return player.handicap + (_shuffle_rank(player.id, shuffle_key) % steps) / 1000


def _best_swap(team_a: list[Player], team_b: list[Player], diff: int) -> tuple[int, int] | None:
    """
    Find the cross-team swap that leaves the smallest imbalance.

    Swapping a (from A) with b (from B) changes sum(A) - sum(B) by
    -2 * (a.handicap - b.handicap). Only swaps that strictly shrink the
    imbalance are considered; the first best pair found wins.
    """
    best = None
    best_gap = abs(diff)
    for i, a in enumerate(team_a):
        for j, b in enumerate(team_b):
            gap = abs(diff - 2 * (a.handicap - b.handicap))
            if gap < best_gap:
                best, best_gap = (i, j), gap
    return best


def _closest_split(players: list[Player]) -> Optional[tuple[list[Player], list[Player]]]:
    """
    Exact split of the players with the smallest possible difference.

    Handicaps are small integers, so every reachable team total is tracked
    with the first subset that reaches it. Returns None when no split
    leaves a player on each side.
    """
    total = team_handicap(players)
    reachable: dict[int, tuple[int, ...]] = {0: ()}
    for index, player in enumerate(players):
        for subtotal, members in list(reachable.items()):
            reachable.setdefault(subtotal + player.handicap, members + (index,))

    target = min(
        (s for s in reachable if 0 < s < total),
        key=lambda s: (abs(total - 2 * s), -s),
        default=None,
    )
    if target is None:
        return None

    chosen = set(reachable[target])
    team_a = [p for i, p in enumerate(players) if i in chosen]
    team_b = [p for i, p in enumerate(players) if i not in chosen]
    return team_a, team_b


def balance_teams(
    players: Sequence[Player],
    shuffle_key: int = 0,
    tolerance: int = REPAIR_TOLERANCE,
    max_iterations: int = MAX_REPAIR_ITERATIONS,
) -> TeamAssignment:
    """
    Partition the selected players into two teams with close total handicap.

    Algorithm:
        1. Sort selected players by handicap plus a small offset derived from
           (shuffle_key, player id), highest first. Players within one point
           of each other can change places for a new key; players two or
           more points apart never do. Same key, same order.
        2. Greedy: each player joins the team with the lower running total
           (team A on a tie).
        3. Repair: while the totals differ by more than the tolerance, apply
           the single A/B swap that most reduces the difference. Stops when
           balanced, when no swap helps, or after max_iterations swaps.
        4. If swapping stalls above the tolerance before the cap, the closest
           exact split of the same players (subset sums) is used instead.

    Fewer than two selected players is not an error: both teams come back
    empty. Reaching the iteration cap is not an error either; the best split
    found so far is returned.

    Args:
        players: All players; only those with is_selected are used
        shuffle_key: Caller-supplied integer, bumped for each reshuffle
        tolerance: Largest acceptable difference between team totals
        max_iterations: Cap on repair swaps

    Returns:
        TeamAssignment with every selected player on exactly one team

    Example:
        players = [Player(id=str(h), name=str(h), handicap=h, is_selected=True)
                   for h in (10, 8, 6, 4)]
        teams = balance_teams(players)
        # team_handicap(teams.team_a) == team_handicap(teams.team_b) == 14
    """
    selected = [p for p in players if p.is_selected]
    if len(selected) < 2:
        logger.info(f'Not enough players selected to balance teams ({len(selected)})')
        return TeamAssignment()

    ordered = sorted(
        selected,
        key=lambda p: (-_sort_weight(p, shuffle_key), _shuffle_rank(p.id, shuffle_key)),
    )

    team_a: list[Player] = []
    team_b: list[Player] = []
    sum_a = sum_b = 0
    for player in ordered:
        if sum_a <= sum_b:
            team_a.append(player)
            sum_a += player.handicap
        else:
            team_b.append(player)
            sum_b += player.handicap

    iterations = 0
    while abs(sum_a - sum_b) > tolerance and iterations < max_iterations:
        swap = _best_swap(team_a, team_b, sum_a - sum_b)
        if swap is None:
            break
        i, j = swap
        team_a[i], team_b[j] = team_b[j], team_a[i]
        sum_a, sum_b = team_handicap(team_a), team_handicap(team_b)
        iterations += 1

    if abs(sum_a - sum_b) > tolerance and iterations < max_iterations:
        split = _closest_split(team_a + team_b)
        if split is not None:
            gap = abs(team_handicap(split[0]) - team_handicap(split[1]))
            if gap < abs(sum_a - sum_b):
                logger.debug(f'Swaps stalled at {abs(sum_a - sum_b)}; using exact split ({gap})')
                team_a, team_b = split
                sum_a, sum_b = team_handicap(team_a), team_handicap(team_b)

    if abs(sum_a - sum_b) > tolerance:
        reason = 'iteration cap reached' if iterations >= max_iterations else 'no closer split exists'
        logger.debug(
            f'Teams left unbalanced by {abs(sum_a - sum_b)} after {iterations} swap(s) ({reason})'
        )

    logger.info(
        f'Balanced {len(selected)} players: A={sum_a} ({len(team_a)}), B={sum_b} ({len(team_b)})'
    )
    return TeamAssignment(team_a=team_a, team_b=team_b)
