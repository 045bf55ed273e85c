"""Aggregate statistics over the recorded game history."""

from dataclasses import asdict, replace
from typing import Iterable, Optional, Sequence

import polars as pl

from .constants import FREE_FOR_ALL_MODES
from .handicap import calculate_handicap
from .models import GameOutcome, Player, PlayerAverages, PlayerTotals, ReconciledScore

_SCORE_SCHEMA = {
    'player_id': pl.Utf8,
    'kills': pl.Int64,
    'deaths': pl.Int64,
    'assists': pl.Int64,
    'score': pl.Int64,
    'team': pl.Int64,
    'won': pl.Boolean,
}


def _scores_frame(scores: Iterable[ReconciledScore]) -> pl.DataFrame:
    """Build a DataFrame of score rows (empty frames keep the schema)."""
    return pl.DataFrame([asdict(s) for s in scores], schema=_SCORE_SCHEMA)


def aggregate_player_totals(scores: Iterable[ReconciledScore]) -> dict[str, PlayerTotals]:
    """
    Sum every player's history into cumulative totals.

    Args:
        scores: Reconciled scores from any number of games

    Returns:
        Dict mapping player_id -> PlayerTotals (games, wins, kills, deaths, assists)
    """
    df = _scores_frame(scores)
    if df.height == 0:
        return {}

    totals = df.group_by('player_id', maintain_order=True).agg(
        pl.len().alias('games'),
        pl.col('won').cast(pl.Int64).sum().alias('wins'),
        pl.col('kills').sum(),
        pl.col('deaths').sum(),
        pl.col('assists').sum(),
    )
    return {row['player_id']: PlayerTotals(**row) for row in totals.iter_rows(named=True)}


def apply_cumulative_totals(
    roster: Iterable[Player],
    totals: dict[str, PlayerTotals],
    **handicap_kwargs,
) -> list[Player]:
    """
    Attach cumulative totals to roster players and recompute their handicaps.

    Players with no recorded games get zero totals (handicap of 0/0/0).

    Args:
        roster: Players in roster order
        totals: Output of aggregate_player_totals
        **handicap_kwargs: Passed through to calculate_handicap

    Returns:
        Updated copies of the players, in roster order
    """
    updated = []
    for player in roster:
        t = totals.get(player.id, PlayerTotals(player_id=player.id))
        updated.append(
            replace(
                player,
                kills=t.kills,
                deaths=t.deaths,
                assists=t.assists,
                handicap=calculate_handicap(t.kills, t.deaths, t.assists, **handicap_kwargs),
            )
        )
    return updated


def calculate_player_averages(
    scores: Iterable[ReconciledScore],
    roster: Sequence[Player],
) -> list[PlayerAverages]:
    """
    Per-game averages and overall KDA for every roster player.

    KDA here is (total kills + total assists) / max(total deaths, 1).
    A player without games is averaged over one game (all zeros).

    Args:
        scores: Reconciled scores from the game history
        roster: Players to report on, in roster order

    Returns:
        List of PlayerAverages, empty if there is no history at all
    """
    totals = aggregate_player_totals(scores)
    if not totals:
        return []

    averages = []
    for player in roster:
        t = totals.get(player.id, PlayerTotals(player_id=player.id))
        games = t.games or 1
        averages.append(
            PlayerAverages(
                player_id=player.id,
                name=player.name,
                games=t.games,
                avg_kills=round(t.kills / games, 2),
                avg_deaths=round(t.deaths / games, 2),
                avg_assists=round(t.assists / games, 2),
                kda=round((t.kills + t.assists) / max(t.deaths, 1), 2),
            )
        )
    return averages


def calculate_weighted_kda(kills: int, deaths: int, assists: int) -> float:
    """KDA that counts an assist as a third of a kill."""
    return (kills + assists / 3) / max(deaths, 1)


def calculate_win_rate(wins: int, total_games: int) -> float:
    """Win percentage (0-100); 0.0 when no games were played."""
    if total_games <= 0:
        return 0.0
    return wins / total_games * 100


def determine_winners(
    scores: Sequence[ReconciledScore],
    game_mode: str,
    roster: Sequence[Player],
) -> GameOutcome:
    """
    Work out who won a game.

    Free-for-all modes (Slayer) have no winning team: every player tied on
    the most kills wins. Team modes use the won flags set during
    reconciliation, and the winning team is the first winner's team.

    Args:
        scores: Reconciled scores for a single game
        game_mode: Game mode reported by the extraction model
        roster: Players, used to resolve names

    Returns:
        GameOutcome with winner names and winning team
    """
    names = {p.id: p.name for p in roster}
    if not scores:
        return GameOutcome()

    if game_mode in FREE_FOR_ALL_MODES:
        top_kills = max(s.kills for s in scores)
        winners = [names.get(s.player_id, s.player_id) for s in scores if s.kills == top_kills]
        return GameOutcome(winners=winners, winning_team=None)

    won = [s for s in scores if s.won]
    winning_team: Optional[int] = won[0].team if won else None
    return GameOutcome(
        winners=[names.get(s.player_id, s.player_id) for s in won],
        winning_team=winning_team,
    )
