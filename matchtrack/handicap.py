"""Handicap calculation from cumulative kill/death/assist totals."""

import math
from dataclasses import replace
from typing import Iterable

from .constants import HANDICAP_MAX, HANDICAP_MIN, HANDICAP_SCALE
from .models import Player


def calculate_handicap(
    kills: int,
    deaths: int,
    assists: int,
    scale: float = HANDICAP_SCALE,
    low: int = HANDICAP_MIN,
    high: int = HANDICAP_MAX,
) -> int:
    """
    Map cumulative kills/deaths/assists to an integer handicap.

    Scoring:
        - KDA = (kills + assists) / max(deaths, 1)
        - Handicap = KDA * scale, rounded half up, clamped to [low, high]

    A player with no deaths is treated as having one death for the ratio.

    Args:
        kills: Cumulative kills
        deaths: Cumulative deaths
        assists: Cumulative assists
        scale: Multiplier applied to KDA before rounding
        low: Smallest handicap
        high: Largest handicap

    Returns:
        Handicap in [low, high]
    """
    kda = (kills + assists) / max(deaths, 1)
    # Half up (2.5 -> 3), not Python's round-half-even
    scaled = math.floor(kda * scale + 0.5)
    return min(max(scaled, low), high)


def update_player_handicaps(players: Iterable[Player], **handicap_kwargs) -> list[Player]:
    """Return copies of the players with handicaps recomputed from their totals."""
    return [
        replace(
            p,
            handicap=calculate_handicap(p.kills, p.deaths, p.assists, **handicap_kwargs),
        )
        for p in players
    ]
