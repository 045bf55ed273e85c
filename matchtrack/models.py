"""Data models for the match tracker."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Player:
    """A roster player with cumulative totals and a derived handicap."""
    id: str
    name: str
    kills: int = 0
    deaths: int = 0
    assists: int = 0
    handicap: int = 1
    is_selected: bool = False


@dataclass
class ReconciledScore:
    """One player's stat line from a single game, matched to the roster."""
    player_id: str
    kills: int = 0
    deaths: int = 0
    assists: int = 0
    score: int = 0
    team: Optional[int] = None
    won: bool = False


@dataclass
class TeamAssignment:
    """Two-way split of the selected players."""
    team_a: List[Player] = field(default_factory=list)
    team_b: List[Player] = field(default_factory=list)


@dataclass
class PlayerTotals:
    """Cumulative totals for one player across the game history."""
    player_id: str
    games: int = 0
    wins: int = 0
    kills: int = 0
    deaths: int = 0
    assists: int = 0


@dataclass
class PlayerAverages:
    """Per-game averages for one player, rounded for display."""
    player_id: str
    name: str
    games: int
    avg_kills: float
    avg_deaths: float
    avg_assists: float
    kda: float


@dataclass
class GameOutcome:
    """Winners of a single game."""
    winners: List[str] = field(default_factory=list)
    winning_team: Optional[int] = None
