from .models import (
    GameOutcome,
    Player,
    PlayerAverages,
    PlayerTotals,
    ReconciledScore,
    TeamAssignment,
)
from .name_matcher import match_player, name_similarity, normalize_name
from .reconciler import MalformedExtractionError, parse_extraction_result, reconcile
from .handicap import calculate_handicap, update_player_handicaps
from .balancer import balance_teams, team_handicap
from .stats import (
    aggregate_player_totals,
    apply_cumulative_totals,
    calculate_player_averages,
    calculate_weighted_kda,
    calculate_win_rate,
    determine_winners,
)
from .storage import append_game, history_scores, load_game_history, load_roster

__all__ = [
    # Models
    'Player',
    'ReconciledScore',
    'TeamAssignment',
    'PlayerTotals',
    'PlayerAverages',
    'GameOutcome',
    # Name matching
    'normalize_name',
    'name_similarity',
    'match_player',
    # Reconciliation
    'reconcile',
    'parse_extraction_result',
    'MalformedExtractionError',
    # Handicaps
    'calculate_handicap',
    'update_player_handicaps',
    # Team balancing
    'balance_teams',
    'team_handicap',
    # Statistics
    'aggregate_player_totals',
    'apply_cumulative_totals',
    'calculate_player_averages',
    'calculate_weighted_kda',
    'calculate_win_rate',
    'determine_winners',
    # Storage
    'load_roster',
    'load_game_history',
    'history_scores',
    'append_game',
]
