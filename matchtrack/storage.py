"""Roster and game history files.

The roster lives in data/roster.json and recorded games in data/games.json.
These helpers are the only place the tracker touches those files; the
matching, handicap and balancing functions work on the loaded objects.
"""

import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

from .constants import DEFAULT_GAME_MODE
from .models import Player, ReconciledScore
from .schemas import GameHistoryFile, GameRecord, RosterFile, ScoreRecord
from .utils import load_json, save_json

logger = logging.getLogger('matchtrack.storage')


def load_roster(roster_path: str | Path) -> list[Player]:
    """
    Load roster players from roster.json.

    Args:
        roster_path: Path to roster.json

    Returns:
        List of Player objects in file order (order decides name-match ties)

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file doesn't match the roster schema
    """
    roster = load_json(roster_path, schema=RosterFile)
    return [Player(id=p.id, name=p.name) for p in roster.players]


def load_game_history(history_path: str | Path) -> list[GameRecord]:
    """Load recorded games from games.json; a missing file means no games yet."""
    history_path = Path(history_path)
    if not history_path.exists():
        logger.info(f'No game history at {history_path}, starting empty')
        return []
    return load_json(history_path, schema=GameHistoryFile).games


def history_scores(games: Iterable[GameRecord]) -> list[ReconciledScore]:
    """Flatten recorded games into a list of reconciled scores."""
    return [
        ReconciledScore(**record.model_dump())
        for game in games
        for record in game.scores
    ]


def append_game(
    history_path: str | Path,
    scores: Iterable[ReconciledScore],
    game_mode: str = DEFAULT_GAME_MODE,
    winning_team: Optional[int] = None,
) -> GameRecord:
    """
    Record a new game and its scores in games.json.

    Args:
        history_path: Path to games.json (created if missing)
        scores: Reconciled scores for the game
        game_mode: Game mode reported by the extraction model
        winning_team: Declared winning team, if any

    Returns:
        The GameRecord that was written
    """
    games = load_game_history(history_path)

    game = GameRecord(
        id=str(uuid.uuid4()),
        game_mode=game_mode,
        winning_team=winning_team,
        created_at=datetime.now(timezone.utc).isoformat(),
        scores=[
            ScoreRecord(
                player_id=s.player_id,
                kills=s.kills,
                deaths=s.deaths,
                assists=s.assists,
                score=s.score,
                team=s.team,
                won=s.won,
            )
            for s in scores
        ],
    )
    games.append(game)

    save_json(history_path, GameHistoryFile(games=games))
    logger.info(f'Recorded game {game.id} with {len(game.scores)} score(s) in {history_path}')
    return game
