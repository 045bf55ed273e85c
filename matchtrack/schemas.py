"""Pydantic schemas for extraction payloads and JSON data files."""

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from .constants import (
    DEFAULT_GAME_MODE,
    HANDICAP_MAX,
    HANDICAP_MIN,
    HANDICAP_SCALE,
    MATCH_THRESHOLD,
    MAX_REPAIR_ITERATIONS,
    REPAIR_TOLERANCE,
    SUBSTRING_SIMILARITY,
)


class RawExtractionEntry(BaseModel):
    """One player's row as read off the scoreboard by the extraction model.

    Every field is optional because the model's output schema has changed
    over time. Unknown keys (kd ratios, medals, ...) are ignored.
    """

    kills: int | None = None
    deaths: int | None = None
    assists: int | None = None
    score: int | None = None
    team: int | None = None

    class Config:
        extra = 'ignore'


class ExtractionResult(BaseModel):
    """Decoded extraction response: per-name rows plus game metadata."""

    scores: dict[str, RawExtractionEntry | None]
    game_mode: str = Field(default=DEFAULT_GAME_MODE, alias='gameMode')
    winning_team: int | None = Field(default=None, alias='winningTeam')

    @field_validator('game_mode', mode='before')
    @classmethod
    def default_game_mode(cls, v):
        """Treat a null or blank game mode as the default mode."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_GAME_MODE
        return v

    class Config:
        extra = 'ignore'
        populate_by_name = True


class RosterPlayer(BaseModel):
    """Player entry in roster.json."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)

    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, v):
        """Accept numeric ids; identifiers are opaque strings internally."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    class Config:
        extra = 'forbid'


class RosterFile(BaseModel):
    """Complete roster.json file structure."""

    players: list[RosterPlayer]

    class Config:
        extra = 'forbid'


class ScoreRecord(BaseModel):
    """A persisted reconciled score."""

    player_id: str = Field(..., min_length=1)
    kills: int = Field(default=0, ge=0)
    deaths: int = Field(default=0, ge=0)
    assists: int = Field(default=0, ge=0)
    score: int = Field(default=0, ge=0)
    team: int | None = None
    won: bool = False

    class Config:
        extra = 'forbid'


class GameRecord(BaseModel):
    """One recorded game and its scores."""

    id: str
    game_mode: str = DEFAULT_GAME_MODE
    winning_team: int | None = None
    created_at: str | None = None
    scores: list[ScoreRecord] = Field(default_factory=list)

    class Config:
        extra = 'allow'


class GameHistoryFile(BaseModel):
    """Complete games.json file structure."""

    games: list[GameRecord] = Field(default_factory=list)

    class Config:
        extra = 'forbid'


class TrackerConfig(BaseModel):
    """Tuning settings for matching, handicaps and balancing."""

    match_threshold: float = Field(default=MATCH_THRESHOLD, ge=0.0, lt=1.0)
    substring_similarity: float = Field(default=SUBSTRING_SIMILARITY, gt=0.0, le=1.0)
    handicap_min: int = Field(default=HANDICAP_MIN, ge=0)
    handicap_max: int = Field(default=HANDICAP_MAX, ge=1)
    handicap_scale: float = Field(default=HANDICAP_SCALE, gt=0)
    repair_tolerance: int = Field(default=REPAIR_TOLERANCE, ge=0)
    max_repair_iterations: int = Field(default=MAX_REPAIR_ITERATIONS, ge=0, le=10000)

    @field_validator('handicap_max')
    @classmethod
    def validate_handicap_range(cls, v, info: ValidationInfo):
        """Ensure the handicap range is not inverted."""
        low = info.data.get('handicap_min')
        if low is not None and v < low:
            raise ValueError(f'handicap_max ({v}) must be >= handicap_min ({low})')
        return v

    class Config:
        extra = 'forbid'
