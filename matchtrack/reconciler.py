"""Reconcile scoreboard extraction results against the player roster.

The extraction model returns one row per name it could read off the
screenshot. Its output has come in two shapes over time:

    {"Jon": {"kills": 5, "deaths": 2, "assists": 1}, ...}

    {"scores": {"Jon": {...}, ...}, "gameMode": "CTF", "winningTeam": 1}

Both are accepted. Rows are matched to roster players by name; rows the
model could not read (null) and names outside the roster are dropped.
"""

import json
import logging
import re
from collections.abc import Mapping
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from .constants import (
    GAME_MODE_KEY,
    MATCH_THRESHOLD,
    METADATA_KEYS,
    SCORES_KEY,
    STAT_FIELDS,
    SUBSTRING_SIMILARITY,
    WINNING_TEAM_KEY,
)
from .models import Player, ReconciledScore
from .name_matcher import match_player
from .schemas import ExtractionResult, RawExtractionEntry

logger = logging.getLogger('matchtrack.reconciler')

# Chat models often answer with ```json\n{...}\n```
CODE_FENCE_RE = re.compile(r'```[\w-]*\s*(.*?)\s*```', re.DOTALL)


class MalformedExtractionError(ValueError):
    """Extraction payload does not have a shape the reconciler can read."""


def _parse_entry(name: str, value: Any) -> Optional[RawExtractionEntry]:
    """Validate a single row; None stays None."""
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise MalformedExtractionError(
            f'Entry for {name!r} must be an object or null, got {type(value).__name__}'
        )
    try:
        return RawExtractionEntry.model_validate(dict(value))
    except ValidationError as e:
        raise MalformedExtractionError(f'Entry for {name!r} is invalid: {e}') from e


def _strip_code_fence(text: str) -> str:
    """Unwrap ```json ... ``` around the model's answer, if present."""
    match = CODE_FENCE_RE.fullmatch(text.strip())
    return match.group(1) if match else text


def parse_extraction_result(raw: str | bytes | Mapping[str, Any]) -> ExtractionResult:
    """
    Decode an extraction model response into an ExtractionResult.

    Args:
        raw: JSON text as returned by the model (optionally wrapped in a
            markdown code fence), or an already-decoded mapping in either
            the flat or the "scores"-wrapped shape

    Returns:
        ExtractionResult with per-name rows, game mode and winning team

    Raises:
        MalformedExtractionError: If the text is not JSON, the payload is not
            a mapping, or any row cannot be read as a stat object
    """
    if isinstance(raw, (str, bytes)):
        try:
            text = raw.decode('utf-8') if isinstance(raw, bytes) else raw
            raw = json.loads(_strip_code_fence(text))
        except UnicodeDecodeError as e:
            raise MalformedExtractionError(f'Extraction result is not UTF-8 text: {e.reason}') from e
        except json.JSONDecodeError as e:
            raise MalformedExtractionError(f'Extraction result is not valid JSON: {e.msg}') from e

    if not isinstance(raw, Mapping):
        raise MalformedExtractionError(
            f'Extraction result must be an object, got {type(raw).__name__}'
        )

    if SCORES_KEY in raw:
        rows = raw[SCORES_KEY]
        if not isinstance(rows, Mapping):
            raise MalformedExtractionError(
                f'"{SCORES_KEY}" must be an object, got {type(rows).__name__}'
            )
    else:
        # Flat shape: metadata keys may still sit beside the player rows
        rows = {k: v for k, v in raw.items() if k not in METADATA_KEYS}

    scores = {str(name): _parse_entry(str(name), value) for name, value in rows.items()}

    try:
        return ExtractionResult(
            scores=scores,
            gameMode=raw.get(GAME_MODE_KEY),
            winningTeam=raw.get(WINNING_TEAM_KEY),
        )
    except ValidationError as e:
        raise MalformedExtractionError(f'Extraction metadata is invalid: {e}') from e


def _non_negative(value: Optional[int], field: str, name: str) -> int:
    """Missing fields count as 0; negative readings are clamped to 0."""
    if value is None:
        return 0
    if value < 0:
        logger.warning(f'{name}: negative {field} ({value}) read from scoreboard, using 0')
        return 0
    return value


def reconcile(
    raw_payload: str | bytes | Mapping[str, Any] | ExtractionResult,
    roster: Sequence[Player],
    winning_team: Optional[int] = None,
    threshold: float = MATCH_THRESHOLD,
    substring_similarity: float = SUBSTRING_SIMILARITY,
) -> list[ReconciledScore]:
    """
    Turn an extraction payload into clean per-player scores.

    Steps:
        - Null rows are skipped (the model could not read them)
        - Each name is matched to the roster; unmatched names are skipped
        - Missing kills/deaths/assists/score become 0
        - won is True only when the row has a team equal to winning_team
        - When two names match the same player, the later row wins

    Args:
        raw_payload: Extraction result (mapping, JSON text, or parsed result)
        roster: Known players, in roster order
        winning_team: Declared winning team; defaults to the payload's own
            winningTeam when not given
        threshold: Minimum name similarity for a match
        substring_similarity: Score given to a containment name match

    Returns:
        One ReconciledScore per matched player (order unspecified)

    Raises:
        MalformedExtractionError: If the payload cannot be read at all. No
            records are produced in that case.

    Example:
        roster = [Player(id='p1', name='Jon')]
        reconcile({'Jon_99': {'kills': 5, 'deaths': 2}, 'ghost': None}, roster)
        # -> [ReconciledScore(player_id='p1', kills=5, deaths=2, ...)]
    """
    if isinstance(raw_payload, ExtractionResult):
        result = raw_payload
    else:
        result = parse_extraction_result(raw_payload)

    if winning_team is None:
        winning_team = result.winning_team

    reconciled: dict[str, ReconciledScore] = {}
    skipped_null = 0
    unmatched: list[str] = []

    for declared_name, entry in result.scores.items():
        if entry is None:
            skipped_null += 1
            continue

        player = match_player(
            declared_name,
            roster,
            threshold=threshold,
            substring_similarity=substring_similarity,
        )
        if player is None:
            unmatched.append(declared_name)
            continue

        stats = {
            field: _non_negative(getattr(entry, field), field, declared_name)
            for field in STAT_FIELDS
        }

        if player.id in reconciled:
            logger.warning(
                f'{declared_name!r} also matched {player.name!r}; keeping the later row'
            )

        reconciled[player.id] = ReconciledScore(
            player_id=player.id,
            team=entry.team,
            won=entry.team is not None and entry.team == winning_team,
            **stats,
        )

    if skipped_null:
        logger.debug(f'Skipped {skipped_null} unreadable row(s)')
    if unmatched:
        logger.info(f'No roster match for: {", ".join(unmatched)}')

    logger.info(f'Reconciled {len(reconciled)} of {len(result.scores)} scoreboard row(s)')
    return list(reconciled.values())
