"""Validation functions for rosters, reconciled scores, and team splits."""

from collections import Counter
from typing import Sequence

from .constants import MAX_REASONABLE_STAT
from .models import Player, ReconciledScore, TeamAssignment
from .name_matcher import normalize_name


def validate_roster(roster: Sequence[Player]) -> list[str]:
    """
    Validate that a roster can be matched against reliably.

    Checks:
    - No duplicate player ids
    - No blank names, and no names that normalize to nothing
    - No two names that normalize to the same string (the name matcher
      could never tell them apart)

    Args:
        roster: Players in roster order

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    id_counts = Counter(p.id for p in roster)
    duplicate_ids = sorted(pid for pid, count in id_counts.items() if count > 1)
    if duplicate_ids:
        errors.append(f'Roster has duplicate player ids: {", ".join(duplicate_ids)}')

    seen: dict[str, str] = {}
    for player in roster:
        if not player.name or not player.name.strip():
            errors.append(f'Player {player.id} has a blank name')
            continue

        normalized = normalize_name(player.name)
        if not normalized:
            errors.append(f'Player {player.id} name {player.name!r} has no letters or digits')
            continue

        if normalized in seen:
            errors.append(
                f'Players {seen[normalized]!r} and {player.name!r} are indistinguishable when matching'
            )
        else:
            seen[normalized] = player.name

    return errors


def validate_reconciled_scores(scores: Sequence[ReconciledScore]) -> list[str]:
    """
    Sanity-check a game's reconciled scores.

    Checks:
    - No player appears twice
    - Kills, deaths and assists within a believable range for one game

    Args:
        scores: Reconciled scores for one game

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []

    id_counts = Counter(s.player_id for s in scores)
    for player_id, count in sorted(id_counts.items()):
        if count > 1:
            warnings.append(f'Player {player_id} has {count} score rows')

    for s in scores:
        for field in ('kills', 'deaths', 'assists'):
            value = getattr(s, field)
            if value > MAX_REASONABLE_STAT:
                warnings.append(
                    f'Player {s.player_id} has {value} {field} (unusually high - check the screenshot)'
                )

    return warnings


def validate_team_assignment(assignment: TeamAssignment, players: Sequence[Player]) -> list[str]:
    """
    Check that a team split is an exact partition of the selected players.

    Args:
        assignment: Result of balance_teams
        players: The player list that was balanced

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    selected = {p.id for p in players if p.is_selected}
    assigned = [p.id for p in assignment.team_a] + [p.id for p in assignment.team_b]

    if not assigned:
        return errors

    duplicates = sorted(pid for pid, count in Counter(assigned).items() if count > 1)
    if duplicates:
        errors.append(f'Players on more than one team slot: {", ".join(duplicates)}')

    missing = sorted(selected - set(assigned))
    if missing:
        errors.append(f'Selected players left out: {", ".join(missing)}')

    extra = sorted(set(assigned) - selected)
    if extra:
        errors.append(f'Unselected players assigned: {", ".join(extra)}')

    return errors
