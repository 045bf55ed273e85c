"""Player name matching and normalization."""

import logging
import re
from typing import Optional, Sequence

from .constants import EXACT_SIMILARITY, MATCH_THRESHOLD, SUBSTRING_SIMILARITY
from .models import Player

logger = logging.getLogger('matchtrack.name_matcher')

_NON_ALNUM = re.compile(r'[^a-z0-9]')


def normalize_name(name: str) -> str:
    """
    Normalize a name for matching.

    Lower-cases the name and drops everything outside [a-z0-9], so case,
    punctuation, spaces and clan-tag brackets never affect matching.

    Args:
        name: Display name as typed or as read off a scoreboard

    Returns:
        Normalized name (may be empty)

    Example:
        normalize_name('[TAG] Jon_99') -> 'tagjon99'
    """
    return _NON_ALNUM.sub('', name.lower())


def name_similarity(
    a: str,
    b: str,
    substring_similarity: float = SUBSTRING_SIMILARITY,
) -> float:
    """
    Score how alike two already-normalized names are, from 0.0 to 1.0.

    Scoring:
        - Identical: 1.0
        - One contains the other (truncated or prefixed names): substring_similarity
        - Otherwise: share of positions where both names have the same
          character, over the length of the longer name

    The positional score is order-sensitive and is not an edit distance.

    Args:
        a: Normalized name
        b: Normalized name
        substring_similarity: Score given to a containment match

    Returns:
        Similarity score
    """
    if not a or not b:
        return 0.0

    if a == b:
        return EXACT_SIMILARITY

    if a in b or b in a:
        return substring_similarity

    shorter, longer = (a, b) if len(a) <= len(b) else (b, a)
    same = sum(1 for i, ch in enumerate(shorter) if ch == longer[i])
    return same / len(longer)


def match_player(
    candidate_name: str,
    roster: Sequence[Player],
    threshold: float = MATCH_THRESHOLD,
    substring_similarity: float = SUBSTRING_SIMILARITY,
) -> Optional[Player]:
    """
    Find the roster player best matching a free-text name.

    Every roster entry is scored with name_similarity and the best one is
    returned if its score is strictly above the threshold. On a tie the
    player listed first in the roster wins.

    Args:
        candidate_name: Name to look up (possibly misspelled or re-cased)
        roster: Known players, in roster order
        threshold: Minimum similarity (exclusive) for a match
        substring_similarity: Score given to a containment match

    Returns:
        Matching Player, or None if nothing is close enough

    Example:
        roster = [Player(id='p1', name='Jon')]
        match_player('Jon_99', roster)  # -> roster[0]
    """
    candidate = normalize_name(candidate_name)
    if not candidate:
        return None

    best: Optional[Player] = None
    best_score = 0.0

    for player in roster:
        score = name_similarity(candidate, normalize_name(player.name), substring_similarity)
        if score > best_score:
            best, best_score = player, score

    if best is None or best_score <= threshold:
        logger.debug(f'No roster match for {candidate_name!r} (best score {best_score:.2f})')
        return None

    logger.debug(f'Matched {candidate_name!r} -> {best.name!r} (score {best_score:.2f})')
    return best
