"""
Score record normalizer.

Turns one event's free-form score map into typed per-slot score tuples.
Two encodings exist in stored data:

* ``team_{n}`` / ``opponent_{n}``: category-aware, one pair per team slot;
* ``home`` / ``away``: legacy venue-keyed scores, first team slot only.

The category-aware pair always wins when both are present. Slots with no
usable encoding are omitted rather than counted as 0-0.
"""

from typing import Any, Iterable, List, Mapping, Optional

from core.utils import LoggerFactory, DataValidator

from ..models.statistics import CategoryScore, LegacyHomeAway, ScoreEncoding, ScoreTuple

logger = LoggerFactory.get_logger(__name__)


def _present(scores: Mapping[str, Any], key: str) -> bool:
    # A stored null still counts as present and reads as 0
    return key in scores


def read_score_encoding(scores: Any, team_number: int) -> Optional[ScoreEncoding]:
    """
    Resolve the encoding that holds the score of one team slot.

    Args:
        scores: Raw score map of the event
        team_number: Team slot, starting at 1

    Returns:
        CategoryScore, LegacyHomeAway, or None when the slot has no usable data
    """
    if not isinstance(scores, Mapping):
        return None

    team_key = f"team_{team_number}"
    opponent_key = f"opponent_{team_number}"

    if _present(scores, team_key) and _present(scores, opponent_key):
        return CategoryScore(
            team=DataValidator.coerce_int(scores[team_key]),
            opponent=DataValidator.coerce_int(scores[opponent_key]),
            team_number=team_number
        )

    if team_number == 1 and _present(scores, 'home') and _present(scores, 'away'):
        return LegacyHomeAway(
            home=DataValidator.coerce_int(scores['home']),
            away=DataValidator.coerce_int(scores['away'])
        )

    return None


def normalize_scores(
    scores: Any,
    is_home: Optional[bool],
    team_numbers: Iterable[int]
) -> List[ScoreTuple]:
    """
    Normalize an event's score map into one tuple per resolvable team slot.

    Args:
        scores: Raw score map of the event (anything else yields no tuples)
        is_home: Venue flag, only consulted for the legacy home/away encoding
        team_numbers: Team slots attributed to the event, in order

    Returns:
        Score tuples in the order of ``team_numbers``
    """
    tuples = []
    for team_number in team_numbers:
        encoding = read_score_encoding(scores, team_number)
        if encoding is None:
            logger.debug(f"No usable score for team slot {team_number}, omitting")
            continue
        tuples.append(encoding.to_tuple(is_home))
    return tuples
