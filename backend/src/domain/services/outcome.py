"""
Outcome classifier: win, draw or loss from one normalized score.
"""

from ..models.base import EventType
from ..models.statistics import Attribution, ClassifiedOutcome, Outcome, ScoreTuple


def classify(score: ScoreTuple) -> Outcome:
    """Compare our score with the opponent's."""
    if score.our_score > score.opponent_score:
        return Outcome.WIN
    if score.our_score < score.opponent_score:
        return Outcome.LOSS
    return Outcome.DRAW


def classify_slot(
    event_id: str,
    event_type: EventType,
    attribution: Attribution,
    score: ScoreTuple
) -> ClassifiedOutcome:
    """Attach the verdict and attribution to one team slot's score."""
    return ClassifiedOutcome(
        event_id=event_id,
        event_type=event_type,
        attribution=attribution,
        score=score,
        outcome=classify(score)
    )
