# ============================================
# KNNLab - src/knnlab/models/classification/voting.py
# Majority and distance-weighted vote aggregation over selected neighbors
# ============================================

from typing import Callable, Dict, Optional, Sequence, Union

from ..base.types import (
    CLASS_ORDER, TIE, ClassType, ClassificationResult, ScoredPoint, VotingKind, Winner
)
from ...utils.logger import get_logger

logger = get_logger('models.classification.voting')

# Keeps a coincident neighbor (distance 0) at a finite weight of 1000
WEIGHT_EPSILON = 0.001

# Class scores closer than this to the leading score produce a tie
SCORE_TIE_TOLERANCE = 1e-4

# ============================================
# Vote Weights
# ============================================

def _majority_weight(distance: float) -> float:
    return 1.0

def _inverse_distance_weight(distance: float) -> float:
    return 1.0 / (distance + WEIGHT_EPSILON)

_VOTE_WEIGHTS: Dict[VotingKind, Callable[[float], float]] = {
    VotingKind.MAJORITY: _majority_weight,
    VotingKind.WEIGHTED: _inverse_distance_weight,
}

def neighbor_weight(distance: float, strategy: Union[VotingKind, str] = VotingKind.MAJORITY) -> float:
    """Score a single neighbor contributes to its class"""
    return _VOTE_WEIGHTS[VotingKind.from_name(strategy)](distance)

# ============================================
# Winner Selection
# ============================================

def _pick_winner(scores: Dict[ClassType, float]):
    """
    Walk classes in canonical order keeping the running maximum.

    A strictly greater score takes the lead and clears any tie; a score
    within SCORE_TIE_TOLERANCE of the lead marks a tie but keeps the leader.
    """
    max_score = -1.0
    leader: Optional[ClassType] = None
    is_tie = False

    for label in CLASS_ORDER:
        score = scores[label]
        if score > max_score:
            max_score = score
            leader = label
            is_tie = False
        elif abs(score - max_score) < SCORE_TIE_TOLERANCE:
            is_tie = True

    return leader, is_tie

def classify(neighbors: Sequence[ScoredPoint],
             strategy: Union[VotingKind, str] = VotingKind.MAJORITY) -> ClassificationResult:
    """
    Aggregate neighbor votes into per-class scores and a winner

    Args:
        neighbors: Output of select_neighbors
        strategy: Majority (1 per neighbor) or Weighted (1 / (distance + 0.001))

    Returns:
        ClassificationResult; winner is None for no neighbors and TIE when
        the top classes are within 1e-4 of each other
    """
    strategy = VotingKind.from_name(strategy)
    weight = _VOTE_WEIGHTS[strategy]

    scores: Dict[ClassType, float] = {label: 0.0 for label in CLASS_ORDER}
    total_score = 0.0

    for neighbor in neighbors:
        score = weight(neighbor.distance)
        scores[neighbor.label] += score
        total_score += score

    if not neighbors:
        return ClassificationResult(class_scores=scores, total_score=0.0, winner=None, leader=None)

    leader, is_tie = _pick_winner(scores)
    winner: Winner = TIE if is_tie else leader

    logger.debug(
        f"{strategy.value} vote over {len(neighbors)} neighbors -> {winner}",
        extra={'class_scores': {str(k): v for k, v in scores.items()}}
    )

    return ClassificationResult(
        class_scores=scores,
        total_score=total_score,
        winner=winner,
        leader=leader
    )
