# ============================================
# KNNLab - src/knnlab/evaluation/validation/elbow.py
# Leave-one-out error curve over odd k (elbow method)
# ============================================

import pandas as pd
from typing import Iterator, List, Optional, Sequence, Tuple, Union

from ...models.base.types import KErrorPoint, LabeledPoint, MetricConfig, VotingKind
from ...models.classification.voting import classify
from ...models.neighbors.selector import score_points
from ...utils.logger import get_logger
from ...utils.timing import Timer

logger = get_logger('evaluation.validation.elbow')

DEFAULT_MAX_K = 15

# ============================================
# Leave-One-Out Split
# ============================================

class LeaveOneOut:
    """
    Leave-one-out splitter over a labeled dataset.

    Each split holds one point out and keeps every other point as the
    candidate pool. Exclusion is by point id, so ids must be unique.
    """

    def split(self, dataset: Sequence[LabeledPoint]) -> Iterator[Tuple[LabeledPoint, List[LabeledPoint]]]:
        for held_out in dataset:
            pool = [point for point in dataset if point.id != held_out.id]
            yield held_out, pool

    def get_n_splits(self, dataset: Sequence[LabeledPoint]) -> int:
        return len(dataset)

def odd_k_values(max_k: int) -> List[int]:
    """1, 3, 5, ... up to max_k inclusive; even k is skipped to reduce majority ties"""
    return list(range(1, int(max_k) + 1, 2))

# ============================================
# Evaluation
# ============================================

def evaluate_k(dataset: Sequence[LabeledPoint], max_k: int = DEFAULT_MAX_K,
               metric_config: Optional[MetricConfig] = None,
               strategy: Union[VotingKind, str] = VotingKind.MAJORITY) -> List[KErrorPoint]:
    """
    Leave-one-out error rate for every odd k up to max_k

    For each held-out point the neighbor search runs over the rest of the
    dataset; a prediction that differs from the true label, including a tie,
    counts as a miss. error_rate = misses / len(dataset).

    Args:
        dataset: Labeled points with unique ids
        max_k: Largest k to evaluate (inclusive)
        metric_config: Metric and scaling flags shared with the live view
        strategy: Voting strategy shared with the live view

    Returns:
        KErrorPoint per odd k in ascending order
    """
    config = metric_config or MetricConfig()
    strategy = VotingKind.from_name(strategy)
    k_values = odd_k_values(max_k)

    if not k_values:
        return []

    n_points = len(dataset)
    if n_points == 0:
        logger.debug("Empty dataset, reporting zero error for every k")
        return [KErrorPoint(k=k, error_rate=0.0) for k in k_values]

    misses = {k: 0 for k in k_values}
    metadata = {'max_k': k_values[-1], 'k_count': len(k_values), 'dataset_size': n_points}

    with Timer('elbow_evaluation', metadata=metadata):
        # Selection order does not depend on k, so each held-out point is scored once
        # and every k reads a prefix of the same ordering.
        for held_out, pool in LeaveOneOut().split(dataset):
            ranked = score_points(pool, held_out, config)
            for k in k_values:
                result = classify(ranked[:k], strategy)
                if result.winner != held_out.label:
                    misses[k] += 1

    curve = [KErrorPoint(k=k, error_rate=misses[k] / n_points) for k in k_values]

    logger.info(
        f"Evaluated {len(curve)} k values over {n_points} points; optimal k={find_optimal_k(curve)}",
        extra={'metric': config.metric.value, 'strategy': strategy.value}
    )
    return curve

def find_optimal_k(curve: Sequence[KErrorPoint]) -> int:
    """
    k with the lowest error rate

    Only a strictly lower error replaces the current best, so the first k
    reaching the minimum wins. k=1 is not special-cased even though it tends
    to overfit.
    """
    min_error = 1.0
    best_k = 1

    for point in curve:
        if point.error_rate < min_error:
            min_error = point.error_rate
            best_k = point.k

    return best_k

def error_curve_frame(curve: Sequence[KErrorPoint]) -> pd.DataFrame:
    """Tabular view of an error curve with the optimal k flagged"""
    frame = pd.DataFrame(
        {
            'k': [point.k for point in curve],
            'error_rate': [point.error_rate for point in curve],
        },
        columns=['k', 'error_rate']
    )
    frame['accuracy'] = 1.0 - frame['error_rate']

    optimal_k = find_optimal_k(curve)
    frame['is_optimal'] = frame['k'] == optimal_k

    return frame
