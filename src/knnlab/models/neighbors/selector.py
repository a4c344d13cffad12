# ============================================
# KNNLab - src/knnlab/models/neighbors/selector.py
# k-nearest neighbor selection with deterministic tie-breaking
# ============================================

import functools
import numpy as np
from typing import Any, List, Optional, Sequence

from ..base.types import LabeledPoint, MetricConfig, MetricKind, ScoredPoint
from ...features.transformers.scalers import axis_multipliers, apply_multipliers, scale_point_set
from ...utils.logger import get_logger
from .distances import metric_distances

logger = get_logger('models.neighbors.selector')

# Distances closer than this are treated as equal and re-ordered by raw Euclidean distance.
# Near-ties can therefore come back up to TIE_TOLERANCE out of metric order.
TIE_TOLERANCE = 1e-5

def _coordinates(points: Sequence[Any]) -> np.ndarray:
    if len(points) == 0:
        return np.empty((0, 2), dtype=float)
    return np.array([[p.x, p.y] for p in points], dtype=float)

def _query_coordinates(query: Any) -> np.ndarray:
    if hasattr(query, 'x') and hasattr(query, 'y'):
        return np.array([query.x, query.y], dtype=float)
    return np.asarray(query, dtype=float).reshape(2)

def _metric_space(raw_points: np.ndarray, raw_query: np.ndarray, config: MetricConfig):
    """Coordinates the configured metric is evaluated on"""
    # Hamming is defined on grid cells of the raw canvas
    if config.metric is MetricKind.HAMMING:
        return raw_points, raw_query

    multipliers = axis_multipliers(config.simulate_imbalance)
    if config.use_scaling:
        return scale_point_set(raw_points, raw_query, multipliers)

    return apply_multipliers(raw_points, multipliers), apply_multipliers(raw_query, multipliers)

def score_points(dataset: Sequence[LabeledPoint], query: Any,
                 metric_config: Optional[MetricConfig] = None) -> List[ScoredPoint]:
    """
    Distance from the query to every dataset point, sorted nearest first

    Args:
        dataset: Labeled points; never modified
        query: Object with x/y attributes, or an (x, y) pair
        metric_config: Metric, Minkowski p and scaling flags

    Returns:
        Every dataset point as a ScoredPoint, in selection order
    """
    config = metric_config or MetricConfig()
    if len(dataset) == 0:
        return []

    raw_points = _coordinates(dataset)
    raw_query = _query_coordinates(query)

    points, target = _metric_space(raw_points, raw_query, config)
    distances = metric_distances(config.metric, points, target, config.p).tolist()
    # Tie-break key: plain Euclidean distance on the raw, unscaled canvas
    visual_distances = metric_distances(MetricKind.EUCLIDEAN, raw_points, raw_query).tolist()

    def compare(i: int, j: int) -> int:
        diff = distances[i] - distances[j]
        if abs(diff) < TIE_TOLERANCE:
            diff = visual_distances[i] - visual_distances[j]
        return (diff > 0) - (diff < 0)

    # sorted() is stable: fully equal points keep dataset order
    order = sorted(range(len(dataset)), key=functools.cmp_to_key(compare))

    return [ScoredPoint.from_point(dataset[i], distances[i]) for i in order]

def select_neighbors(dataset: Sequence[LabeledPoint], query: Any, k: int,
                     metric_config: Optional[MetricConfig] = None) -> List[ScoredPoint]:
    """
    The k nearest dataset points to the query

    Returns min(k, len(dataset)) points ordered by ascending distance. An empty
    dataset or k <= 0 gives an empty list; k larger than the dataset is
    truncated, never padded.
    """
    if k is None or k <= 0 or len(dataset) == 0:
        return []

    neighbors = score_points(dataset, query, metric_config)[:int(k)]

    logger.debug(
        f"Selected {len(neighbors)} of {len(dataset)} points",
        extra={'k': k, 'metric': str((metric_config or MetricConfig()).metric)}
    )
    return neighbors
