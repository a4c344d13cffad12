# ============================================
# KNNLab - src/knnlab/models/neighbors/distances.py
# Distance metrics over 2D points
# ============================================

import numpy as np
from typing import Any, Callable, Dict, Union

from ..base.types import MetricKind, DEFAULT_MINKOWSKI_P

# Edge length of one Hamming grid cell in the [0, 100] canvas
GRID_CELL_SIZE = 10.0

# ============================================
# Array Kernels
# ============================================
# Every kernel takes coordinate arrays whose last axis is (x, y) and
# broadcasts, so the same code scores one pair or a whole dataset.

def _euclidean(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    diff = a - b
    return np.sqrt(np.sum(diff * diff, axis=-1))

def _manhattan(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return np.sum(np.abs(a - b), axis=-1)

def _chebyshev(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return np.max(np.abs(a - b), axis=-1)

def _minkowski(a: np.ndarray, b: np.ndarray, p: float) -> np.ndarray:
    delta = np.abs(a - b)
    # Scale by the largest axis gap so |d|^p stays finite for large p
    largest = np.max(delta, axis=-1, keepdims=True)
    safe = np.where(largest == 0, 1.0, largest)
    total = np.power(np.sum(np.power(delta / safe, p), axis=-1), 1.0 / p)
    return np.where(largest[..., 0] == 0, 0.0, largest[..., 0] * total)

def _cosine(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    dot = np.sum(a * b, axis=-1)
    magnitude_a = np.sqrt(np.sum(a * a, axis=-1))
    magnitude_b = np.sqrt(np.sum(b * b, axis=-1))
    denominator = magnitude_a * magnitude_b

    with np.errstate(divide='ignore', invalid='ignore'):
        similarity = np.clip(dot / denominator, -1.0, 1.0)

    # A zero vector has no direction: report it as maximally dissimilar
    zero_vector = (magnitude_a == 0) | (magnitude_b == 0)
    return np.where(zero_vector, 1.0, 1.0 - similarity)

def _jaccard(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Generalized (Ruzicka) Jaccard distance: 1 - sum(min) / sum(max)"""
    min_sum = np.sum(np.minimum(a, b), axis=-1)
    max_sum = np.sum(np.maximum(a, b), axis=-1)

    with np.errstate(divide='ignore', invalid='ignore'):
        ratio = min_sum / max_sum

    # Both points at the origin count as identical
    return np.where(max_sum == 0, 0.0, 1.0 - ratio)

def _hamming(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Number of axes on which the two points fall into different grid cells"""
    cells_a = np.floor(a / GRID_CELL_SIZE)
    cells_b = np.floor(b / GRID_CELL_SIZE)
    return np.sum(cells_a != cells_b, axis=-1).astype(float)

_KERNELS: Dict[MetricKind, Callable[[np.ndarray, np.ndarray], np.ndarray]] = {
    MetricKind.EUCLIDEAN: _euclidean,
    MetricKind.MANHATTAN: _manhattan,
    MetricKind.CHEBYSHEV: _chebyshev,
    MetricKind.HAMMING: _hamming,
    MetricKind.COSINE: _cosine,
    MetricKind.JACCARD: _jaccard,
}

_unmapped = set(MetricKind) - set(_KERNELS) - {MetricKind.MINKOWSKI}
if _unmapped:
    raise ImportError(f"No distance kernel registered for {sorted(m.value for m in _unmapped)}")

# ============================================
# Dispatch
# ============================================

def metric_distances(metric: Union[MetricKind, str], a: Any, b: Any,
                     p: float = DEFAULT_MINKOWSKI_P) -> np.ndarray:
    """
    Vectorised distance between coordinate arrays

    Args:
        metric: Metric to apply
        a: Array of shape (..., 2)
        b: Array of shape (..., 2), broadcastable against a
        p: Minkowski exponent (> 0), ignored by other metrics

    Returns:
        Array of distances with the broadcast leading shape
    """
    kind = MetricKind.from_name(metric)
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)

    if kind is MetricKind.MINKOWSKI:
        return _minkowski(a, b, p)
    return _KERNELS[kind](a, b)

def _as_xy(point: Any) -> np.ndarray:
    """Coordinates of a point object (x/y attributes) or a 2-sequence"""
    if hasattr(point, 'x') and hasattr(point, 'y'):
        return np.array([point.x, point.y], dtype=float)
    return np.asarray(point, dtype=float)

def compute_distance(metric: Union[MetricKind, str], p1: Any, p2: Any,
                     p: float = DEFAULT_MINKOWSKI_P) -> float:
    """Distance between two points under the given metric"""
    return float(metric_distances(metric, _as_xy(p1), _as_xy(p2), p))

# ============================================
# Point-level Metrics
# ============================================

def euclidean_distance(p1: Any, p2: Any) -> float:
    return float(_euclidean(_as_xy(p1), _as_xy(p2)))

def manhattan_distance(p1: Any, p2: Any) -> float:
    return float(_manhattan(_as_xy(p1), _as_xy(p2)))

def chebyshev_distance(p1: Any, p2: Any) -> float:
    return float(_chebyshev(_as_xy(p1), _as_xy(p2)))

def minkowski_distance(p1: Any, p2: Any, p: float = DEFAULT_MINKOWSKI_P) -> float:
    """
    Minkowski distance of order p

    p=1 gives Manhattan, p=2 Euclidean, and large p approaches Chebyshev.
    p must be strictly positive; MetricConfig enforces this for callers
    going through the selector.
    """
    return float(_minkowski(_as_xy(p1), _as_xy(p2), p))

def cosine_distance(p1: Any, p2: Any) -> float:
    """1 - cosine similarity, or 1.0 when either vector is the origin"""
    return float(_cosine(_as_xy(p1), _as_xy(p2)))

def jaccard_distance(p1: Any, p2: Any) -> float:
    """Ruzicka distance, or 0.0 when both points sit at the origin"""
    return float(_jaccard(_as_xy(p1), _as_xy(p2)))

def hamming_distance(p1: Any, p2: Any) -> float:
    """
    Grid-cell Hamming distance in {0, 1, 2}

    Cell index is floor(coord / 10). Always evaluated on raw canvas
    coordinates; the selector never passes scaled values here.
    """
    return float(_hamming(_as_xy(p1), _as_xy(p2)))
