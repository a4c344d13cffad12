# ============================================
# KNNLab - src/knnlab/__init__.py
# Interactive k-nearest-neighbors teaching core
# ============================================

__version__ = "1.0.0"

from .models.base.types import (
    TIE, ClassType, ClassificationResult, DatasetType, KErrorPoint, LabeledPoint,
    MetricConfig, MetricKind, QueryPoint, ScoredPoint, VotingKind
)
from .models.neighbors.distances import compute_distance
from .models.neighbors.selector import select_neighbors
from .models.classification.voting import classify
from .evaluation.validation.elbow import evaluate_k, find_optimal_k
from .data.generator import generate_dataset, snap_to_grid

__all__ = [
    'TIE', 'ClassType', 'ClassificationResult', 'DatasetType', 'KErrorPoint', 'LabeledPoint',
    'MetricConfig', 'MetricKind', 'QueryPoint', 'ScoredPoint', 'VotingKind',
    'compute_distance', 'select_neighbors', 'classify', 'evaluate_k', 'find_optimal_k',
    'generate_dataset', 'snap_to_grid',
]
