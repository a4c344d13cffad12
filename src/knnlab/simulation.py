# ============================================
# KNNLab - src/knnlab/simulation.py
# Settings snapshot and full recompute for the interactive k-NN view
# ============================================

import dataclasses
import numpy as np
import pandas as pd
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from .data.generator import generate_dataset, snap_to_grid
from .evaluation.validation.elbow import DEFAULT_MAX_K, evaluate_k, find_optimal_k, error_curve_frame
from .models.base.types import (
    ClassificationResult, DatasetType, KErrorPoint, LabeledPoint, MetricConfig, MetricKind,
    QueryPoint, ScoredPoint, VotingKind
)
from .models.classification.voting import classify, neighbor_weight
from .models.neighbors.selector import select_neighbors
from .utils import config_loader
from .utils.exceptions import ConfigurationError, KNNLabBaseException, log_exception
from .utils.logger import get_logger
from .utils.timing import Timer
from .utils.validators import ParameterValidator, validate_dataset

logger = get_logger('simulation')

DEFAULT_K = 3
DEFAULT_DATASET_SIZE = 30
DEFAULT_QUERY = QueryPoint(50.0, 50.0)
CATEGORICAL_QUERY = QueryPoint(55.0, 55.0)

# ============================================
# Settings
# ============================================

@dataclass(frozen=True)
class SimulationSettings:
    """Every input of one recompute pass. Replace fields with dataclasses.replace."""
    k: int = DEFAULT_K
    metric_config: MetricConfig = field(default_factory=MetricConfig)
    voting: VotingKind = VotingKind.MAJORITY
    query: QueryPoint = DEFAULT_QUERY
    dataset_type: DatasetType = DatasetType.CONTINUOUS
    max_k: int = DEFAULT_MAX_K
    dataset_size: int = DEFAULT_DATASET_SIZE

    def __post_init__(self):
        object.__setattr__(self, 'voting', VotingKind.from_name(self.voting))
        object.__setattr__(self, 'dataset_type', DatasetType.from_name(self.dataset_type))

        result = ParameterValidator().validate_knn_params(self.k, self.metric_config.p, self.max_k)
        result.raise_if_invalid()

    @classmethod
    def from_config(cls, knn_config: Optional[Dict[str, Any]] = None) -> 'SimulationSettings':
        """
        Build settings from the knn_config section of the configuration

        Args:
            knn_config: Parsed knn_config mapping; the loaded config is used when omitted
        """
        knn_config = knn_config if knn_config is not None else config_loader.get_knn_config()
        sim = knn_config.get('simulation', {})
        elbow = knn_config.get('elbow', {})

        try:
            dataset_type = DatasetType.from_name(sim.get('dataset_type', DatasetType.CONTINUOUS))
            categorical = dataset_type is DatasetType.CATEGORICAL
            default_query = CATEGORICAL_QUERY if categorical else DEFAULT_QUERY
            query = sim.get('categorical_query' if categorical else 'query') or {}

            metric_config = MetricConfig(
                metric=sim.get('metric', MetricKind.EUCLIDEAN),
                p=sim.get('minkowski_p', 3.0),
                use_scaling=bool(sim.get('use_scaling', False)),
                simulate_imbalance=bool(sim.get('simulate_imbalance', False)),
            )

            return cls(
                k=sim.get('k', DEFAULT_K),
                metric_config=metric_config,
                voting=sim.get('voting', VotingKind.MAJORITY),
                query=QueryPoint(float(query.get('x', default_query.x)), float(query.get('y', default_query.y))),
                dataset_type=dataset_type,
                max_k=elbow.get('max_k', DEFAULT_MAX_K),
                dataset_size=sim.get('dataset_size', DEFAULT_DATASET_SIZE),
            )
        except KNNLabBaseException as e:
            log_exception(e, logger)
            raise ConfigurationError(
                f"Invalid simulation settings in knn_config: {e.message}", config_name='knn_config', cause=e
            ) from e

def settings_for_dataset_type(settings: SimulationSettings,
                              dataset_type: Union[DatasetType, str]) -> SimulationSettings:
    """
    Apply the defaults that come with switching dataset type

    Categorical switches to Hamming, turns scaling and imbalance off and
    centers the query on cell (55, 55). Continuous switches back to
    Euclidean and leaves the query where it is.
    """
    dataset_type = DatasetType.from_name(dataset_type)

    if dataset_type is DatasetType.CATEGORICAL:
        metric_config = dataclasses.replace(
            settings.metric_config, metric=MetricKind.HAMMING, use_scaling=False, simulate_imbalance=False
        )
        return dataclasses.replace(
            settings, dataset_type=dataset_type, metric_config=metric_config, query=CATEGORICAL_QUERY
        )

    metric_config = dataclasses.replace(settings.metric_config, metric=MetricKind.EUCLIDEAN)
    return dataclasses.replace(settings, dataset_type=dataset_type, metric_config=metric_config)

def move_query(settings: SimulationSettings, x: float, y: float) -> SimulationSettings:
    """Move the query, clamped to the canvas and snapped to a cell center in Categorical mode"""
    x = min(100.0, max(0.0, float(x)))
    y = min(100.0, max(0.0, float(y)))

    if settings.dataset_type is DatasetType.CATEGORICAL:
        x = min(95.0, max(5.0, snap_to_grid(x)))
        y = min(95.0, max(5.0, snap_to_grid(y)))

    return dataclasses.replace(settings, query=QueryPoint(x, y))

def new_dataset(settings: SimulationSettings,
                random_state: Optional[Union[int, np.random.Generator]] = None) -> List[LabeledPoint]:
    """Fresh dataset of the configured size and type"""
    return generate_dataset(settings.dataset_size, settings.dataset_type, random_state=random_state)

# ============================================
# Recompute
# ============================================

@dataclass(frozen=True)
class SimulationSnapshot:
    """Everything the view shows for one settings snapshot"""
    settings: SimulationSettings
    neighbors: List[ScoredPoint]
    classification: ClassificationResult
    error_curve: List[KErrorPoint]
    optimal_k: int
    # Wall-clock seconds per recompute stage; ignored when comparing snapshots
    stage_seconds: Dict[str, float] = field(default_factory=dict, compare=False)

    def neighbor_frame(self) -> pd.DataFrame:
        """Neighbor table: rank, id, label, distance and vote weight"""
        return pd.DataFrame(
            [
                (rank, n.id, n.label.value, n.distance, neighbor_weight(n.distance, self.settings.voting))
                for rank, n in enumerate(self.neighbors, 1)
            ],
            columns=['rank', 'id', 'label', 'distance', 'weight']
        )

    def error_curve_frame(self) -> pd.DataFrame:
        return error_curve_frame(self.error_curve)

def run_simulation(dataset: Sequence[LabeledPoint], settings: Optional[SimulationSettings] = None,
                   include_elbow: bool = True) -> SimulationSnapshot:
    """
    Recompute neighbors, vote and elbow curve from scratch

    Args:
        dataset: Labeled points with unique ids; duplicates raise DataValidationError
        settings: Settings snapshot; defaults when omitted
        include_elbow: Skip the leave-one-out pass when False

    Returns:
        SimulationSnapshot
    """
    settings = settings or SimulationSettings()
    validate_dataset(dataset)
    metadata = {'dataset_size': len(dataset), 'k': settings.k}

    with Timer('neighbor_selection', metadata=metadata) as selection_timer:
        neighbors = select_neighbors(dataset, settings.query, settings.k, settings.metric_config)
    with Timer('voting', metadata=metadata) as voting_timer:
        classification = classify(neighbors, settings.voting)
    timers = [selection_timer, voting_timer]

    error_curve: List[KErrorPoint] = []
    if include_elbow:
        with Timer('elbow', metadata={**metadata, 'max_k': settings.max_k}) as elbow_timer:
            error_curve = evaluate_k(dataset, settings.max_k, settings.metric_config, settings.voting)
        timers.append(elbow_timer)

    return SimulationSnapshot(
        settings=settings,
        neighbors=neighbors,
        classification=classification,
        error_curve=error_curve,
        optimal_k=find_optimal_k(error_curve),
        stage_seconds={timer.stage: timer.timing.seconds for timer in timers},
    )
