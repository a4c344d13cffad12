# ============================================
# KNNLab - src/knnlab/data/generator.py
# Clustered random datasets for the three-class canvas
# ============================================

import math
import numpy as np
import pandas as pd
from typing import Dict, List, Optional, Sequence, Union

from ..models.base.types import CLASS_ORDER, ClassType, DatasetType, LabeledPoint
from ..models.neighbors.distances import GRID_CELL_SIZE
from ..utils.exceptions import InvalidParameterError
from ..utils.logger import get_logger
from ..utils.timing import time_it

logger = get_logger('data.generator')

# Inset margin keeping generated points away from the canvas edge
COORD_MIN = 5.0
COORD_MAX = 95.0

# Share of points replaced by uniform noise over the whole canvas
NOISE_PROBABILITY = 0.2

# (upper bound on the class draw, label, x range, y range)
CLUSTERS = (
    (0.33, ClassType.A, (10.0, 50.0), (10.0, 50.0)),
    (0.66, ClassType.B, (50.0, 90.0), (50.0, 90.0)),
    (1.00, ClassType.C, (50.0, 90.0), (10.0, 50.0)),
)

def snap_to_grid(value: float) -> float:
    """Lower grid-cell center of a coordinate: floor(value / 10) * 10 + 5"""
    return math.floor(value / GRID_CELL_SIZE) * GRID_CELL_SIZE + GRID_CELL_SIZE / 2

def _draw_point(rng: np.random.Generator):
    draw = rng.random()
    for upper, label, (x_low, x_high), (y_low, y_high) in CLUSTERS:
        if draw < upper:
            break

    x = rng.uniform(x_low, x_high)
    y = rng.uniform(y_low, y_high)

    if rng.random() < NOISE_PROBABILITY:
        x = rng.uniform(0.0, 100.0)
        y = rng.uniform(0.0, 100.0)

    return label, float(x), float(y)

@time_it("generate_dataset")
def generate_dataset(count: int, dataset_type: Union[DatasetType, str] = DatasetType.CONTINUOUS,
                     random_state: Optional[Union[int, np.random.Generator]] = None) -> List[LabeledPoint]:
    """
    Generate a three-cluster labeled dataset

    Class A sits bottom-left, B top-right and C bottom-right, each in a
    40x40 square; a fifth of the points are uniform noise. Coordinates are
    clamped to [5, 95], and Categorical datasets snap both axes to the
    cell centers 5, 15, ..., 95.

    Args:
        count: Number of points (>= 0); ids are 0..count-1
        dataset_type: Continuous or Categorical
        random_state: Seed or numpy Generator for reproducible datasets

    Returns:
        List of LabeledPoint
    """
    if isinstance(count, bool) or not isinstance(count, (int, np.integer)):
        raise InvalidParameterError("count must be an integer", parameter_name='count', provided_value=count)
    if count < 0:
        raise InvalidParameterError(
            f"count must be non-negative, got {count}", parameter_name='count', provided_value=count
        )

    dataset_type = DatasetType.from_name(dataset_type)
    rng = np.random.default_rng(random_state)
    categorical = dataset_type is DatasetType.CATEGORICAL

    points = []
    for point_id in range(int(count)):
        label, x, y = _draw_point(rng)

        x = min(COORD_MAX, max(COORD_MIN, x))
        y = min(COORD_MAX, max(COORD_MIN, y))

        if categorical:
            x, y = snap_to_grid(x), snap_to_grid(y)

        points.append(LabeledPoint(id=point_id, x=x, y=y, label=label))

    logger.info(f"Generated {len(points)} {dataset_type.value} points", extra={'random_state': str(random_state)})
    return points

# ============================================
# Tabular Views
# ============================================

def dataset_to_frame(dataset: Sequence[LabeledPoint]) -> pd.DataFrame:
    """Dataset as a DataFrame with columns id, x, y, label"""
    return pd.DataFrame(
        [(point.id, point.x, point.y, point.label.value) for point in dataset],
        columns=['id', 'x', 'y', 'label']
    )

def class_distribution(dataset: Sequence[LabeledPoint]) -> Dict[ClassType, int]:
    """Point count per class, every class present, in canonical order"""
    counts = {label: 0 for label in CLASS_ORDER}
    for point in dataset:
        counts[point.label] += 1
    return counts
