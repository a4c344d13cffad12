# ============================================
# KNNLab - src/knnlab/features/transformers/scalers.py
# Min-max scaling of the point set shared by a dataset and its query
# ============================================

import numpy as np
from typing import Optional, Tuple
from dataclasses import dataclass
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.preprocessing import MinMaxScaler
from sklearn.utils.validation import check_array, check_is_fitted

from ...utils.logger import get_logger

logger = get_logger('features.transformers.scalers')

# Y stretch used to demonstrate features living on very different ranges
# (think age vs. income). Fixed scenario knob, not a general setting.
IMBALANCE_Y_MULTIPLIER = 50.0

def axis_multipliers(simulate_imbalance: bool) -> Tuple[float, float]:
    """Per-axis range multipliers for the imbalance demonstration"""
    return (1.0, IMBALANCE_Y_MULTIPLIER if simulate_imbalance else 1.0)

# ============================================
# Configuration
# ============================================

@dataclass
class ScalerConfig:
    """Configuration for the point scaler"""
    multipliers: Tuple[float, float] = (1.0, 1.0)

    def __post_init__(self):
        if len(self.multipliers) != 2:
            raise ValueError("multipliers must hold exactly one value per axis (x, y)")
        if any(m <= 0 for m in self.multipliers):
            raise ValueError("multipliers must be positive")

# ============================================
# Scaler
# ============================================

class MinMaxPointScaler(BaseEstimator, TransformerMixin):
    """
    Min-max scaler for 2D canvas coordinates.

    Each axis is first multiplied by its range multiplier, then mapped to
    (value - min) / (max - min). An axis where every point shares the same
    coordinate maps to 0 rather than NaN.
    """

    def __init__(self, config: Optional[ScalerConfig] = None):
        self.config = config

    def _multipliers(self) -> np.ndarray:
        config = self.config or ScalerConfig()
        return np.asarray(config.multipliers, dtype=float)

    def _validate_input(self, X) -> np.ndarray:
        X = check_array(X, dtype=np.float64, ensure_min_samples=1)
        if X.shape[1] != 2:
            raise ValueError(f"Expected 2 features (x, y), got {X.shape[1]}")
        return X * self._multipliers()

    def fit(self, X, y=None):
        """Learn per-axis min and max of the multiplied coordinates"""
        X = self._validate_input(X)

        self.scaler_ = MinMaxScaler(feature_range=(0, 1))
        self.scaler_.fit(X)

        self.data_min_ = self.scaler_.data_min_
        self.data_max_ = self.scaler_.data_max_
        self.degenerate_axes_ = self.data_max_ == self.data_min_
        if self.degenerate_axes_.any():
            logger.debug(f"Zero-range axes {np.flatnonzero(self.degenerate_axes_).tolist()} scale to 0")

        return self

    def transform(self, X):
        """Map multiplied coordinates into [0, 1]"""
        check_is_fitted(self, 'scaler_')
        X = self._validate_input(X)

        X_scaled = self.scaler_.transform(X)
        # Degenerate axes are defined as 0 regardless of sklearn's zero-range handling
        X_scaled[:, self.degenerate_axes_] = 0.0
        return X_scaled

# ============================================
# Utility Functions
# ============================================

def scale_point_set(points: np.ndarray, query: np.ndarray,
                    multipliers: Tuple[float, float] = (1.0, 1.0)) -> Tuple[np.ndarray, np.ndarray]:
    """
    Scale dataset coordinates and the query together

    The query is part of the fitted set so it can never land outside [0, 1].

    Args:
        points: Dataset coordinates, shape (n, 2); n may be 0
        query: Query coordinates, shape (2,)
        multipliers: Per-axis range multipliers applied before scaling

    Returns:
        Tuple of (scaled points with shape (n, 2), scaled query with shape (2,))
    """
    points = np.asarray(points, dtype=float).reshape(-1, 2)
    query = np.asarray(query, dtype=float).reshape(1, 2)

    combined = np.vstack([points, query])
    scaler = MinMaxPointScaler(ScalerConfig(multipliers=tuple(multipliers)))
    scaled = scaler.fit_transform(combined)

    return scaled[:-1], scaled[-1]

def apply_multipliers(points: np.ndarray, multipliers: Tuple[float, float]) -> np.ndarray:
    """Stretch coordinates per axis without normalising"""
    return np.asarray(points, dtype=float) * np.asarray(multipliers, dtype=float)
