"""
tests/unit/test_features/test_scalers.py

Unit tests for the min-max point scaler and the imbalance multipliers.
"""

import sys
import pytest
import numpy as np
from pathlib import Path

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent.parent.parent
sys.path.append(str(project_root))
sys.path.insert(0, str(project_root / "src"))

from sklearn.exceptions import NotFittedError

from knnlab.features.transformers.scalers import (
    IMBALANCE_Y_MULTIPLIER, MinMaxPointScaler, ScalerConfig,
    apply_multipliers, axis_multipliers, scale_point_set
)

# ============================================
# TEST MULTIPLIERS
# ============================================

class TestMultipliers:
    """Per-axis range multipliers"""

    def test_axis_multipliers(self):
        assert axis_multipliers(False) == (1.0, 1.0)
        assert axis_multipliers(True) == (1.0, IMBALANCE_Y_MULTIPLIER)
        assert IMBALANCE_Y_MULTIPLIER == 50.0

    def test_apply_multipliers(self):
        result = apply_multipliers(np.array([[2.0, 3.0]]), (1.0, 50.0))
        np.testing.assert_allclose(result, [[2.0, 150.0]])

    @pytest.mark.parametrize("multipliers", [(1.0,), (1.0, 0.0), (-1.0, 1.0)])
    def test_invalid_config(self, multipliers):
        with pytest.raises(ValueError):
            ScalerConfig(multipliers=multipliers)

# ============================================
# TEST MIN-MAX SCALER
# ============================================

class TestMinMaxPointScaler:
    """Min-max normalisation of 2D coordinates"""

    def test_maps_to_unit_range(self):
        X = np.array([[10.0, 20.0], [30.0, 60.0], [20.0, 40.0]])
        scaled = MinMaxPointScaler().fit_transform(X)

        np.testing.assert_allclose(scaled, [[0.0, 0.0], [1.0, 1.0], [0.5, 0.5]])

    def test_uniform_axis_maps_to_zero(self):
        X = np.array([[40.0, 10.0], [40.0, 50.0], [40.0, 90.0]])
        scaler = MinMaxPointScaler().fit(X)
        scaled = scaler.transform(X)

        assert scaler.degenerate_axes_.tolist() == [True, False]
        assert np.all(scaled[:, 0] == 0.0)
        assert np.isfinite(scaled).all()

    def test_single_point_is_all_zero(self):
        scaled = MinMaxPointScaler().fit_transform(np.array([[42.0, 17.0]]))
        np.testing.assert_array_equal(scaled, [[0.0, 0.0]])

    def test_multiplier_applied_before_fit(self):
        scaler = MinMaxPointScaler(ScalerConfig(multipliers=(1.0, 50.0)))
        scaler.fit(np.array([[0.0, 1.0], [10.0, 3.0]]))

        np.testing.assert_allclose(scaler.data_min_, [0.0, 50.0])
        np.testing.assert_allclose(scaler.data_max_, [10.0, 150.0])

    def test_transform_before_fit_raises(self):
        with pytest.raises(NotFittedError):
            MinMaxPointScaler().transform(np.array([[1.0, 2.0]]))

    def test_rejects_wrong_feature_count(self):
        with pytest.raises(ValueError):
            MinMaxPointScaler().fit(np.array([[1.0, 2.0, 3.0]]))

# ============================================
# TEST POINT SET SCALING
# ============================================

class TestScalePointSet:
    """Dataset and query scaled together"""

    def test_query_included_in_range(self):
        points = np.array([[20.0, 20.0], [40.0, 40.0]])
        scaled_points, scaled_query = scale_point_set(points, np.array([60.0, 0.0]))

        np.testing.assert_allclose(scaled_query, [1.0, 0.0])
        np.testing.assert_allclose(scaled_points, [[0.0, 0.5], [0.5, 1.0]])

    def test_query_stays_in_unit_square(self):
        rng = np.random.default_rng(0)
        points = rng.uniform(20, 80, size=(25, 2))
        _, scaled_query = scale_point_set(points, np.array([99.0, 1.0]))

        assert np.all((scaled_query >= 0.0) & (scaled_query <= 1.0))

    def test_empty_dataset(self):
        scaled_points, scaled_query = scale_point_set(np.empty((0, 2)), np.array([30.0, 70.0]))

        assert scaled_points.shape == (0, 2)
        np.testing.assert_array_equal(scaled_query, [0.0, 0.0])

    def test_imbalance_multiplier_cancels_after_scaling(self):
        points = np.array([[10.0, 10.0], [90.0, 90.0]])
        plain_points, plain_query = scale_point_set(points, np.array([50.0, 30.0]))
        stretched_points, stretched_query = scale_point_set(points, np.array([50.0, 30.0]), (1.0, 50.0))

        np.testing.assert_allclose(plain_points, stretched_points)
        np.testing.assert_allclose(plain_query, stretched_query)
