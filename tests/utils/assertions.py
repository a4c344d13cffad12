"""
tests/utils/assertions.py

Custom assertion utilities for KNNLab tests.
Provides specialized assertions for neighbor lists, vote results,
error curves and generated datasets.
"""

import sys
import math
import pandas as pd
from pathlib import Path
from typing import List, Optional, Sequence

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.append(str(project_root))
sys.path.insert(0, str(project_root / "src"))

from knnlab.models.base.types import CLASS_ORDER, ClassificationResult, KErrorPoint, ScoredPoint
from knnlab.models.neighbors.selector import TIE_TOLERANCE

# ============================================
# NEIGHBOR ASSERTIONS
# ============================================

class NeighborAssertions:
    """Assertions over selector output"""

    @staticmethod
    def assert_sorted_by_distance(neighbors: Sequence[ScoredPoint], message: str = "") -> None:
        """Assert distances never decrease by more than the selector tie tolerance"""
        distances = [n.distance for n in neighbors]
        for i in range(1, len(distances)):
            assert distances[i] >= distances[i - 1] - TIE_TOLERANCE, (
                f"Distance decreases at position {i}: {distances}. {message}"
            )

    @staticmethod
    def assert_finite_distances(neighbors: Sequence[ScoredPoint], message: str = "") -> None:
        """Assert every distance is a finite, non-negative number"""
        for n in neighbors:
            assert math.isfinite(n.distance) and n.distance >= 0, (
                f"Point {n.id} has invalid distance {n.distance}. {message}"
            )

# ============================================
# VOTE ASSERTIONS
# ============================================

class VoteAssertions:
    """Assertions over classification results"""

    @staticmethod
    def assert_score_conservation(result: ClassificationResult, tolerance: float = 1e-9, message: str = "") -> None:
        """Assert class scores add up to the total score"""
        total = sum(result.class_scores.values())
        assert abs(total - result.total_score) <= tolerance, (
            f"Class scores sum to {total}, total_score is {result.total_score}. {message}"
        )

    @staticmethod
    def assert_all_classes_scored(result: ClassificationResult, message: str = "") -> None:
        """Assert every class has a non-negative score entry"""
        for label in CLASS_ORDER:
            assert label in result.class_scores, f"Missing score for class {label}. {message}"
            assert result.class_scores[label] >= 0, f"Negative score for class {label}. {message}"

# ============================================
# CURVE ASSERTIONS
# ============================================

class CurveAssertions:
    """Assertions over elbow error curves"""

    @staticmethod
    def assert_valid_curve(curve: Sequence[KErrorPoint], expected_ks: Optional[List[int]] = None,
                           message: str = "") -> None:
        """Assert odd ascending ks and error rates in [0, 1]"""
        ks = [point.k for point in curve]
        if expected_ks is not None:
            assert ks == expected_ks, f"Expected ks {expected_ks}, got {ks}. {message}"

        for point in curve:
            assert point.k % 2 == 1, f"Even k {point.k} in curve. {message}"
            assert 0.0 <= point.error_rate <= 1.0, (
                f"Error rate {point.error_rate} for k={point.k} outside [0, 1]. {message}"
            )

# ============================================
# DATAFRAME ASSERTIONS
# ============================================

class DataFrameAssertions:
    """General DataFrame assertions"""

    @staticmethod
    def assert_columns_present(df: pd.DataFrame, columns: List[str], message: str = "") -> None:
        missing = set(columns) - set(df.columns)
        assert not missing, f"Missing columns: {missing}. {message}"

    @staticmethod
    def assert_no_null_values(df: pd.DataFrame, message: str = "") -> None:
        null_count = int(df.isnull().sum().sum())
        assert null_count == 0, f"Found {null_count} null values. {message}"

# ============================================
# CONVENIENCE FUNCTIONS
# ============================================

def assert_valid_neighbors(neighbors: Sequence[ScoredPoint], expected_length: Optional[int] = None,
                           message: str = "") -> None:
    """Comprehensive validation for a neighbor list"""
    if expected_length is not None:
        assert len(neighbors) == expected_length, (
            f"Expected {expected_length} neighbors, got {len(neighbors)}. {message}"
        )
    NeighborAssertions.assert_finite_distances(neighbors, message)
    NeighborAssertions.assert_sorted_by_distance(neighbors, message)

def assert_valid_classification(result: ClassificationResult, message: str = "") -> None:
    """Comprehensive validation for a vote result"""
    VoteAssertions.assert_all_classes_scored(result, message)
    VoteAssertions.assert_score_conservation(result, message=message)
