"""
tests/unit/test_data/test_generator.py

Unit tests for the clustered dataset generator, grid snapping and the
tabular dataset views.
"""

import sys
import pytest
import numpy as np
from pathlib import Path

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent.parent.parent
sys.path.append(str(project_root))
sys.path.insert(0, str(project_root / "src"))

from tests.utils.assertions import DataFrameAssertions

from knnlab.data.generator import (
    COORD_MAX, COORD_MIN, class_distribution, dataset_to_frame, generate_dataset, snap_to_grid
)
from knnlab.models.base.types import ClassType, DatasetType
from knnlab.utils.exceptions import InvalidParameterError

CELL_CENTERS = {5.0, 15.0, 25.0, 35.0, 45.0, 55.0, 65.0, 75.0, 85.0, 95.0}

# ============================================
# TEST SNAP TO GRID
# ============================================

class TestSnapToGrid:
    """Lower grid-cell centers"""

    @pytest.mark.parametrize("value,expected", [
        (0.0, 5.0),
        (9.99, 5.0),
        (10.0, 15.0),
        (47.3, 45.0),
        (95.0, 95.0),
        (99.9, 95.0),
        (100.0, 105.0),
    ])
    def test_snap(self, value, expected):
        assert snap_to_grid(value) == expected

    def test_snap_is_idempotent_on_centers(self):
        for center in CELL_CENTERS:
            assert snap_to_grid(center) == center

# ============================================
# TEST GENERATION
# ============================================

class TestGenerateDataset:
    """Output contract of the generator"""

    @pytest.mark.parametrize("count", [0, 1, 30, 200])
    def test_count_and_ids(self, count):
        dataset = generate_dataset(count, random_state=1)

        assert len(dataset) == count
        assert [point.id for point in dataset] == list(range(count))

    def test_labels_and_bounds(self):
        dataset = generate_dataset(500, random_state=3)

        assert {point.label for point in dataset} <= set(ClassType)
        for point in dataset:
            assert COORD_MIN <= point.x <= COORD_MAX
            assert COORD_MIN <= point.y <= COORD_MAX

    def test_all_classes_present_in_large_dataset(self):
        counts = class_distribution(generate_dataset(300, random_state=5))
        assert all(count > 0 for count in counts.values())

    def test_categorical_snaps_to_cell_centers(self):
        dataset = generate_dataset(200, DatasetType.CATEGORICAL, random_state=11)

        for point in dataset:
            assert point.x in CELL_CENTERS
            assert point.y in CELL_CENTERS

    def test_categorical_by_name(self):
        dataset = generate_dataset(20, "categorical", random_state=11)
        assert all(point.x in CELL_CENTERS for point in dataset)

    def test_reproducible_with_seed(self):
        assert generate_dataset(40, random_state=42) == generate_dataset(40, random_state=42)

    def test_different_seeds_differ(self):
        assert generate_dataset(40, random_state=1) != generate_dataset(40, random_state=2)

    def test_accepts_generator(self):
        rng = np.random.default_rng(9)
        first = generate_dataset(10, random_state=rng)
        second = generate_dataset(10, random_state=rng)
        assert first != second

    def test_clusters_dominate_without_noise(self):
        # Most points of each class sit inside that class's square
        dataset = generate_dataset(600, random_state=21)
        in_square = {
            ClassType.A: lambda p: p.x <= 50 and p.y <= 50,
            ClassType.B: lambda p: p.x >= 50 and p.y >= 50,
            ClassType.C: lambda p: p.x >= 50 and p.y <= 50,
        }
        for label, inside in in_square.items():
            members = [p for p in dataset if p.label == label]
            assert sum(inside(p) for p in members) / len(members) > 0.7

    @pytest.mark.parametrize("count", [-1, -30])
    def test_negative_count_raises(self, count):
        with pytest.raises(InvalidParameterError):
            generate_dataset(count)

    def test_non_integer_count_raises(self):
        with pytest.raises(InvalidParameterError):
            generate_dataset(2.5)

    def test_unknown_dataset_type_raises(self):
        with pytest.raises(InvalidParameterError):
            generate_dataset(5, "Ordinal")

# ============================================
# TEST TABULAR VIEWS
# ============================================

class TestDatasetViews:
    """DataFrame view and class counts"""

    def test_dataset_to_frame(self, seeded_dataset):
        frame = dataset_to_frame(seeded_dataset)

        DataFrameAssertions.assert_columns_present(frame, ['id', 'x', 'y', 'label'])
        DataFrameAssertions.assert_no_null_values(frame)
        assert len(frame) == len(seeded_dataset)
        assert set(frame['label']) <= {'A', 'B', 'C'}

    def test_empty_frame(self):
        frame = dataset_to_frame([])
        assert frame.empty
        assert list(frame.columns) == ['id', 'x', 'y', 'label']

    def test_class_distribution(self, two_point_dataset):
        counts = class_distribution(two_point_dataset)

        assert list(counts) == [ClassType.A, ClassType.B, ClassType.C]
        assert counts == {ClassType.A: 1, ClassType.B: 1, ClassType.C: 0}

    def test_distribution_sums_to_size(self, seeded_dataset):
        assert sum(class_distribution(seeded_dataset).values()) == len(seeded_dataset)
