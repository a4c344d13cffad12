"""
conftest.py

Pytest configuration and fixtures for KNNLab tests.
Provides the small hand-built scenario datasets, seeded generated datasets
and configuration helpers shared across test modules.
"""

import os
import sys
import pytest
from pathlib import Path

# Add project root and src/ to Python path for imports
project_root = Path(__file__).parent.parent
sys.path.append(str(project_root))
sys.path.insert(0, str(project_root / "src"))

from tests.utils.dataset_factories import DatasetFactory

from knnlab.models.base.types import ClassType, LabeledPoint, MetricConfig, MetricKind, QueryPoint

# ============================================
# PYTEST CONFIGURATION
# ============================================

def pytest_configure(config):
    """Configure pytest settings and markers"""
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")

def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location"""
    for item in items:
        path = str(item.fspath)
        if "integration" in path:
            item.add_marker(pytest.mark.integration)
        elif "unit" in path:
            item.add_marker(pytest.mark.unit)

# ============================================
# SCENARIO FIXTURES
# ============================================

@pytest.fixture
def two_point_dataset():
    """One A point bottom-left and one B point top-right"""
    return [
        LabeledPoint(id=0, x=10.0, y=10.0, label=ClassType.A),
        LabeledPoint(id=1, x=90.0, y=90.0, label=ClassType.B),
    ]

@pytest.fixture
def euclidean_config():
    return MetricConfig(metric=MetricKind.EUCLIDEAN)

@pytest.fixture
def center_query():
    return QueryPoint(50.0, 50.0)

@pytest.fixture
def separated_clusters():
    """Three tight, well separated clusters of four points each"""
    return DatasetFactory.create_clusters(points_per_class=4, spread=2.0, seed=7)

# ============================================
# GENERATED DATASET FIXTURES
# ============================================

@pytest.fixture
def seeded_dataset():
    """Reproducible 30-point continuous dataset"""
    return DatasetFactory.create_generated(count=30, seed=42)

@pytest.fixture
def seeded_categorical_dataset():
    """Reproducible 30-point grid-snapped dataset"""
    return DatasetFactory.create_generated(count=30, seed=42, dataset_type='Categorical')

# ============================================
# CONFIGURATION FIXTURES
# ============================================

@pytest.fixture
def config_dir(tmp_path):
    """Empty configuration directory"""
    directory = tmp_path / "config"
    directory.mkdir()
    return directory

@pytest.fixture
def write_config(config_dir):
    """Write a YAML file into the temporary configuration directory"""
    def _write(filename: str, content: str) -> Path:
        path = config_dir / filename
        path.write_text(content, encoding="utf-8")
        return path

    return _write

@pytest.fixture
def clean_env(monkeypatch):
    """Remove KNNLab environment overrides for the duration of a test"""
    for name in list(os.environ):
        if name.startswith("KNNLAB_"):
            monkeypatch.delenv(name, raising=False)
    return monkeypatch
