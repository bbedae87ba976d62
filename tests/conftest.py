"""
Shared test configuration, fixtures, and markers for projarray tests.
"""

from typing import Any, List, Sequence, Tuple

import numpy as np
import pytest

from projarray.geotransform import GeoTransform
from projarray.types import AxisKind


def pytest_configure(config):
    """Configure test markers."""
    config.addinivalue_line("markers", "unit: marks unit tests (fast, pure logic)")
    config.addinivalue_line("markers", "integration: marks tests using real pyproj transformations")
    config.addinivalue_line("markers", "property: marks property-based tests")


class RecordingReprojector:
    """Reprojector that applies ``fn`` to every value and records each call."""

    def __init__(self, fn=lambda kind, v: v):
        self.fn = fn
        self.calls: List[Tuple[Any, Any, AxisKind, Tuple[float, ...]]] = []

    def __call__(self, source_crs, target_crs, axis_kind: AxisKind, values: Sequence[float]) -> List[float]:
        self.calls.append((source_crs, target_crs, axis_kind, tuple(values)))
        return [self.fn(axis_kind, v) for v in values]


@pytest.fixture
def recording_reprojector():
    """Identity reprojector that records its calls."""
    return RecordingReprojector()


@pytest.fixture
def grid_transform():
    """4x4 north-up grid with half-degree pixels."""
    return GeoTransform.from_gdal([10.0, 0.5, 0.0, 50.0, 0.0, -0.5])


@pytest.fixture
def lon_values():
    return np.array([10.0, 10.5, 11.0, 11.5])


@pytest.fixture
def lat_values():
    return np.array([50.0, 49.5, 49.0, 48.5])


@pytest.fixture
def make_reprojector():
    """Factory for recording reprojectors applying ``fn(axis_kind, value)``."""
    return RecordingReprojector
