"""Pytest configuration for fixture generator tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import numpy as np
import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    fast_math stays off so reciprocal-of-zero slab bounds produce IEEE
    infinities exactly as in production runs.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f32, fast_math=False, random_seed=42)
    yield


@pytest.fixture
def rng():
    """A seeded generator so sampling tests are reproducible."""
    return np.random.default_rng(1234)


@pytest.fixture
def unit_box():
    """The box spanning [0, 1] on every axis."""
    from src.octree_data.geometry.box import BoxInfo

    return BoxInfo(min_corner=(0.0, 0.0, 0.0), max_corner=(1.0, 1.0, 1.0))


@pytest.fixture
def ray_bounds():
    """Origin and direction bounds that make a box near the origin reachable."""
    from src.octree_data.core.ray import RayInfo

    ray_min = RayInfo(origin=(-10.0, -10.0, -10.0), direction=(-1.0, -1.0, -1.0))
    ray_max = RayInfo(origin=(10.0, 10.0, 10.0), direction=(1.0, 1.0, 1.0))
    return ray_min, ray_max
