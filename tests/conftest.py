"""Pytest configuration for tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture
def world():
    """A fresh copy of the default two-sphere world."""
    from src.tracer.scene.world import default_world

    return default_world()


@pytest.fixture
def graph():
    """An empty scene graph."""
    from src.tracer.scene.graph import SceneGraph

    return SceneGraph()
