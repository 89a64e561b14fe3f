"""Pytest configuration for spheretrace tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    invalidate the fields declared by already imported modules.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Reset all global render state around each test."""
    # Import here so field declarations happen after ti.init()
    from src.spheretrace.camera.thin_lens import reset_camera
    from src.spheretrace.core.integrator import reset_render_target
    from src.spheretrace.core.sampling import seed_streams
    from src.spheretrace.scene.manager import clear_all

    def _clear_all():
        clear_all()
        reset_render_target()
        reset_camera()
        seed_streams(0)

    _clear_all()
    yield
    _clear_all()
