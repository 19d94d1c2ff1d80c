"""
Shared fixtures for the evenstream test suite.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path for testing
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from evenstream.fields import StructuredGridField2D  # noqa: E402
from evenstream.utils.config import reset_config  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_config():
    reset_config()
    yield
    reset_config()


@pytest.fixture
def unit_grid():
    """41 x 41 'xy'-indexed grid over the unit square."""
    x = np.linspace(0.0, 1.0, 41)
    return np.meshgrid(x, x)


@pytest.fixture
def uniform_field(unit_grid):
    xx, yy = unit_grid
    return StructuredGridField2D(xx, yy, np.ones_like(xx), np.zeros_like(xx))


@pytest.fixture
def wavy_field(unit_grid):
    """u = 1, v = 0.3 sin(2 pi x): lines everywhere, no stagnation."""
    xx, yy = unit_grid
    return StructuredGridField2D(xx, yy, np.ones_like(xx), 0.3 * np.sin(2 * np.pi * xx))


@pytest.fixture
def vortex_field():
    """Solid-body rotation about the origin on [-1, 1]^2."""
    x = np.linspace(-1.0, 1.0, 41)
    xx, yy = np.meshgrid(x, x)
    return StructuredGridField2D(xx, yy, -yy, xx)
