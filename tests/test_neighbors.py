"""
Tests for the batch-keyed KD-tree point index.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from evenstream.density import KDTreeNeighbors, line_distances


def _two_lines():
    index = KDTreeNeighbors()
    x = np.linspace(0, 1, 11)
    a = index.insert(np.column_stack([x, np.zeros_like(x)]))
    b = index.insert(np.column_stack([x, np.full_like(x, 0.5)]))
    return index, a, b


def test_empty_index_returns_inf():
    index = KDTreeNeighbors()
    assert len(index) == 0
    assert np.all(np.isinf(index.nearest_distance(np.zeros((3, 2)))))


def test_nearest_distance():
    index, _, _ = _two_lines()
    assert len(index) == 22
    assert_allclose(index.nearest_distance([[0.5, 0.2], [0.55, 0.5]]), [0.2, 0.05])


def test_remove_and_restore():
    index, a, b = _two_lines()
    pts = index.remove(a)
    assert a not in index and b in index
    assert_allclose(index.nearest_distance([[0.5, 0.0]]), [0.5])
    index.restore(a, pts)
    assert_allclose(index.nearest_distance([[0.5, 0.0]]), [0.0])
    assert index.batch_ids() == [b, a]


def test_excluding_restores_on_error():
    index, a, _ = _two_lines()
    with pytest.raises(RuntimeError):
        with index.excluding(a):
            assert a not in index
            raise RuntimeError("boom")
    assert a in index
    assert len(index) == 22


def test_line_distances_excludes_own_batch():
    index, a, b = _two_lines()
    assert_allclose(line_distances(index, a), 0.5)
    assert_allclose(line_distances(index, b), 0.5)
    assert len(index) == 22


def test_invalid_operations():
    index, a, _ = _two_lines()
    with pytest.raises(KeyError):
        index.remove(99)
    with pytest.raises(ValueError):
        index.restore(a, np.zeros((1, 2)))
    with pytest.raises(KeyError):
        index.restore(99, np.zeros((1, 2)))
    with pytest.raises(ValueError):
        index.insert(np.array([[np.nan, 0.0]]))
    with pytest.raises(ValueError):
        index.insert(np.zeros((3, 3)))
