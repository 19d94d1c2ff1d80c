# evenstream/density/neighbors.py
"""
Dynamic nearest-neighbour index over streamline points.

Points are grouped in batches, one per accepted streamline, so a whole line
can be taken out of the index while its own distances are measured and then
put back. The placement loop depends only on the :class:`NeighborIndex`
protocol; :class:`KDTreeNeighbors` is the default implementation.
"""

from __future__ import annotations
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Protocol
import numpy as np
from scipy.spatial import cKDTree

from ..fields.base import _ensure_points_shape


class NeighborIndex(Protocol):
    """Capability interface for the streamline point index."""

    def insert(self, points: np.ndarray) -> int:
        """Add a batch of points; return its batch id."""
        ...

    def remove(self, batch_id: int) -> np.ndarray:
        """Remove a batch; return its points."""
        ...

    def restore(self, batch_id: int, points: np.ndarray) -> None:
        """Reinsert a removed batch under its original id."""
        ...

    def excluding(self, batch_id: int):
        """Context manager: batch removed inside, restored on exit."""
        ...

    def nearest_distance(self, points: np.ndarray) -> np.ndarray:
        """Distance from each query point to the closest indexed point."""
        ...

    def __len__(self) -> int:
        ...


@dataclass
class KDTreeNeighbors:
    """
    Batch-keyed point index backed by ``scipy.spatial.cKDTree``.

    The tree is rebuilt lazily on the first query after any insert, remove
    or restore. KD-trees do not require points in general position, so
    collinear or duplicated streamline points are fine.

    Attributes
    ----------
    leafsize : int
        Leaf size handed to cKDTree
    """
    leafsize: int = 16

    _batches: Dict[int, np.ndarray] = field(default_factory=dict, init=False, repr=False)
    _next_id: int = field(default=0, init=False, repr=False)
    _tree: Optional[cKDTree] = field(default=None, init=False, repr=False)
    _dirty: bool = field(default=True, init=False, repr=False)

    def insert(self, points: np.ndarray) -> int:
        pts = _ensure_points_shape(points)
        if not np.all(np.isfinite(pts)):
            raise ValueError("Indexed points must be finite")
        batch_id = self._next_id
        self._next_id += 1
        self._batches[batch_id] = pts.copy()
        self._dirty = True
        return batch_id

    def remove(self, batch_id: int) -> np.ndarray:
        try:
            pts = self._batches.pop(batch_id)
        except KeyError:
            raise KeyError(f"Unknown batch id: {batch_id}") from None
        self._dirty = True
        return pts

    def restore(self, batch_id: int, points: np.ndarray) -> None:
        if batch_id in self._batches:
            raise ValueError(f"Batch {batch_id} is already in the index")
        if not 0 <= batch_id < self._next_id:
            raise KeyError(f"Batch id {batch_id} was never issued by this index")
        self._batches[batch_id] = _ensure_points_shape(points).copy()
        self._dirty = True

    @contextmanager
    def excluding(self, batch_id: int) -> Iterator[np.ndarray]:
        """
        Temporarily take one batch out of the index.

        Yields the batch's points. The batch is restored on exit, also when
        the body raises, so the index always returns to its prior contents.
        """
        pts = self.remove(batch_id)
        try:
            yield pts
        finally:
            self.restore(batch_id, pts)

    def nearest_distance(self, points: np.ndarray) -> np.ndarray:
        """
        Euclidean distance from each query point to its nearest indexed point.

        Returns ``inf`` for every query when the index is empty.
        """
        q = _ensure_points_shape(points)
        tree = self._get_tree()
        if tree is None:
            return np.full(q.shape[0], np.inf)
        d, _ = tree.query(q, k=1)
        return np.asarray(d, dtype=np.float64).reshape(q.shape[0])

    def _get_tree(self) -> Optional[cKDTree]:
        if self._dirty:
            pts = self.points
            self._tree = cKDTree(pts, leafsize=self.leafsize) if pts.shape[0] else None
            self._dirty = False
        return self._tree

    @property
    def points(self) -> np.ndarray:
        """All indexed points, shape (N, 2)."""
        if not self._batches:
            return np.empty((0, 2), dtype=np.float64)
        return np.concatenate(list(self._batches.values()), axis=0)

    def batch_ids(self) -> List[int]:
        return list(self._batches)

    def __contains__(self, batch_id: int) -> bool:
        return batch_id in self._batches

    def __len__(self) -> int:
        return sum(b.shape[0] for b in self._batches.values())
