# evenstream/tracking/seeding.py
"""
Seed point generation for streamline placement.

- ``seed_candidates``: points offset perpendicular to an accepted line,
  the candidate starts for neighbouring streamlines
- ``random_field_seed``: a uniformly random point of the domain where the
  field is defined, used for the very first line
"""

from __future__ import annotations
from typing import Optional
import numpy as np

from ..fields.base import VectorField, _ensure_points_shape
from ..utils.random import KeyLike, rng_key, uniform
from ..utils.spatial import AABB


def seed_candidates(points: np.ndarray, buffer: float) -> np.ndarray:
    """
    Candidate seeds at distance ``buffer`` along each segment's normal.

    Parameters
    ----------
    points : array-like, shape (N, 2)
        One streamline
    buffer : float
        Offset distance from the segment midpoints

    Returns
    -------
    np.ndarray
        Shape (2*M, 2) where M is the number of non-degenerate segments:
        all ``+buffer`` offsets followed by all ``-buffer`` offsets.
        Zero-length segments are skipped.
    """
    xy = _ensure_points_shape(points)
    if xy.shape[0] < 2:
        return np.empty((0, 2), dtype=np.float64)

    tangent = np.diff(xy, axis=0)
    length = np.hypot(tangent[:, 0], tangent[:, 1])
    keep = length > 0
    tangent = tangent[keep]
    length = length[keep]
    midpoint = xy[:-1][keep] + 0.5 * tangent

    normal = np.stack([tangent[:, 1], -tangent[:, 0]], axis=1) / length[:, None]
    return np.concatenate([midpoint + buffer * normal, midpoint - buffer * normal], axis=0)


def random_field_seed(
    field: VectorField,
    key: KeyLike = None,
    max_tries: Optional[int] = None,
) -> np.ndarray:
    """
    Uniformly random point of the field's bounding box with a defined velocity.

    Points where either interpolated component is NaN are resampled. With
    ``max_tries=None`` sampling continues until a point is found.

    Returns
    -------
    np.ndarray
        Seed point, shape (2,)
    """
    gen = rng_key(key)
    box = AABB(*field.get_spatial_bounds())
    tries = 0
    while max_tries is None or tries < max_tries:
        tries += 1
        seed = uniform(gen, (2,), box.lo, box.hi)
        if np.all(np.isfinite(field.sample(seed))):
            return seed
    raise RuntimeError(f"No point with a defined velocity found in {max_tries} tries")
