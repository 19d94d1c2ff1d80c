# evenstream/fields/base.py
"""
Base protocols and utilities for 2-D vector fields.

Defines the VectorField protocol consumed by the tracer and the placement
engine, the bilinear sampler, and shape helpers shared across the package.
"""

from __future__ import annotations
from typing import Protocol, Tuple
import numpy as np


class VectorField(Protocol):
    """
    Protocol for steady 2-D vector fields.

    Implementations sample velocities at physical points and expose a
    fractional grid-index space in which streamlines are integrated.
    """

    def sample(self, points: np.ndarray) -> np.ndarray:
        """
        Sample the field at points.

        Parameters
        ----------
        points : np.ndarray
            Physical positions, shape (N, 2)

        Returns
        -------
        np.ndarray
            Velocities, shape (N, 2); NaN where the field is undefined
        """
        ...

    def get_spatial_bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        """Return (bounds_min, bounds_max), each shape (2,)."""
        ...

    def to_index(self, points: np.ndarray) -> np.ndarray:
        """Physical (N, 2) -> fractional grid index (N, 2); NaN outside."""
        ...

    def to_physical(self, indices: np.ndarray) -> np.ndarray:
        """Fractional grid index (N, 2) -> physical (N, 2)."""
        ...

    def index_velocity_grids(self) -> Tuple[np.ndarray, np.ndarray]:
        """Velocity components in index units, each shape (Ny, Nx)."""
        ...


def _ensure_points_shape(points) -> np.ndarray:
    """
    Ensure points have shape (N, 2) with float64 dtype.

    A single point of shape (2,) becomes (1, 2).
    """
    pts = np.asarray(points, dtype=np.float64)
    if pts.ndim == 1:
        pts = pts.reshape(1, -1)
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError(f"Points must have shape (N, 2), got {np.shape(points)}")
    return pts


# Index-space slack for points that land on the grid edge up to rounding
EDGE_TOL = 1e-4


def bilinear_sample(xp, grid, fi, fj):
    """
    Bilinear interpolation of a (Ny, Nx) grid at fractional indices.

    Works with either ``numpy`` or ``jax.numpy`` passed as ``xp``.
    ``fi`` runs along axis 1 (x) and ``fj`` along axis 0 (y). Queries
    within ``EDGE_TOL`` of [0, Nx-1] x [0, Ny-1] are clamped onto it;
    queries further out return NaN. Corners with zero weight do not
    contribute, so a query on a defined node or along a defined cell edge
    stays defined next to NaN nodes.
    """
    ny, nx = grid.shape
    inside = (
        (fi >= -EDGE_TOL) & (fi <= nx - 1 + EDGE_TOL)
        & (fj >= -EDGE_TOL) & (fj <= ny - 1 + EDGE_TOL)
    )
    fi_c = xp.clip(xp.where(inside, fi, 0.0), 0, nx - 1)
    fj_c = xp.clip(xp.where(inside, fj, 0.0), 0, ny - 1)

    i0 = xp.clip(xp.floor(fi_c).astype(xp.int32), 0, nx - 2)
    j0 = xp.clip(xp.floor(fj_c).astype(xp.int32), 0, ny - 2)
    wx = fi_c - i0
    wy = fj_c - j0

    val = 0.0
    for w, g in (
        ((1.0 - wx) * (1.0 - wy), grid[j0, i0]),
        (wx * (1.0 - wy), grid[j0, i0 + 1]),
        ((1.0 - wx) * wy, grid[j0 + 1, i0]),
        (wx * wy, grid[j0 + 1, i0 + 1]),
    ):
        val = val + xp.where(w == 0, 0.0, w * g)
    return xp.where(inside, val, xp.nan)
