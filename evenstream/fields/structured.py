# evenstream/fields/structured.py
"""
Rectilinear 2-D grid velocity fields with bilinear sampling.

Grids follow ``numpy.meshgrid`` conventions. Both 'xy' indexing (x varies
along axis 1) and 'ij' indexing (x varies along axis 0) are accepted; the
latter is transposed on construction. Decreasing axes are flipped so the
stored coordinate vectors always increase. Spacing may be non-uniform.

Undefined regions are expressed as NaN velocity samples; sampling near them,
or outside the grid, yields NaN.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Tuple
import numpy as np

from ..utils.spatial import AABB
from .base import _ensure_points_shape, bilinear_sample


def _rectilinear_axes(xx: np.ndarray, yy: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Extract 1-D axis vectors, validating that the grids are rectilinear."""
    x = xx[0, :]
    y = yy[:, 0]
    if not (np.allclose(xx, x[None, :]) and np.allclose(yy, y[:, None])):
        raise ValueError("Coordinate grids must be rectilinear (meshgrid-style)")
    return x, y


def _check_monotonic(axis: np.ndarray, name: str) -> int:
    """Return +1/-1 for strictly increasing/decreasing axes, raise otherwise."""
    d = np.diff(axis)
    if np.all(d > 0):
        return 1
    if np.all(d < 0):
        return -1
    raise ValueError(f"{name} coordinates must be strictly monotonic")


@dataclass
class StructuredGridField2D:
    """
    Steady 2-D vector field on a rectilinear grid.

    Attributes
    ----------
    xx, yy : np.ndarray
        Sample coordinates, shape (Ny, Nx) after normalisation
    uu, vv : np.ndarray
        Velocity components at the samples, shape (Ny, Nx)
    x, y : np.ndarray
        Increasing axis vectors, shapes (Nx,) and (Ny,)
    bounds : AABB
        Domain rectangle
    """
    xx: np.ndarray
    yy: np.ndarray
    uu: np.ndarray
    vv: np.ndarray

    def __post_init__(self):
        xx = np.asarray(self.xx, dtype=np.float64)
        yy = np.asarray(self.yy, dtype=np.float64)
        uu = np.asarray(self.uu, dtype=np.float64)
        vv = np.asarray(self.vv, dtype=np.float64)

        if xx.ndim != 2:
            raise ValueError(f"Coordinate grids must be 2D, got {xx.ndim}D")
        for name, arr in (("yy", yy), ("uu", uu), ("vv", vv)):
            if arr.shape != xx.shape:
                raise ValueError(f"{name} shape {arr.shape} doesn't match xx shape {xx.shape}")
        if min(xx.shape) < 2:
            raise ValueError(f"Grid must have at least 2 samples per axis, got {xx.shape}")
        if not (np.all(np.isfinite(xx)) and np.all(np.isfinite(yy))):
            raise ValueError("Coordinate grids must be finite")

        # 'ij' indexing: x varies along axis 0
        if np.ptp(xx[0, :]) == 0 and np.ptp(xx[:, 0]) > 0:
            xx, yy, uu, vv = xx.T, yy.T, uu.T, vv.T

        x, y = _rectilinear_axes(xx, yy)
        if _check_monotonic(x, "x") < 0:
            xx, yy, uu, vv, x = xx[:, ::-1], yy[:, ::-1], uu[:, ::-1], vv[:, ::-1], x[::-1]
        if _check_monotonic(y, "y") < 0:
            xx, yy, uu, vv, y = xx[::-1], yy[::-1], uu[::-1], vv[::-1], y[::-1]

        if not np.any(np.isfinite(uu) & np.isfinite(vv)):
            raise ValueError("Velocity field has no defined (non-NaN) samples")

        self.xx = np.ascontiguousarray(xx)
        self.yy = np.ascontiguousarray(yy)
        self.uu = np.ascontiguousarray(uu)
        self.vv = np.ascontiguousarray(vv)
        self.x = np.ascontiguousarray(x)
        self.y = np.ascontiguousarray(y)
        self.Ny, self.Nx = self.uu.shape

        self.bounds = AABB([self.x[0], self.y[0]], [self.x[-1], self.y[-1]])

    # ------------------------- Public API -------------------------

    def get_spatial_bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        """Return (bounds_min, bounds_max) of the domain."""
        return self.bounds.lo.copy(), self.bounds.hi.copy()

    def to_index(self, points: np.ndarray) -> np.ndarray:
        """
        Map physical points to fractional grid indices.

        Parameters
        ----------
        points : array-like, shape (N, 2) or (2,)

        Returns
        -------
        np.ndarray
            Indices (i, j), shape (N, 2); NaN for points outside the grid.
        """
        pts = _ensure_points_shape(points)
        fi = np.interp(pts[:, 0], self.x, np.arange(self.Nx, dtype=float), left=np.nan, right=np.nan)
        fj = np.interp(pts[:, 1], self.y, np.arange(self.Ny, dtype=float), left=np.nan, right=np.nan)
        return np.stack([fi, fj], axis=1)

    def to_physical(self, indices: np.ndarray) -> np.ndarray:
        """Map fractional grid indices (N, 2) back to physical points."""
        idx = _ensure_points_shape(indices)
        px = np.interp(idx[:, 0], np.arange(self.Nx, dtype=float), self.x)
        py = np.interp(idx[:, 1], np.arange(self.Ny, dtype=float), self.y)
        return np.stack([px, py], axis=1)

    def sample(self, points: np.ndarray) -> np.ndarray:
        """
        Sample the velocity field at physical points.

        Returns
        -------
        np.ndarray
            Velocities, shape (N, 2); NaN outside the domain or where a
            surrounding node is undefined.
        """
        idx = self.to_index(points)
        u = bilinear_sample(np, self.uu, idx[:, 0], idx[:, 1])
        v = bilinear_sample(np, self.vv, idx[:, 0], idx[:, 1])
        return np.stack([u, v], axis=1)

    def index_velocity_grids(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Velocity expressed in grid-index units.

        Each component is divided by the local node spacing, so that a unit
        step in index space corresponds to one cell regardless of the
        physical spacing.
        """
        dxdi = np.gradient(self.x)
        dydj = np.gradient(self.y)
        return self.uu / dxdi[None, :], self.vv / dydj[:, None]


# ------------------------- Factory functions -------------------------

def create_uniform_grid(
    bounds: Tuple[Tuple[float, float], Tuple[float, float]],
    shape: Tuple[int, int],
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Create 'xy'-indexed coordinate grids.

    Parameters
    ----------
    bounds : ((xmin, ymin), (xmax, ymax))
    shape : (Ny, Nx)

    Returns
    -------
    (xx, yy), each shape (Ny, Nx)
    """
    (x0, y0), (x1, y1) = bounds
    ny, nx = shape
    x = np.linspace(x0, x1, nx)
    y = np.linspace(y0, y1, ny)
    return np.meshgrid(x, y)


def create_structured_field_from_function(
    x: np.ndarray,
    y: np.ndarray,
    velocity_fn: Callable[[np.ndarray, np.ndarray], Tuple[np.ndarray, np.ndarray]],
) -> StructuredGridField2D:
    """
    Build a field by evaluating ``velocity_fn(xx, yy) -> (uu, vv)`` on the
    tensor grid of the axis vectors ``x`` and ``y``.
    """
    xx, yy = np.meshgrid(np.asarray(x, dtype=float), np.asarray(y, dtype=float))
    uu, vv = velocity_fn(xx, yy)
    uu = np.broadcast_to(np.asarray(uu, dtype=float), xx.shape)
    vv = np.broadcast_to(np.asarray(vv, dtype=float), xx.shape)
    return StructuredGridField2D(xx, yy, uu, vv)
