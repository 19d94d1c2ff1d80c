# evenstream/tracking/streamline.py
"""
Streamline growth and trimming.

The tracer integrates the normalised velocity in grid-index space, so every
step advances a fixed fraction of a grid cell whatever the physical spacing.
A whole one-directional trace runs as a single jitted ``lax.while_loop``;
it ends when the field becomes undefined, the flow stalls, the next point
leaves the grid, or ``max_steps`` is reached.

Growing and trimming are pure functions over :class:`SeededLine`, a polyline
paired with the position of its seed point.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
import numpy as np

import jax
import jax.numpy as jnp

from ..fields.base import EDGE_TOL, VectorField, bilinear_sample, _ensure_points_shape
from ..integrators import get_integrator
from ..utils.jax_utils import float_dtype, to_device, to_numpy

# Index-space speed below which the flow counts as stalled
STALL_SPEED = 1e-10


@dataclass(frozen=True)
class SeededLine:
    """
    Polyline plus the 0-based index of the point it was grown from.

    Attributes
    ----------
    points : np.ndarray
        Physical points, shape (N, 2)
    seed_index : int
        Position of the seed within ``points``
    """
    points: np.ndarray
    seed_index: int = 0

    def __len__(self) -> int:
        return int(self.points.shape[0])

    @property
    def is_valid(self) -> bool:
        """A line needs at least two points to be drawn or seeded from."""
        return len(self) >= 2

    @classmethod
    def empty(cls) -> "SeededLine":
        return cls(np.empty((0, 2), dtype=np.float64), 0)


# ------------------------- Jitted tracer -------------------------

@partial(jax.jit, static_argnames=("n_steps", "method"))
def _trace_index_space(ugrid, vgrid, start, sign, step, n_steps, method):
    """
    Trace one direction in index space.

    Returns an (n_steps + 1, 2) buffer whose rows after the end of the
    trace are NaN. Row 0 is the start point when it is traceable.
    """
    stepper = get_integrator(method)
    ny, nx = ugrid.shape
    upper = jnp.array([nx - 1, ny - 1], dtype=start.dtype)

    def velocity(p, t):
        u = bilinear_sample(jnp, ugrid, p[:, 0], p[:, 1])
        v = bilinear_sample(jnp, vgrid, p[:, 0], p[:, 1])
        vel = sign * jnp.stack([u, v], axis=1)
        speed = jnp.sqrt(jnp.sum(vel * vel, axis=1, keepdims=True))
        return jnp.where(speed > STALL_SPEED, vel / speed, jnp.nan)

    def inside(p):
        return jnp.all(jnp.isfinite(p)) & jnp.all(p >= -EDGE_TOL) & jnp.all(p <= upper + EDGE_TOL)

    def cond(state):
        k, _, alive, _ = state
        return alive & (k < n_steps)

    def body(state):
        k, p, _, buf = state
        p_next = stepper(p, 0.0, step, velocity)
        ok = inside(p_next)
        p_next = jnp.clip(p_next, 0, upper)
        buf = buf.at[k + 1].set(jnp.where(ok, p_next[0], jnp.nan))
        return k + 1, jnp.where(ok, p_next, p), ok, buf

    p0 = start.reshape(1, 2)
    alive0 = inside(p0) & jnp.all(jnp.isfinite(velocity(p0, 0.0)))
    buf0 = jnp.full((n_steps + 1, 2), jnp.nan, dtype=start.dtype)
    buf0 = buf0.at[0].set(jnp.where(alive0, p0[0], jnp.nan))

    _, _, _, buf = jax.lax.while_loop(cond, body, (jnp.int32(0), p0, alive0, buf0))
    return buf


def _leading_valid(path: np.ndarray) -> np.ndarray:
    """Truncate a trace at its first NaN row."""
    valid = np.all(np.isfinite(path), axis=1)
    n = path.shape[0] if valid.all() else int(np.argmin(valid))
    return path[:n]


@dataclass
class StreamlineTracer:
    """
    Fixed-step streamline integrator bound to one field.

    Attributes
    ----------
    field : VectorField
        Field to integrate
    step_size : float
        Step length as a fraction of a grid cell
    max_steps : int
        Upper bound on steps per direction
    integrator : str
        'euler' | 'rk2' | 'rk4'
    """
    field: VectorField
    step_size: float = 0.1
    max_steps: int = 10_000
    integrator: str = "rk4"

    def __post_init__(self):
        if not (np.isfinite(self.step_size) and self.step_size > 0):
            raise ValueError(f"step_size must be positive and finite, got {self.step_size}")
        if int(self.max_steps) < 1:
            raise ValueError(f"max_steps must be >= 1, got {self.max_steps}")
        get_integrator(self.integrator)
        self.integrator = self.integrator.lower()
        self.max_steps = int(self.max_steps)

        self._dtype = float_dtype()
        ui, vj = self.field.index_velocity_grids()
        self._ugrid = to_device(ui, self._dtype)
        self._vgrid = to_device(vj, self._dtype)
        self._step = jnp.asarray(self.step_size, dtype=self._dtype)

    def trace(self, seed: np.ndarray, direction: int = 1) -> np.ndarray:
        """
        Integrate from ``seed`` in one direction.

        Parameters
        ----------
        seed : array-like, shape (2,)
            Physical start point
        direction : int
            +1 follows the field, -1 follows the negated field

        Returns
        -------
        np.ndarray
            Physical points, shape (N, 2), starting at the seed; empty when
            the seed is outside the grid or on an undefined/stalled sample.
        """
        if direction not in (1, -1):
            raise ValueError(f"direction must be +1 or -1, got {direction}")
        start = self.field.to_index(seed)[0]
        if not np.all(np.isfinite(start)):
            return np.empty((0, 2), dtype=np.float64)

        buf = _trace_index_space(
            self._ugrid,
            self._vgrid,
            jnp.asarray(start, dtype=self._dtype),
            jnp.asarray(direction, dtype=self._dtype),
            self._step,
            n_steps=self.max_steps,
            method=self.integrator,
        )
        path = _leading_valid(to_numpy(buf, dtype=np.float64))
        if path.shape[0] == 0:
            return np.empty((0, 2), dtype=np.float64)
        return self.field.to_physical(path)

    def grow(self, seed: np.ndarray) -> SeededLine:
        """Grow a streamline from ``seed`` in both directions."""
        forward = self.trace(seed, 1)
        backward = self.trace(seed, -1)
        return splice_branches(forward, backward)


# ------------------------- Pure line operations -------------------------

def splice_branches(forward: np.ndarray, backward: np.ndarray) -> SeededLine:
    """
    Join forward and backward traces that share the seed as their first row.

    A branch with fewer than two points is invalid. With both valid, the
    reversed backward branch (minus its copy of the seed) is prepended to
    the forward branch. With one valid, that branch is used alone.
    """
    forward = np.asarray(forward, dtype=np.float64).reshape(-1, 2)
    backward = np.asarray(backward, dtype=np.float64).reshape(-1, 2)
    has_fwd = forward.shape[0] > 1
    has_bwd = backward.shape[0] > 1

    if has_fwd and has_bwd:
        head = backward[:0:-1]
        return SeededLine(np.concatenate([head, forward], axis=0), head.shape[0])
    if has_bwd:
        return SeededLine(backward, 0)
    if has_fwd:
        return SeededLine(forward, 0)
    return SeededLine.empty()


def trim_streamline(line: SeededLine, distances: np.ndarray, d_test: float) -> SeededLine:
    """
    Cut a grown line back to where it keeps ``d_test`` from other lines.

    Walking outward from the seed in each direction, the first point whose
    distance is below ``d_test`` becomes the boundary; the boundary points
    are kept. Without such a point the line end is the boundary.

    Parameters
    ----------
    line : SeededLine
    distances : array-like, shape (N,)
        Nearest-neighbour distance of every point against committed lines
    d_test : float

    Returns
    -------
    SeededLine
        The inclusive sub-line, seed index rebased.
    """
    n = len(line)
    if n == 0:
        return line
    d = np.asarray(distances, dtype=np.float64)
    if d.shape != (n,):
        raise ValueError(f"distances shape {d.shape} doesn't match line length {n}")

    s = line.seed_index
    close_fwd = np.flatnonzero(d[s:] < d_test)
    stop = s + int(close_fwd[0]) if close_fwd.size else n - 1
    close_bwd = np.flatnonzero(d[s::-1] < d_test)
    start = s - int(close_bwd[0]) if close_bwd.size else 0

    return SeededLine(line.points[start:stop + 1], s - start)


# ------------------------- Functional wrappers -------------------------

def trace_streamline(
    field: VectorField,
    seed: np.ndarray,
    step_size: float = 0.1,
    direction: int = 1,
    max_steps: int = 10_000,
    integrator: str = "rk4",
) -> np.ndarray:
    """One-directional trace; see :meth:`StreamlineTracer.trace`."""
    tracer = StreamlineTracer(field, step_size, max_steps, integrator)
    return tracer.trace(_ensure_points_shape(seed)[0], direction)


def grow_streamline(
    field: VectorField,
    seed: np.ndarray,
    step_size: float = 0.1,
    max_steps: int = 10_000,
    integrator: str = "rk4",
) -> SeededLine:
    """Bidirectional growth; see :meth:`StreamlineTracer.grow`."""
    tracer = StreamlineTracer(field, step_size, max_steps, integrator)
    return tracer.grow(_ensure_points_shape(seed)[0])
