# evenstream/integrators/rk2.py
"""
Second-order Runge-Kutta (midpoint) integration.
"""

from __future__ import annotations

import jax.numpy as jnp

from .base import FieldFn, FloatScalar, _ensure_positions


def rk2_step(
    x: jnp.ndarray,
    t: FloatScalar,
    dt: FloatScalar,
    field_fn: FieldFn,
) -> jnp.ndarray:
    """
    Midpoint RK2 step.

    Parameters
    ----------
    x : (N, 2) positions
    t : scalar time
    dt : scalar step size
    field_fn : callable(positions, time) -> velocities, JAX-compatible

    Returns
    -------
    x_next : (N, 2) next positions
    """
    x = _ensure_positions(x)
    v1 = field_fn(x, t)
    v2 = field_fn(x + 0.5 * dt * v1, t + 0.5 * dt)
    return x + dt * v2
