# evenstream/integrators/euler.py
"""
Forward Euler integration.
"""

from __future__ import annotations

import jax.numpy as jnp

from .base import FieldFn, FloatScalar, _ensure_positions


def euler_step(
    x: jnp.ndarray,
    t: FloatScalar,
    dt: FloatScalar,
    field_fn: FieldFn,
) -> jnp.ndarray:
    """
    Forward Euler integration step: x_{n+1} = x_n + dt * v(x_n, t_n).

    Parameters
    ----------
    x : jnp.ndarray
        Current positions, shape (N, 2)
    t : float
        Current time
    dt : float
        Step size
    field_fn : FieldFn
        Velocity function returning shape (N, 2)

    Returns
    -------
    jnp.ndarray
        Updated positions, shape (N, 2)
    """
    x = _ensure_positions(x)
    v = field_fn(x, t)
    return x + dt * v
