# evenstream/integrators/rk4.py

from __future__ import annotations

import jax
import jax.numpy as jnp

from .base import FieldFn, FloatScalar, _ensure_positions


@jax.jit
def _rk4_combine(
    x: jnp.ndarray,
    dt: jnp.ndarray,
    k1: jnp.ndarray,
    k2: jnp.ndarray,
    k3: jnp.ndarray,
    k4: jnp.ndarray,
) -> jnp.ndarray:
    return x + dt / 6.0 * (k1 + 2.0 * k2 + 2.0 * k3 + k4)


def rk4_step(
    x: jnp.ndarray,
    t: FloatScalar,
    dt: FloatScalar,
    field_fn: FieldFn,
) -> jnp.ndarray:
    """
    Runge-Kutta 4 integrator.

    Parameters
    ----------
    x : (N, 2) positions
    t : scalar time (Python float or JAX 0-D array)
    dt : scalar step size
    field_fn : callable(positions, time) -> velocities, JAX-compatible

    Returns
    -------
    x_next : (N, 2) next positions
    """
    x = _ensure_positions(x)
    dt_half = 0.5 * dt
    t_half = t + dt_half

    k1 = field_fn(x, t)
    k2 = field_fn(x + dt_half * k1, t_half)
    k3 = field_fn(x + dt_half * k2, t_half)
    k4 = field_fn(x + dt * k3, t + dt)

    return _rk4_combine(x, jnp.asarray(dt, dtype=x.dtype), k1, k2, k3, k4)
