# evenstream/integrators/base.py

from __future__ import annotations
from typing import Callable, Dict, Protocol, Union

import jax.numpy as jnp

# Allow time to be a Python float or a JAX scalar (0-D array)
FloatScalar = Union[float, jnp.ndarray]

# Field function signature: takes positions and time, returns velocities
FieldFn = Callable[[jnp.ndarray, FloatScalar], jnp.ndarray]
"""
Field function protocol.

Parameters
----------
positions : jnp.ndarray
    Positions, shape (N, 2)
time : float or jnp scalar
    Current time (ignored by steady fields)

Returns
-------
jnp.ndarray
    Velocity vectors at positions, shape (N, 2); NaN where undefined
"""


class IntegratorFn(Protocol):
    """
    Protocol for integrator step functions.

    All integrators implement this signature so the streamline tracer can
    select one by name.
    """

    def __call__(
        self,
        x: jnp.ndarray,
        t: FloatScalar,
        dt: FloatScalar,
        field_fn: FieldFn
    ) -> jnp.ndarray:
        """
        Advance positions by one step.

        Parameters
        ----------
        x : jnp.ndarray
            Current positions, shape (N, 2)
        t : float
            Current time
        dt : float
            Step size
        field_fn : FieldFn
            Function that computes velocity at (positions, time)

        Returns
        -------
        jnp.ndarray
            New positions after the step, shape (N, 2)
        """
        ...


def _ensure_positions(x: jnp.ndarray) -> jnp.ndarray:
    """Ensure positions are a 2-D (N, D) array; a single point becomes (1, D)."""
    x = jnp.asarray(x)
    if x.ndim == 1:
        x = x.reshape(1, -1)
    elif x.ndim != 2:
        raise ValueError(f"Positions must have shape (N,D), got {x.shape}")
    return x


IntegratorRegistry = Dict[str, IntegratorFn]
"""Registry mapping integrator names to functions."""
