"""
Tests for the fixed-step integrators.
"""

import jax.numpy as jnp
import numpy as np
import pytest
from numpy.testing import assert_allclose

from evenstream.integrators import INTEGRATORS, euler_step, get_integrator, rk2_step, rk4_step


def rotation(x, t):
    return jnp.stack([-x[:, 1], x[:, 0]], axis=1)


def test_registry_lookup():
    assert get_integrator("RK4") is rk4_step
    assert set(INTEGRATORS) == {"euler", "rk2", "rk4"}
    with pytest.raises(ValueError, match="Available"):
        get_integrator("leapfrog")


def test_constant_field_all_exact():
    const = lambda x, t: jnp.ones_like(x) * jnp.array([1.0, 2.0])
    x0 = jnp.array([[0.0, 0.0], [1.0, 1.0]])
    for step in (euler_step, rk2_step, rk4_step):
        assert_allclose(np.asarray(step(x0, 0.0, 0.5, const)), [[0.5, 1.0], [1.5, 2.0]], atol=1e-6)


def test_single_point_promoted():
    out = euler_step(jnp.array([1.0, 0.0]), 0.0, 0.1, rotation)
    assert out.shape == (1, 2)


def test_order_of_accuracy_on_rotation():
    """Error after a quarter turn shrinks with method order."""
    n = 20
    dt = (np.pi / 2) / n
    errors = {}
    for name in ("euler", "rk2", "rk4"):
        step = get_integrator(name)
        x = jnp.array([[1.0, 0.0]])
        for _ in range(n):
            x = step(x, 0.0, dt, rotation)
        errors[name] = float(np.linalg.norm(np.asarray(x)[0] - [0.0, 1.0]))
    assert errors["rk4"] < errors["rk2"] < errors["euler"]
    assert errors["rk4"] < 1e-5
