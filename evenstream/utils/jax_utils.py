# evenstream/utils/jax_utils.py
from __future__ import annotations
from typing import Any

import jax
import jax.numpy as jnp
import numpy as np


def float_dtype():
    """
    Floating dtype used by the jitted tracer.

    float64 only when requested by the package config *and* x64 is enabled,
    otherwise float32.
    """
    from .config import get_config

    if get_config().dtype == "float64" and jax.dtypes.canonicalize_dtype(jnp.float64) == jnp.float64:
        return jnp.float64
    return jnp.float32

def to_device(x: Any, dtype: Any = None):
    """Place an array-like on the default JAX device."""
    return jax.device_put(jnp.asarray(x, dtype=dtype))

def to_numpy(x: Any, dtype: Any = None) -> np.ndarray:
    """Convert JAX/NumPy arrays to NumPy."""
    return np.asarray(x, dtype=dtype)
