# evenstream/utils/random.py
"""
Random number generation utilities.

Every randomised step of streamline placement draws from an explicit
``numpy.random.Generator`` so that runs are reproducible from a seed.
"""

from __future__ import annotations
from typing import Sequence, Union
import numpy as np

KeyLike = Union[None, int, np.random.Generator]
Shape = Union[int, Sequence[int]]


def rng_key(seed: KeyLike = None) -> np.random.Generator:
    """
    Create a random generator from a seed.

    Parameters
    ----------
    seed : None, int or np.random.Generator
        ``None`` draws fresh OS entropy; an existing Generator is returned
        unchanged so callers can share one stream.

    Returns
    -------
    np.random.Generator
    """
    if isinstance(seed, np.random.Generator):
        return seed
    if seed is None:
        return np.random.Generator(np.random.PCG64())
    return np.random.Generator(np.random.PCG64(int(seed)))


def uniform(
    key: KeyLike,
    shape: Shape = (),
    minval: Union[float, np.ndarray] = 0.0,
    maxval: Union[float, np.ndarray] = 1.0,
) -> np.ndarray:
    """
    Sample from a uniform distribution on [minval, maxval).

    ``minval``/``maxval`` broadcast against ``shape``, so per-axis bounds
    such as an AABB's corners can be passed directly.
    """
    gen = rng_key(key)
    shape_tuple = (shape,) if isinstance(shape, int) else tuple(shape)
    return gen.uniform(minval, maxval, size=shape_tuple)


def permutation(key: KeyLike, n: int) -> np.ndarray:
    """Random permutation of ``range(n)``."""
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    return rng_key(key).permutation(int(n))


__all__ = ["rng_key", "uniform", "permutation", "KeyLike", "Shape"]
