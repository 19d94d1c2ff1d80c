# evenstream/utils/__init__.py
"""
Utilities for evenstream.

Contains:
- config: package-wide settings (precision, default verbosity)
- jax_utils: JAX dtype and transfer helpers
- spatial: axis-aligned bounding boxes
- logging: timers, memory monitoring, progress messages
- random: seeded NumPy generators for reproducible placement
"""

from .config import PackageConfig, configure, get_config, reset_config

from .jax_utils import (
    float_dtype,
    to_device,
    to_numpy,
)

from .spatial import AABB

from .logging import (
    Timer,
    memory_info,
    create_progress_callback,
    ProgressCallback,
)

from .random import (
    rng_key,
    uniform,
    permutation,
    KeyLike,
    Shape,
)

__all__ = [
    # config
    "PackageConfig",
    "configure",
    "get_config",
    "reset_config",
    # jax_utils
    "float_dtype",
    "to_device",
    "to_numpy",
    # spatial
    "AABB",
    # logging
    "Timer",
    "memory_info",
    "create_progress_callback",
    "ProgressCallback",
    # random
    "rng_key",
    "uniform",
    "permutation",
    "KeyLike",
    "Shape",
]
