# evenstream/utils/config.py
"""
Global package configuration.

Holds package-wide defaults only: numeric precision of the jitted tracer and
the default verbosity. Per-run constants (separation distances, step size)
are passed explicitly through ``tracking.placement.PlacementOptions``.
"""

from __future__ import annotations
from dataclasses import dataclass, fields, replace
import warnings

import jax

_DTYPES = ("float32", "float64")


@dataclass
class PackageConfig:
    """
    Global configuration for evenstream.

    Attributes
    ----------
    dtype : str
        'float32' | 'float64'; precision of the jitted streamline tracer.
    verbose : bool
        Default verbosity for new placement runs.
    """
    dtype: str = "float32"
    verbose: bool = False

    def __post_init__(self):
        self._validate_config()
        self._apply_jax_config()

    def _validate_config(self):
        if self.dtype not in _DTYPES:
            raise ValueError(f"dtype must be one of {_DTYPES}, got {self.dtype!r}")
        if not isinstance(self.verbose, bool):
            raise ValueError(f"verbose must be a bool, got {type(self.verbose).__name__}")

    def _apply_jax_config(self):
        # x64 stays enabled once set
        if self.dtype == "float64":
            jax.config.update("jax_enable_x64", True)


_global_config = PackageConfig()


def get_config() -> PackageConfig:
    """Get global package configuration."""
    return _global_config


def configure(**kwargs) -> None:
    """
    Update package settings.

    Unknown names are ignored with a warning. Invalid values raise
    ``ValueError`` and leave the current configuration untouched.

    Example
    -------
    >>> configure(dtype="float64", verbose=True)
    """
    global _global_config
    known = {f.name for f in fields(PackageConfig)}
    updates = {}
    for key, value in kwargs.items():
        if key in known:
            updates[key] = value
        else:
            warnings.warn(f"Unknown configuration parameter: {key}")
    _global_config = replace(_global_config, **updates)


def reset_config() -> None:
    """Reset configuration to defaults."""
    global _global_config
    _global_config = PackageConfig()
