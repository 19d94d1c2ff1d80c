# evenstream/utils/spatial.py
from __future__ import annotations
from dataclasses import dataclass
import numpy as np

Array = np.ndarray


@dataclass(frozen=True)
class AABB:
    """
    Axis-aligned rectangle.

    Corners are normalised on construction so that ``lo <= hi`` per axis.

    Attributes
    ----------
    lo : (2,) lower-left corner
    hi : (2,) upper-right corner
    """
    lo: Array
    hi: Array

    def __post_init__(self):
        a = np.asarray(self.lo, dtype=float).reshape(-1)
        b = np.asarray(self.hi, dtype=float).reshape(-1)
        if a.shape != (2,) or b.shape != (2,):
            raise ValueError(f"AABB corners must have shape (2,), got {a.shape} and {b.shape}")
        object.__setattr__(self, "lo", np.minimum(a, b))
        object.__setattr__(self, "hi", np.maximum(a, b))
