# evenstream/density/lines.py
"""
Output container for placed streamlines.

Lines are stored as flat NaN-separated vectors, one NaN row after every
line including the last, with the separator positions shared by all four
columns.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List
import numpy as np


def split_nan_separated(xy: np.ndarray) -> List[slice]:
    """
    Row slices of the lines in a NaN-separated (M, 2) array.

    A trailing separator is allowed; empty segments are dropped.
    """
    xy = np.asarray(xy, dtype=np.float64)
    sep = np.flatnonzero(np.isnan(xy[:, 0]))
    starts = np.concatenate([[0], sep + 1])
    stops = np.concatenate([sep, [xy.shape[0]]])
    return [slice(int(a), int(b)) for a, b in zip(starts, stops) if b > a]


@dataclass
class StreamlineSet:
    """
    Evenly-spaced streamlines in flat NaN-separated form.

    Attributes
    ----------
    xs, ys : np.ndarray
        Point coordinates, shape (M,)
    ds : np.ndarray
        Distance from each point to the nearest point of another line
    ls : np.ndarray
        Cumulative arc length along each line, 0 at its first point
    metadata : dict
        Run parameters and placement statistics
    """
    xs: np.ndarray
    ys: np.ndarray
    ds: np.ndarray
    ls: np.ndarray
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.xs = np.asarray(self.xs, dtype=np.float64).ravel()
        self.ys = np.asarray(self.ys, dtype=np.float64).ravel()
        self.ds = np.asarray(self.ds, dtype=np.float64).ravel()
        self.ls = np.asarray(self.ls, dtype=np.float64).ravel()

        n = self.xs.shape[0]
        for name in ("ys", "ds", "ls"):
            if getattr(self, name).shape != (n,):
                raise ValueError(f"{name} length {getattr(self, name).shape[0]} doesn't match xs length {n}")

        sep = np.isnan(self.xs)
        for name in ("ys", "ds", "ls"):
            if not np.array_equal(np.isnan(getattr(self, name)), sep):
                raise ValueError(f"NaN separators in {name} don't line up with xs")
        if n and not sep[-1]:
            raise ValueError("Every line, including the last, must be followed by a NaN row")

    def __len__(self) -> int:
        return int(self.xs.shape[0])

    @property
    def n_lines(self) -> int:
        return int(np.count_nonzero(np.isnan(self.xs)))

    @property
    def xy(self) -> np.ndarray:
        """All rows as (M, 2), separators included."""
        return np.column_stack([self.xs, self.ys])

    def separated_xy(self) -> np.ndarray:
        """(x, y) rows without the trailing separator, as ``streamline_distances`` expects."""
        return self.xy[:-1] if len(self) else self.xy

    def lines(self) -> List[np.ndarray]:
        """Per-line (N, 4) arrays of (x, y, distance, arc length)."""
        data = np.column_stack([self.xs, self.ys, self.ds, self.ls])
        return [data[s] for s in split_nan_separated(self.xy)]
