# evenstream/density/distance.py
"""
Distance to neighbouring streamlines, used to taper line widths.

For every point of a line, the distance to the closest point on any *other*
line is found by taking the line's own batch out of the index for the
query. ``assemble_streamline_set`` does this for the lines of a placement
run; ``streamline_distances`` is the standalone entry point for any
NaN-separated set of lines.
"""

from __future__ import annotations
from typing import Optional, Sequence
import numpy as np

from .lines import StreamlineSet, split_nan_separated
from ..utils.logging import ProgressCallback, create_progress_callback
from .neighbors import KDTreeNeighbors, NeighborIndex


def arc_length(points: np.ndarray) -> np.ndarray:
    """Cumulative arc length along a polyline, starting at 0."""
    pts = np.asarray(points, dtype=np.float64)
    if pts.shape[0] == 0:
        return np.empty(0, dtype=np.float64)
    seg = np.hypot(*np.diff(pts, axis=0).T)
    return np.concatenate([[0.0], np.cumsum(seg)])


def line_distances(index: NeighborIndex, batch_id: int) -> np.ndarray:
    """
    Distance from each point of one batch to the rest of the index.

    The index holds the same points before and after the call.
    """
    with index.excluding(batch_id) as pts:
        return index.nearest_distance(pts)


def assemble_streamline_set(
    index: NeighborIndex,
    batch_ids: Sequence[int],
    progress: Optional[ProgressCallback] = None,
) -> StreamlineSet:
    """
    Flatten indexed lines into a :class:`StreamlineSet`.

    Lines are emitted in ``batch_ids`` order, each followed by a NaN row.

    Parameters
    ----------
    index : NeighborIndex
        Index holding one batch per line
    batch_ids : sequence of int
        Line batches in commit order
    progress : ProgressCallback, optional
        Called as ``progress(k, n_lines)`` before line k is processed
    """
    blocks = []
    nan_row = np.full((1, 4), np.nan)
    n_lines = len(batch_ids)
    for k, batch_id in enumerate(batch_ids, start=1):
        if progress is not None:
            progress(k, n_lines)
        with index.excluding(batch_id) as pts:
            dist = index.nearest_distance(pts)
        blocks.append(np.column_stack([pts, dist, arc_length(pts)]))
        blocks.append(nan_row)

    if not blocks:
        empty = np.empty(0, dtype=np.float64)
        return StreamlineSet(empty, empty, empty, empty)
    data = np.concatenate(blocks, axis=0)
    return StreamlineSet(data[:, 0], data[:, 1], data[:, 2], data[:, 3])


def _validate_separated_xy(xy, verbose) -> np.ndarray:
    """Check the NaN-separated layout, failing with ValueError."""
    arr = np.asarray(xy, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"xy must be a 2D array with 2 columns, got shape {arr.shape}")
    if arr.shape[0] == 0:
        raise ValueError("xy must contain at least one row")

    nan_x = np.isnan(arr[:, 0])
    nan_y = np.isnan(arr[:, 1])
    if np.any(nan_x != nan_y):
        raise ValueError("NaN in xy is not used as a separator")
    if nan_x[0]:
        raise ValueError("First row in xy should not contain NaN")
    if nan_x[-1]:
        raise ValueError("Last row in xy should not contain NaN")
    if not np.all(np.isfinite(arr[~nan_x])):
        raise ValueError("xy contains infinite coordinates")

    if not isinstance(verbose, (bool, np.bool_)):
        raise ValueError(f"verbose must be a bool, got {type(verbose).__name__}")
    return arr


def streamline_distances(xy: np.ndarray, verbose: bool = False) -> np.ndarray:
    """
    Minimum distance to neighbouring streamlines for every point.

    Parameters
    ----------
    xy : array-like, shape (M, 2)
        Streamline points in rows, lines separated by all-NaN rows; the
        first and last rows must be points. Adjacent separators (an empty
        line) are skipped.
    verbose : bool
        Print a progress line per streamline.

    Returns
    -------
    np.ndarray
        Shape (M,), aligned with ``xy``. Separator rows are NaN. With only
        one line there is nothing to measure against and every distance is
        ``inf``.
    """
    arr = _validate_separated_xy(xy, verbose)
    segments = split_nan_separated(arr)

    index = KDTreeNeighbors()
    batch_ids = [index.insert(arr[s]) for s in segments]

    progress = create_progress_callback(__name__) if verbose else None
    dist = np.full(arr.shape[0], np.nan)
    for k, (s, batch_id) in enumerate(zip(segments, batch_ids), start=1):
        if progress is not None:
            progress(k, len(segments))
        dist[s] = line_distances(index, batch_id)
    return dist
