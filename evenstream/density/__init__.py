# evenstream/density/__init__.py
"""
Streamline density control.

- KDTreeNeighbors: batch-keyed nearest-neighbour index of placed points
- StreamlineSet: flat NaN-separated output of a placement run
- streamline_distances: distance to neighbouring lines, for width tapering
"""

from .neighbors import NeighborIndex, KDTreeNeighbors
from .lines import StreamlineSet, split_nan_separated
from .distance import (
    arc_length,
    line_distances,
    assemble_streamline_set,
    streamline_distances,
)

__all__ = [
    "NeighborIndex",
    "KDTreeNeighbors",
    "StreamlineSet",
    "split_nan_separated",
    "arc_length",
    "line_distances",
    "assemble_streamline_set",
    "streamline_distances",
]
