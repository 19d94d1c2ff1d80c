# evenstream/tracking/__init__.py
"""
Streamline tracking and placement.

Main Components:
- StreamlineTracer: fixed-step bidirectional streamline growth
- SeededLine / trim_streamline: pure line operations around a seed point
- seed_candidates / random_field_seed: seed generation
- EvenStreamlinePlacer: the density-controlled placement loop
"""

from .streamline import (
    SeededLine,
    StreamlineTracer,
    splice_branches,
    trim_streamline,
    trace_streamline,
    grow_streamline,
)

from .seeding import (
    seed_candidates,
    random_field_seed,
)

from .placement import (
    PlacementOptions,
    PlacementState,
    PlacementStats,
    CommittedLine,
    EvenStreamlinePlacer,
    evenly_spaced_streamlines,
)

__all__ = [
    "SeededLine",
    "StreamlineTracer",
    "splice_branches",
    "trim_streamline",
    "trace_streamline",
    "grow_streamline",
    "seed_candidates",
    "random_field_seed",
    "PlacementOptions",
    "PlacementState",
    "PlacementStats",
    "CommittedLine",
    "EvenStreamlinePlacer",
    "evenly_spaced_streamlines",
]
