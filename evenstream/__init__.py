"""
evenstream: evenly-spaced streamlines for 2-D vector fields.

Implements the Jobard & Lefer density-controlled placement algorithm on
gridded velocity fields, with a JAX-compiled fixed-step streamline tracer
and a SciPy KD-tree point index.

Core workflow:
1. Wrap gridded data → StructuredGridField2D
2. Configure separation → PlacementOptions
3. Place streamlines → EvenStreamlinePlacer.run() → StreamlineSet
4. Recompute neighbour distances of any line set → streamline_distances
"""

from __future__ import annotations

__version__ = "0.1.0"
__author__ = "evenstream Contributors"

from .fields import StructuredGridField2D, create_structured_field_from_function, create_uniform_grid
from .integrators import euler_step, rk2_step, rk4_step, get_integrator
from .tracking import (
    SeededLine,
    StreamlineTracer,
    trace_streamline,
    grow_streamline,
    trim_streamline,
    seed_candidates,
    random_field_seed,
    PlacementOptions,
    EvenStreamlinePlacer,
    evenly_spaced_streamlines,
)
from .density import KDTreeNeighbors, StreamlineSet, streamline_distances
from .utils.config import configure, get_config, reset_config

__all__ = [
    "__version__",
    # Fields
    "StructuredGridField2D",
    "create_structured_field_from_function",
    "create_uniform_grid",
    # Integrators
    "euler_step",
    "rk2_step",
    "rk4_step",
    "get_integrator",
    # Tracking
    "SeededLine",
    "StreamlineTracer",
    "trace_streamline",
    "grow_streamline",
    "trim_streamline",
    "seed_candidates",
    "random_field_seed",
    "PlacementOptions",
    "EvenStreamlinePlacer",
    "evenly_spaced_streamlines",
    # Density
    "KDTreeNeighbors",
    "StreamlineSet",
    "streamline_distances",
    # Configuration
    "configure",
    "get_config",
    "reset_config",
]
