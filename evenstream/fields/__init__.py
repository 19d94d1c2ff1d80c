# evenstream/fields/__init__.py
"""
Velocity field classes.

- VectorField: protocol consumed by the tracer and placement engine
- StructuredGridField2D: rectilinear grid field with bilinear sampling
"""

from .base import (
    VectorField,
    bilinear_sample,
)

from .structured import (
    StructuredGridField2D,
    create_uniform_grid,
    create_structured_field_from_function,
)

__all__ = [
    "VectorField",
    "bilinear_sample",
    "StructuredGridField2D",
    "create_uniform_grid",
    "create_structured_field_from_function",
]
