# evenstream/integrators/__init__.py
"""
evenstream integrators

Explicit fixed-step methods used by the streamline tracer. Each stepper
follows the signature:

    new_x = step(x, t, dt, field_fn)

where:
- x: (N,2) positions
- t: scalar time (unused by steady fields)
- dt: scalar step size
- field_fn: callable (x, t) -> (N,2) velocities
"""

from .base import FieldFn, IntegratorFn, IntegratorRegistry
from .euler import euler_step
from .rk2 import rk2_step
from .rk4 import rk4_step

INTEGRATORS: IntegratorRegistry = {
    "euler": euler_step,
    "rk2": rk2_step,
    "rk4": rk4_step,
}


def get_integrator(name: str) -> IntegratorFn:
    """Look up a stepper by name."""
    try:
        return INTEGRATORS[name.lower()]
    except (KeyError, AttributeError):
        raise ValueError(
            f"Unknown integrator: {name!r}. Available: {sorted(INTEGRATORS)}"
        ) from None


__all__ = [
    "FieldFn",
    "IntegratorFn",
    "INTEGRATORS",
    "get_integrator",
    "euler_step",
    "rk2_step",
    "rk4_step",
]
