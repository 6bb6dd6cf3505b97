"""Continuous-time dynamic model drift functions."""
from .spherical_maneuver import (
    spher_maneuver,
    spher_maneuver_drift,
    spher_maneuver_jacobian,
    spher_maneuver_hessian,
    spher_maneuver_time_partial,
)

__all__ = [
    'spher_maneuver',
    'spher_maneuver_drift',
    'spher_maneuver_jacobian',
    'spher_maneuver_hessian',
    'spher_maneuver_time_partial',
]
