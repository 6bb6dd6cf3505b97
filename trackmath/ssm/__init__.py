"""State Space Model implementations."""
from .linear_gaussian import linear_gaussian_ssm, constant_velocity_model

__all__ = [
    'linear_gaussian_ssm',
    'constant_velocity_model',
]
