"""
Utility Functions.

This module contains utility functions for:
- Metrics computation
- Finite-difference derivatives
- Experiment logging
- Visualization
"""
from .metrics import (
    compute_mse,
    compute_rmse,
    compute_nees,
    compute_symmetry_error,
    compute_min_eigenvalues,
    max_relative_error,
)
from .numerical_diff import numerical_jacobian, numerical_hessian
from .experiment_logger import ExperimentLogger
from .visualization import plot_smoothed_estimates

__all__ = [
    # metrics
    'compute_mse',
    'compute_rmse',
    'compute_nees',
    'compute_symmetry_error',
    'compute_min_eigenvalues',
    'max_relative_error',
    # numerical differentiation
    'numerical_jacobian',
    'numerical_hessian',
    # experiment logger
    'ExperimentLogger',
    # visualization
    'plot_smoothed_estimates',
]
