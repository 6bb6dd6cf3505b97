"""Batch and fixed-window smoother implementations."""
from .kalman_fir import kalman_fir_smoother_coeffs, fir_smoothed_estimate, kalman_fir_smoother
from .rts import rts_smoother, kalman_filter_tv
from .common import right_divide, measurement_information, joseph_update

__all__ = [
    # FIR smoother
    'kalman_fir_smoother_coeffs',
    'fir_smoothed_estimate',
    'kalman_fir_smoother',
    # RTS smoother
    'rts_smoother',
    'kalman_filter_tv',
    # Utilities
    'right_divide',
    'measurement_information',
    'joseph_update',
]
