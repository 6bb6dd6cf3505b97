"""
trackmath: Numerical Routines for Target Tracking and State Estimation

This package contains implementations of:
- Continuous-time dynamic model drift functions (dynamics)
- Kalman FIR and RTS smoothers (smoothing)
- Geometric predicates (geometry)
- Utility functions
"""

__version__ = '0.1.0'
