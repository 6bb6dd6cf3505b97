"""Geometric predicates."""
from .hyperspheres import bounds_intersect_ball

__all__ = ['bounds_intersect_ball']
