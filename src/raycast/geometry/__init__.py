"""Geometry module containing primitive shapes and intersection tests.

Components:
    sphere: HitRecord and hit_sphere() (nearest root only)
    plane: hit_plane() for infinite planes
"""

from .plane import PARALLEL_EPSILON, hit_plane
from .sphere import HitRecord, hit_sphere

__all__ = ["HitRecord", "PARALLEL_EPSILON", "hit_plane", "hit_sphere"]
