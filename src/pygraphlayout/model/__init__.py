"""Model layer for pygraphlayout.

This module contains the geometric value types and the read-only
graph access helpers used by every layout.
"""

from pygraphlayout.model.point import Dimension, Point, PolarPoint, cartesian_to_polar, polar_to_cartesian

__all__ = ["Dimension", "Point", "PolarPoint", "cartesian_to_polar", "polar_to_cartesian"]
