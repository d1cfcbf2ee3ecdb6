"""Radial tree layout: the tree layout wrapped around the canvas center."""

import math
from collections.abc import Hashable

import networkx as nx

from pygraphlayout.layout.base import as_dimension
from pygraphlayout.layout.tree import DEFAULT_DIST_X, DEFAULT_DIST_Y, TreeLayout
from pygraphlayout.model.point import Point, PolarPoint, cartesian_to_polar, polar_to_cartesian


class RadialTreeLayout(TreeLayout):
    """Project the tree layout into polar coordinates.

    A node's tree x becomes its angle, scaled so the widest row spans a
    full turn; its depth becomes its radius, scaled so the deepest row
    reaches half the canvas width. ``get`` returns Cartesian points around
    the canvas center.

    Args:
        graph: Acyclic directed graph with at least one root
        dist_x: Horizontal spacing between adjacent siblings in the tree
        dist_y: Vertical spacing between levels in the tree
    """

    def __init__(self, graph: nx.DiGraph, dist_x: float = DEFAULT_DIST_X, dist_y: float = DEFAULT_DIST_Y) -> None:
        self.polar_locations: dict[Hashable, PolarPoint] = {}
        self._angle_scale = 0.0
        self._radius_scale = 0.0
        super().__init__(graph, dist_x=dist_x, dist_y=dist_y)

    def build_tree(self) -> None:
        super().build_tree()
        self.polar_locations = {}
        self.set_radial_locations()

    def set_size(self, width: float, height: float) -> None:
        self._size = as_dimension((width, height))
        self.build_tree()

    def set_current_position_for(self, node: Hashable, x: float, y: float) -> None:
        # the radial projection rescales to the canvas, so it never grows
        self.coordinates(node).set_location(x, y)

    def _max_xy(self) -> tuple[float, float]:
        max_x = max_y = 0.0
        for node in self.nodes():
            p = self.coordinates(node)
            max_x = max(max_x, p.x)
            max_y = max(max_y, p.y)
        return max_x, max_y

    def set_radial_locations(self) -> None:
        size = self.require_size()
        max_x, max_y = self._max_xy()
        max_x = max(max_x, size.width)
        self._angle_scale = 2 * math.pi / max_x
        self._radius_scale = size.width / 2 / max_y
        for node in self.nodes():
            p = self.coordinates(node)
            self.polar_locations[node] = PolarPoint(p.x * self._angle_scale, (p.y - self.dist_y) * self._radius_scale)

    def tree_location(self, node: Hashable) -> Point:
        """Cartesian position the underlying tree layout gave a node."""
        return self.coordinates(node).copy()

    def polar_to_tree(self, polar: PolarPoint) -> Point:
        """Invert the radial projection, recovering a tree-layout coordinate."""
        return Point(polar.theta / self._angle_scale, polar.radius / self._radius_scale + self.dist_y)

    def get(self, node: Hashable) -> Point:
        polar = self.polar_locations.get(node)
        if polar is None:
            polar = self.polar_locations[node] = PolarPoint()
        center = self.center
        p = polar_to_cartesian(polar.theta, polar.radius)
        return p.translate(center.x, center.y)

    def set_location(self, node: Hashable, location: Point | tuple[float, float]) -> None:
        """Store a new position as a polar point relative to the canvas center."""
        p = Point.of(location)
        center = self.center
        new_location = cartesian_to_polar(Point(p.x - center.x, p.y - center.y))
        current = self.polar_locations.get(node)
        if current is None:
            self.polar_locations[node] = new_location
        else:
            current.set_location(new_location)
