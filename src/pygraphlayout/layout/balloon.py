"""Balloon layout: children packed on circles nested inside their parent's circle."""

import logging
import math
from collections.abc import Hashable

import networkx as nx

from pygraphlayout.layout.base import as_dimension
from pygraphlayout.layout.tree import DEFAULT_DIST_X, DEFAULT_DIST_Y, TreeLayout
from pygraphlayout.model.graph import predecessors, roots, successors
from pygraphlayout.model.point import Point, PolarPoint, cartesian_to_polar, polar_to_cartesian

logger = logging.getLogger(__name__)


class BalloonLayout(TreeLayout):
    """Recursive nested-circle packing of a forest.

    With a single root, the root sits at the canvas center and its children
    share a circle of radius ``width / 2``; with several roots, the roots
    themselves share that circle. Each child is then the center of a smaller
    circle holding its own children.

    Args:
        graph: Acyclic directed graph with at least one root
        seed: Optional seed for the per-circle phase offset
        dist_x: Kept for the tree contract; packing does not use it
        dist_y: Kept for the tree contract; packing does not use it
    """

    def __init__(
        self,
        graph: nx.DiGraph,
        seed: int | None = None,
        dist_x: float = DEFAULT_DIST_X,
        dist_y: float = DEFAULT_DIST_Y,
    ) -> None:
        self.polar_locations: dict[Hashable, PolarPoint] = {}
        self.radii: dict[Hashable, float] = {}
        self._seed = seed
        super().__init__(graph, dist_x=dist_x, dist_y=dist_y)

    def initialize(self) -> None:
        self.random.seed(self._seed)
        self.set_root_polars()

    def set_size(self, width: float, height: float) -> None:
        self._size = as_dimension((width, height))
        self.set_root_polars()

    def set_root_polars(self) -> None:
        size = self.require_size()
        tree_roots = roots(self.graph)
        if len(tree_roots) == 1:
            root = tree_roots[0]
            self.set_root_polar(root)
            self.set_polars(successors(self.graph, root), self.center, size.width / 2)
        elif len(tree_roots) > 1:
            self.set_polars(tree_roots, self.center, size.width / 2)
        logger.debug(f"Balloon packed {len(self.polar_locations)} nodes for {len(tree_roots)} roots")

    def set_root_polar(self, root: Hashable) -> None:
        self.polar_locations[root] = PolarPoint(0.0, 0.0)
        center = self.center
        self.coordinates(root).set_location(center.x, center.y)

    def set_polars(self, kids: list[Hashable], parent_location: Point, parent_radius: float) -> None:
        """Place kids evenly on a circle inside their parent's, then recurse."""
        child_count = len(kids)
        if child_count == 0:
            return
        # a single child gets the whole circle
        angle = max(0.0, math.pi / 2 * (1 - 2.0 / child_count))
        child_radius = parent_radius * math.cos(angle) / (1 + math.cos(angle))
        radius = parent_radius - child_radius

        phase = self.random.random()
        for i, child in enumerate(kids):
            theta = i * 2 * math.pi / child_count + phase
            self.radii[child] = child_radius

            polar = PolarPoint(theta, radius)
            self.polar_locations[child] = polar
            p = polar_to_cartesian(polar.theta, polar.radius).translate(parent_location.x, parent_location.y)
            self.coordinates(child).set_location(p.x, p.y)

            self.set_polars(successors(self.graph, child), p, child_radius)

    def center_of(self, node: Hashable) -> Point:
        """Center of the circle a node was packed on: its parent, or the canvas center for roots."""
        parents = predecessors(self.graph, node)
        if not parents:
            return self.center
        return self.coordinates(parents[0]).copy()

    def set_location(self, node: Hashable, location: Point | tuple[float, float]) -> None:
        """Move a node, keeping its polar coordinate relative to its parent in step."""
        p = Point.of(location)
        c = self.center_of(node)
        polar = cartesian_to_polar(Point(p.x - c.x, p.y - c.y))
        current = self.polar_locations.get(node)
        if current is None:
            self.polar_locations[node] = polar
        else:
            current.set_location(polar)
        self.coordinates(node).set_location(p.x, p.y)
