"""Tidy tree layout for forests and other acyclic directed graphs.

Two passes over the graph:

1. Extents (post-order): a leaf is 0 wide; an inner node is as wide as
   its children's extents plus ``dist_x`` between siblings.
2. Placement (pre-order): each node is centered over its children's span
   and every level sits ``dist_y`` below its parent. The canvas grows to
   fit whatever is placed.

The result depends only on the graph, so ``initialize()`` always
reproduces the same coordinates.
"""

import logging
from collections.abc import Hashable
from dataclasses import replace

import networkx as nx

from pygraphlayout.errors import LayoutError, ValidationError, validate_graph
from pygraphlayout.layout.base import AbstractLayout
from pygraphlayout.model.graph import roots, successors, topological_order, validate_acyclic
from pygraphlayout.model.point import Dimension, Point

logger = logging.getLogger(__name__)

DEFAULT_DIST_X = 50
DEFAULT_DIST_Y = 50
DEFAULT_SIZE = Dimension(600.0, 600.0)
# First root row sits one dist_y below this
START_Y = 20.0


def _validate_spacing(dist_x: float, dist_y: float) -> None:
    if dist_x < 1:
        raise ValidationError("dist_x", dist_x, "horizontal spacing of at least 1")
    if dist_y < 1:
        raise ValidationError("dist_y", dist_y, "vertical spacing of at least 1")


class TreeLayout(AbstractLayout):
    """Deterministic top-down tree layout.

    The canvas starts at 600x600 and grows to fit; its size is governed by
    the spacing and cannot be set directly.

    Args:
        graph: Acyclic directed graph with at least one root
        dist_x: Horizontal spacing between adjacent siblings (>= 1)
        dist_y: Vertical spacing between levels (>= 1)

    Raises:
        ValidationError: If the graph is empty, undirected or cyclic, or spacing is below 1
    """

    requires_directed = True

    def __init__(self, graph: nx.DiGraph, dist_x: float = DEFAULT_DIST_X, dist_y: float = DEFAULT_DIST_Y) -> None:
        validate_graph(graph, directed=True)
        _validate_spacing(dist_x, dist_y)
        validate_acyclic(graph)
        super().__init__(graph)
        self.dist_x = dist_x
        self.dist_y = dist_y
        self.base_positions: dict[Hashable, float] = {}
        self._size = DEFAULT_SIZE
        self.initialize()

    def set_graph(self, graph: nx.DiGraph) -> None:
        validate_graph(graph, directed=True)
        validate_acyclic(graph)
        super().set_graph(graph)

    def set_size(self, width: float, height: float) -> None:
        raise LayoutError("TreeLayout size is set by node spacing, not by set_size()")

    @property
    def center(self) -> Point:
        """Midpoint of the current canvas."""
        return self.require_size().center

    def initialize(self) -> None:
        self.build_tree()

    def build_tree(self) -> None:
        """Compute extents and place every node reachable from a root."""
        tree_roots = roots(self.graph)
        if not tree_roots:
            raise ValidationError("graph", self.graph, "at least one root")
        self.calculate_dimension_x()

        already_done: set[Hashable] = set()
        cursor_x = 0.0
        for root in tree_roots:
            cursor_x += self.base_positions[root] / 2 + self.dist_x
            cursor_x = self._place_subtree(root, cursor_x, already_done)
        logger.debug(f"Tree built: {len(already_done)} nodes on a {self.size} canvas")

    def calculate_dimension_x(self) -> None:
        """Horizontal extent of every node, children before parents."""
        self.base_positions = {}
        for node in reversed(topological_order(self.graph)):
            size = sum(self.base_positions[child] + self.dist_x for child in successors(self.graph, node))
            self.base_positions[node] = max(0.0, size - self.dist_x)

    def _place_subtree(self, root: Hashable, x: float, already_done: set[Hashable]) -> float:
        """Place root and its descendants in pre-order.

        Returns:
            X coordinate of the last node placed, where the next root starts from
        """
        last_placed_x = x
        pending = [(root, x, START_Y + self.dist_y)]
        while pending:
            node, node_x, node_y = pending.pop()
            if node in already_done:
                continue
            already_done.add(node)
            self.set_current_position_for(node, node_x, node_y)
            last_placed_x = node_x

            children = []
            last_x = node_x - self.base_positions[node] / 2
            for child in successors(self.graph, node):
                child_size = self.base_positions[child]
                children.append((child, last_x + child_size / 2, node_y + self.dist_y))
                last_x += child_size + self.dist_x
            # reversed so the first child is placed first
            pending.extend(reversed(children))
        return last_placed_x

    def set_current_position_for(self, node: Hashable, x: float, y: float) -> None:
        """Store a placed position and grow the canvas to contain it."""
        size = self.require_size()
        width, height = size.width, size.height
        if x < 0:
            width -= x
        if x > width - self.dist_x:
            width = x + self.dist_x
        if y < 0:
            height -= y
        if y > height - self.dist_y:
            height = y + self.dist_y
        if (width, height) != (size.width, size.height):
            self._size = replace(size, width=width, height=height)
        self.coordinates(node).set_location(x, y)

