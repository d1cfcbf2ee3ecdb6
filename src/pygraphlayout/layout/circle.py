"""Circle layout: nodes evenly spaced around a single circle."""

import math
from collections.abc import Callable, Hashable, Iterable
from dataclasses import dataclass
from typing import Any

import networkx as nx

from pygraphlayout.errors import ValidationError
from pygraphlayout.layout.base import AbstractLayout, Initializer, NodeDataMap, SizeLike


@dataclass
class CircleNodeData:
    angle: float = 0.0


class CircleLayout(AbstractLayout):
    """Place node i of n at angle 2πi/n around the canvas center.

    Args:
        graph: Graph to lay out
        size: Canvas size
        radius: Circle radius; 45% of the smaller canvas side when unset or not positive
        initializer: Optional seed function
    """

    recenter_on_resize = False

    def __init__(
        self,
        graph: nx.Graph,
        size: SizeLike | None = None,
        radius: float = 0.0,
        initializer: Initializer | None = None,
    ) -> None:
        super().__init__(graph, initializer=initializer)
        self.radius = radius
        self._node_order: list[Hashable] | None = None
        self.circle_node_data: NodeDataMap = NodeDataMap(CircleNodeData)
        self.start_with_size(size)

    @property
    def radius(self) -> float:
        return self._radius

    @radius.setter
    def radius(self, value: float) -> None:
        self._radius = value
        self._auto_radius = value <= 0

    def set_node_order(
        self,
        key: Callable[[Hashable], Any] | None = None,
        nodes: Iterable[Hashable] | None = None,
    ) -> None:
        """Choose the order in which nodes go around the circle.

        Args:
            key: Sort the current node order by this key function
            nodes: Explicit order; must contain every node of the graph

        Raises:
            ValidationError: If an explicit order misses graph nodes
        """
        if nodes is not None:
            order = list(nodes)
            missing = set(self.nodes()) - set(order)
            if missing:
                raise ValidationError("nodes", sorted(map(repr, missing)), "an order including all nodes of the graph")
            self._node_order = order
        elif key is not None:
            order = self._node_order if self._node_order is not None else self.nodes()
            self._node_order = sorted(order, key=key)

    @property
    def node_order(self) -> list[Hashable]:
        """Current order, falling back to graph order and appending nodes added since."""
        current = self.nodes()
        if self._node_order is None:
            return current
        present = set(current)
        order = [node for node in self._node_order if node in present]
        seen = set(order)
        return order + [node for node in current if node not in seen]

    def clear_node_data(self) -> None:
        self.circle_node_data.clear()

    def angle(self, node: Hashable) -> float:
        """Angle (radians) assigned to a node by the last initialization."""
        return self.circle_node_data[node].angle

    def initialize(self) -> None:
        size = self.size
        if size is None:
            return
        if self._auto_radius:
            self._radius = 0.45 * size.min_dimension

        order = self.node_order
        for i, node in enumerate(order):
            angle = (2 * math.pi * i) / len(order)
            self.coordinates(node).set_location(
                math.cos(angle) * self.radius + size.width / 2,
                math.sin(angle) * self.radius + size.height / 2,
            )
            self.circle_node_data[node].angle = angle

    def reset(self) -> None:
        self.initialize()
