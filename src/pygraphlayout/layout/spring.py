"""Spring embedder.

Edges behave as springs with a desired length; nodes repel each other
inside a cutoff radius. There is no intrinsic stopping rule: ``done()``
is always False and the driver decides when to stop.
"""

from collections.abc import Callable, Hashable
from dataclasses import dataclass

import networkx as nx

from pygraphlayout.layout.base import (
    AbstractLayout,
    Initializer,
    IterativeContext,
    NodeDataMap,
    SizeLike,
    as_dimension,
)
from pygraphlayout.model.graph import degree, snapshot_edges

Edge = tuple[Hashable, Hashable]

# Largest per-step movement along each axis
MAX_STEP = 5.0


@dataclass
class SpringNodeData:
    """Per-node velocity and force accumulators."""

    edge_dx: float = 0.0
    edge_dy: float = 0.0
    repulsion_dx: float = 0.0
    repulsion_dy: float = 0.0
    dx: float = 0.0
    dy: float = 0.0


def _clamp_step(value: float) -> float:
    return max(-MAX_STEP, min(MAX_STEP, value))


class SpringLayout(AbstractLayout, IterativeContext):
    """Force-directed spring embedder.

    Args:
        graph: Graph to lay out
        length_function: Desired length of each edge (default 30 for all)
        initializer: Optional seed function
        size: Optional canvas size
        seed: Optional seed for jitter and random placement
        stretch: Softening base applied per unit of endpoint degree
        repulsion_range: Cutoff radius for node repulsion
        force_multiplier: Scale of the spring force
    """

    def __init__(
        self,
        graph: nx.Graph,
        length_function: Callable[[Edge], float] | None = None,
        initializer: Initializer | None = None,
        size: SizeLike | None = None,
        seed: int | None = None,
        stretch: float = 0.70,
        repulsion_range: float = 100,
        force_multiplier: float = 1.0 / 3.0,
    ) -> None:
        super().__init__(graph, initializer=initializer, seed=seed)
        self.length_function = length_function or (lambda edge: 30)
        self.stretch = stretch
        self.repulsion_range = repulsion_range
        self.force_multiplier = force_multiplier
        self.spring_node_data: NodeDataMap = NodeDataMap(SpringNodeData)
        self.start_with_size(size)

    @property
    def repulsion_range(self) -> float:
        return self._repulsion_range_sq**0.5

    @repulsion_range.setter
    def repulsion_range(self, value: float) -> None:
        self._repulsion_range_sq = value * value

    def set_size(self, width: float, height: float) -> None:
        self.install_random_initializer(as_dimension((width, height)))
        super().set_size(width, height)

    def clear_node_data(self) -> None:
        self.spring_node_data.clear()

    def step(self) -> None:
        """Run one iteration: damp velocities, relax edges, repel nodes, then move them.

        Raises:
            LayoutError: If no size has been set
        """
        self.require_size()
        nodes = self.nodes()
        for node in nodes:
            data = self.spring_node_data[node]
            data.dx /= 4
            data.dy /= 4
            data.edge_dx = data.edge_dy = 0.0
            data.repulsion_dx = data.repulsion_dy = 0.0

        self.relax_edges()
        self.calculate_repulsion(nodes)
        self.move_nodes(nodes)

    def edge_force(self, u: Hashable, v: Hashable, length: float) -> float:
        """Spring force factor for an edge whose endpoints are length apart."""
        desired = self.length_function((u, v))
        f = self.force_multiplier * (desired - length) / length
        return f * self.stretch ** (degree(self.graph, u) + degree(self.graph, v) - 2)

    def relax_edges(self) -> None:
        """Accumulate the spring force of every edge on both endpoints."""
        for u, v in snapshot_edges(self.graph):
            p1 = self.coordinates(u)
            p2 = self.coordinates(v)
            vx = p1.x - p2.x
            vy = p1.y - p2.y
            length = (vx * vx + vy * vy) ** 0.5
            # a zero length would blow up the force
            length = 0.0001 if length == 0 else length

            f = self.edge_force(u, v, length)
            dx = f * vx
            dy = f * vy
            d1 = self.spring_node_data[u]
            d2 = self.spring_node_data[v]
            d1.edge_dx += dx
            d1.edge_dy += dy
            d2.edge_dx -= dx
            d2.edge_dy -= dy

    def calculate_repulsion(self, nodes: list[Hashable]) -> None:
        """Accumulate repulsion from every node closer than the repulsion range.

        Coincident nodes get a small random push. The summed vector is
        normalized to length 2; locked nodes are skipped.

        Args:
            nodes: Snapshot of the nodes taking part in this step
        """
        for node in nodes:
            if self.is_locked(node):
                continue
            data = self.spring_node_data[node]
            p = self.coordinates(node)
            dx = dy = 0.0
            for other in nodes:
                if other == node:
                    continue
                p2 = self.coordinates(other)
                vx = p.x - p2.x
                vy = p.y - p2.y
                distance_sq = vx * vx + vy * vy
                if distance_sq == 0:
                    dx += self.random.random()
                    dy += self.random.random()
                elif distance_sq < self._repulsion_range_sq:
                    dx += vx / distance_sq
                    dy += vy / distance_sq
            dlen = dx * dx + dy * dy
            if dlen > 0:
                dlen = dlen**0.5 / 2
                data.repulsion_dx += dx / dlen
                data.repulsion_dy += dy / dlen

    def move_nodes(self, nodes: list[Hashable]) -> None:
        """Apply accumulated forces to every unlocked node, capped per axis and clamped to the canvas."""
        size = self.require_size()
        for node in nodes:
            if self.is_locked(node):
                continue
            data = self.spring_node_data[node]
            xyd = self.coordinates(node)

            data.dx += data.repulsion_dx + data.edge_dx
            data.dy += data.repulsion_dy + data.edge_dy

            x = xyd.x + _clamp_step(data.dx)
            y = xyd.y + _clamp_step(data.dy)
            xyd.set_location(max(0.0, min(size.width, x)), max(0.0, min(size.height, y)))

    def done(self) -> bool:
        # a spring layout runs until stopped
        return False
