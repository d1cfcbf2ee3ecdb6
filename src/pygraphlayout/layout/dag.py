"""Level-constrained spring layout for directed acyclic graphs."""

import logging
from collections.abc import Callable, Hashable

import networkx as nx

from pygraphlayout.errors import validate_graph
from pygraphlayout.layout.base import Initializer, SizeLike
from pygraphlayout.layout.spring import Edge, SpringLayout, _clamp_step
from pygraphlayout.model.graph import degree, predecessors, sinks, validate_acyclic
from pygraphlayout.model.point import Dimension, Point

logger = logging.getLogger(__name__)


class DAGLayout(SpringLayout):
    """Spring layout that keeps every node within a band set by its level.

    Nodes without successors sit at level 0; every predecessor sits at
    least one level above each of its successors. Each step pulls nodes
    toward their level's height and the layout reports ``done()`` after the
    mean-squared velocity has stayed flat for a cool-down period.

    Args:
        graph: Directed acyclic graph to lay out
        length_function: Desired length of each edge (default 30 for all)
        initializer: Optional seed function
        size: Optional canvas size; setting it seeds nodes inside their bands
        seed: Optional seed for random placement
        msv_threshold: Largest change in mean-squared velocity counted as settled
        cool_down_increments: Settled steps required before ``done()``
        **kwargs: Spring parameters (stretch, repulsion_range, force_multiplier)
    """

    requires_directed = True

    #: Extra room left for floating below the deepest level
    SPACE_FACTOR = 1.3
    LEVEL_ATTRACTION_RATE = 0.8

    def __init__(
        self,
        graph: nx.DiGraph,
        length_function: Callable[[Edge], float] | None = None,
        initializer: Initializer | None = None,
        size: SizeLike | None = None,
        seed: int | None = None,
        msv_threshold: float = 10.0,
        cool_down_increments: int = 200,
        **kwargs,
    ) -> None:
        validate_graph(graph, directed=True)
        validate_acyclic(graph)
        super().__init__(graph, length_function=length_function, initializer=initializer, seed=seed, **kwargs)
        self.msv_threshold = msv_threshold
        self.cool_down_increments = cool_down_increments
        self.min_levels: dict[Hashable, int] = {}
        self.graph_height = 0
        self.num_roots = 0
        self.mean_square_vel = 0.0
        self.stopping_increments = False
        self.increments_left = 0
        self.start_with_size(size)

    def set_graph(self, graph: nx.DiGraph) -> None:
        validate_graph(graph, directed=True)
        validate_acyclic(graph)
        super().set_graph(graph)

    def level(self, node: Hashable) -> int:
        """Level of a node; nodes added after initialization count as level 0."""
        return self.min_levels.get(node, 0)

    def set_roots(self) -> None:
        """Recompute every level, starting from the nodes with no successors."""
        self.min_levels = {}
        self.graph_height = 0
        level_zero = sinks(self.graph)
        self.num_roots = len(level_zero)
        for node in level_zero:
            self.set_root(node)
        logger.debug(f"DAG levels computed: {self.num_roots} roots, height {self.graph_height}")

    def set_root(self, node: Hashable) -> None:
        self.min_levels[node] = 0
        self.propagate_minimum_level(node)

    def propagate_minimum_level(self, node: Hashable) -> None:
        """Raise the level of every ancestor of node to at least one above its child."""
        pending = [node]
        while pending:
            current = pending.pop()
            level = self.min_levels[current]
            for parent in predecessors(self.graph, current):
                old_level = self.min_levels.get(parent)
                new_level = max(old_level or 0, level + 1)
                if new_level == old_level:
                    continue
                self.min_levels[parent] = new_level
                self.graph_height = max(self.graph_height, new_level)
                pending.append(parent)

    def _level_bounds(self, level: int, size: Dimension) -> tuple[float, float]:
        if self.graph_height == 0:
            return 0.0, size.height
        band = size.height / (self.graph_height * self.SPACE_FACTOR)
        min_y = level * band
        max_y = band / 2 if level == 0 else size.height
        return min_y, max_y

    def initialize_location(self, node: Hashable, coord: Point, size: Dimension) -> None:
        """Place a node at random, no higher than the top of its level band."""
        min_y, _ = self._level_bounds(self.level(node), size)
        x = self.random.random() * size.width
        y = self.random.random() * (size.height - min_y) + min_y
        coord.set_location(x, y)

    def initialize(self) -> None:
        """Seed positions, then compute levels."""
        super().initialize()
        self.set_roots()

    def reset(self) -> None:
        """Clear the cool-down state so iteration starts over."""
        self.mean_square_vel = 0.0
        self.stopping_increments = False
        self.increments_left = 0

    def set_size(self, width: float, height: float) -> None:
        """Resize the canvas and re-place every unlocked node inside its band."""
        super().set_size(width, height)
        for node in self.nodes():
            if self.is_locked(node):
                continue
            self.initialize_location(node, self.coordinates(node), self.size)

    def edge_force(self, u: Hashable, v: Hashable, length: float) -> float:
        """Spring force factor, weakened for edges spanning more than one level."""
        desired = self.length_function((u, v))
        f = self.force_multiplier * (desired - length) / length
        f *= (self.stretch / 100.0) ** (degree(self.graph, u) + degree(self.graph, v) - 2)
        # a long edge spanning several levels pulls less
        gap = self.level(u) - self.level(v)
        if gap != 0:
            f /= abs(gap) ** 1.5
        return f

    def move_nodes(self, nodes: list[Hashable]) -> None:
        """Move unlocked nodes and keep each within its level band.

        Level attraction pulls nodes toward the top of their band; it is
        doubled for level 0. With a single root, that root stays centered
        horizontally. The mean-square velocity of the move feeds the
        cool-down countdown.

        Args:
            nodes: Snapshot of the nodes taking part in this step
        """
        size = self.require_size()
        old_msv = self.mean_square_vel
        self.mean_square_vel = 0.0

        for node in nodes:
            if self.is_locked(node):
                continue
            data = self.spring_node_data[node]
            xyd = self.coordinates(node)
            level = self.level(node)
            min_y, max_y = self._level_bounds(level, size)

            # sideways repulsion counts double
            data.dx += 2 * data.repulsion_dx + data.edge_dx
            data.dy += data.repulsion_dy + data.edge_dy

            delta = xyd.y - min_y
            data.dy -= delta * self.LEVEL_ATTRACTION_RATE
            if level == 0:
                data.dy -= delta * self.LEVEL_ATTRACTION_RATE

            self.mean_square_vel += data.dx * data.dx + data.dy * data.dy

            x = max(0.0, min(size.width, xyd.x + _clamp_step(data.dx)))
            y = xyd.y + _clamp_step(data.dy)
            if y < min_y:
                y = min_y
            elif y > max_y:
                y = max_y
            if self.num_roots == 1 and level == 0:
                x = size.width / 2
            xyd.set_location(x, y)

        self._update_cool_down(old_msv)

    def _update_cool_down(self, old_msv: float) -> None:
        change = abs(self.mean_square_vel - old_msv)
        if not self.stopping_increments and change < self.msv_threshold:
            self.stopping_increments = True
            self.increments_left = self.cool_down_increments
        elif self.stopping_increments and change <= self.msv_threshold:
            self.increments_left = max(0, self.increments_left - 1)

    def done(self) -> bool:
        """True once the cool-down countdown has run out."""
        return self.stopping_increments and self.increments_left == 0

    def set_location(self, node: Hashable, location: Point | tuple[float, float]) -> None:
        """Move a node and re-arm convergence detection."""
        super().set_location(node, location)
        self.stopping_increments = False
