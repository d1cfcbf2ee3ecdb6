"""Self-organizing map layout (Meyer's ISOM).

Each epoch picks a random point on the canvas, finds the node closest to
it and drags that node and its graph neighborhood toward the point. The
pull weakens with graph distance from the winner and with the epoch
count; the neighborhood radius shrinks over time.
"""

import logging
import math
from collections import deque
from collections.abc import Hashable
from dataclasses import dataclass

import networkx as nx

from pygraphlayout import picking
from pygraphlayout.layout.base import (
    AbstractLayout,
    Initializer,
    IterativeContext,
    NodeDataMap,
    SizeLike,
    as_dimension,
)
from pygraphlayout.model.graph import neighbors
from pygraphlayout.model.point import Point

logger = logging.getLogger(__name__)


@dataclass
class ISOMNodeData:
    """Breadth-first search bookkeeping for one adjustment."""

    distance: int = 0
    visited: bool = False


class ISOMLayout(AbstractLayout, IterativeContext):
    """Self-organizing map layout.

    Args:
        graph: Graph to lay out
        size: Canvas size
        initializer: Optional seed function replacing random placement
        seed: Optional seed for the random targets
        max_epoch: Number of epochs before ``done()``
        radius: Initial neighborhood radius in hops
        min_radius: Smallest neighborhood radius
        radius_constant_time: Epochs between radius decrements
        initial_adaption: Initial pull strength
        min_adaption: Floor of the pull strength
        cooling_factor: Exponential decay rate of the pull strength
    """

    def __init__(
        self,
        graph: nx.Graph,
        size: SizeLike | None = None,
        initializer: Initializer | None = None,
        seed: int | None = None,
        max_epoch: int = 2000,
        radius: int = 5,
        min_radius: int = 1,
        radius_constant_time: int = 100,
        initial_adaption: float = 0.9,
        min_adaption: float = 0.0,
        cooling_factor: float = 2.0,
    ) -> None:
        super().__init__(graph, initializer=initializer, seed=seed)
        self.max_epoch = max_epoch
        self.initial_radius = radius
        self.min_radius = min_radius
        self.radius_constant_time = radius_constant_time
        self.initial_adaption = initial_adaption
        self.min_adaption = min_adaption
        self.cooling_factor = cooling_factor

        self.epoch = 1
        self.radius = radius
        self.adaption = initial_adaption
        self.status = ""
        self.isom_node_data: NodeDataMap = NodeDataMap(ISOMNodeData)
        self.element_accessor = picking.RadiusElementAccessor(self)
        self.start_with_size(size)

    def set_size(self, width: float, height: float) -> None:
        self.install_random_initializer(as_dimension((width, height)))
        super().set_size(width, height)

    def clear_node_data(self) -> None:
        self.isom_node_data.clear()

    def initialize(self) -> None:
        self.epoch = 1
        self.radius = self.initial_radius
        self.adaption = self.initial_adaption

    def reset(self) -> None:
        self.initialize()

    def step(self) -> None:
        self.require_size()
        self.status = f"epoch: {self.epoch}; "
        if self.epoch < self.max_epoch:
            self.adjust()
            self.update_parameters()
            self.status += "status: running"
        else:
            self.status += f"adaption: {self.adaption}; status: done"

    def adjust(self) -> None:
        """Pull the node nearest to a random target, and its neighborhood, toward it."""
        size = self.require_size()
        target = Point(self.random.random() * size.width, self.random.random() * size.height)
        winner = self.element_accessor.nearest_node(target.x, target.y)
        if winner is None:
            return
        for node in self.nodes():
            data = self.isom_node_data[node]
            data.distance = 0
            data.visited = False
        self.adjust_node(winner, target)

    def adjust_node(self, winner: Hashable, target: Point) -> None:
        start = self.isom_node_data[winner]
        start.distance = 0
        start.visited = True
        queue = deque([winner])

        while queue:
            current = queue.popleft()
            data = self.isom_node_data[current]
            if not self.is_locked(current):
                xyd = self.coordinates(current)
                factor = self.adaption / 2**data.distance
                xyd.set_location(xyd.x + factor * (target.x - xyd.x), xyd.y + factor * (target.y - xyd.y))

            if data.distance < self.radius:
                for child in neighbors(self.graph, current):
                    child_data = self.isom_node_data[child]
                    if not child_data.visited:
                        child_data.visited = True
                        child_data.distance = data.distance + 1
                        queue.append(child)

    def update_parameters(self) -> None:
        self.epoch += 1
        factor = math.exp(-self.cooling_factor * self.epoch / self.max_epoch)
        self.adaption = max(self.min_adaption, factor * self.initial_adaption)
        if self.radius > self.min_radius and self.epoch % self.radius_constant_time == 0:
            self.radius -= 1
            logger.debug(f"ISOM radius shrunk to {self.radius} at epoch {self.epoch}")

    def done(self) -> bool:
        return self.epoch >= self.max_epoch
