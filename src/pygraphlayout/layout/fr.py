"""Fruchterman-Reingold force-directed layouts.

Simulated-annealing style: a temperature bounds how far a node may move
in one step and cools as iterations progress. Two variants are provided:

- ``FRLayout`` follows the published force model, ``k²/d`` repulsion and
  ``d²/k`` attraction, and jitters nodes that leave the border margin.
- ``FRLayout2`` uses ``k²/d²`` repulsion along the raw delta and linear
  attraction, doubles the push on a free node whose partner is locked,
  caps each step at 5 units and clamps into an inset canvas.

All-pairs repulsion is computed on numpy arrays; any NaN or infinite
value is an algorithm defect and raises ``LayoutError``.
"""

import logging
import math
from collections.abc import Hashable
from dataclasses import dataclass

import networkx as nx
import numpy as np

from pygraphlayout.errors import LayoutError, check_finite
from pygraphlayout.layout.base import (
    AbstractLayout,
    Initializer,
    IterativeContext,
    NodeDataMap,
    SizeLike,
    as_dimension,
)
from pygraphlayout.layout.box import BoundingBox
from pygraphlayout.model.graph import snapshot_edges

logger = logging.getLogger(__name__)

EPSILON = 0.000001


@dataclass
class FRNodeData:
    """Displacement accumulated for a node during one step."""

    x: float = 0.0
    y: float = 0.0

    def offset(self, dx: float, dy: float) -> None:
        self.x += dx
        self.y += dy

    def norm(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y)


def _pairwise_deltas(points: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Return (delta, distance) for all ordered pairs.

    delta[i, j] = points[i] - points[j]; distance has the same leading shape.
    """
    delta = points[:, None, :] - points[None, :, :]
    distance = np.sqrt(np.einsum("ijk,ijk->ij", delta, delta))
    return delta, distance


class _AnnealingLayout(AbstractLayout, IterativeContext):
    """Shared temperature schedule and bookkeeping of the FR variants."""

    def __init__(
        self,
        graph: nx.Graph,
        size: SizeLike | None = None,
        initializer: Initializer | None = None,
        seed: int | None = None,
        attraction_multiplier: float = 0.75,
        repulsion_multiplier: float = 0.75,
        max_iterations: int = 700,
    ) -> None:
        super().__init__(graph, initializer=initializer, seed=seed)
        self.attraction_multiplier = attraction_multiplier
        self.repulsion_multiplier = repulsion_multiplier
        self.max_iterations = max_iterations
        self.fr_node_data: NodeDataMap = NodeDataMap(FRNodeData)
        self.temperature = 0.0
        self.current_iteration = 0
        self.force_constant = 0.0
        self.attraction_constant = 0.0
        self.repulsion_constant = 0.0
        self.max_dimension = 0.0
        # Sum of squared capped displacements of the last step
        self.last_displacement_sq = 0.0
        self.start_with_size(size)

    def set_size(self, width: float, height: float) -> None:
        size = as_dimension((width, height))
        self.install_random_initializer(size)
        super().set_size(width, height)
        self.max_dimension = size.max_dimension

    def set_max_iterations(self, max_iterations: int) -> None:
        self.max_iterations = max_iterations

    def clear_node_data(self) -> None:
        self.fr_node_data.clear()

    def initialize(self) -> None:
        self._do_init()

    def reset(self) -> None:
        self._do_init()

    def _do_init(self) -> None:
        size = self.size
        if size is None:
            return
        self.current_iteration = 0
        self.temperature = size.width / 10
        self.force_constant = math.sqrt(size.height * size.width / self.graph.number_of_nodes())
        self.attraction_constant = self.attraction_multiplier * self.force_constant
        self.repulsion_constant = self.repulsion_multiplier * self.force_constant
        logger.debug(
            f"{type(self).__name__} initialized: temperature={self.temperature:.3f}, "
            f"k={self.force_constant:.3f}"
        )

    def step(self) -> None:
        self.require_size()
        self.current_iteration += 1
        nodes = self.nodes()
        self.calc_repulsion(nodes)
        for u, v in snapshot_edges(self.graph):
            self.calc_attraction(u, v)
        self.last_displacement_sq = 0.0
        for node in nodes:
            if self.is_locked(node):
                continue
            self.calc_position(node)
        self.cool()

    def cool(self) -> None:
        self.temperature *= 1.0 - self.current_iteration / self.max_iterations

    def done(self) -> bool:
        if self.size is None:
            return False
        if self.current_iteration > self.max_iterations or self.temperature < 1.0 / self.max_dimension:
            return True
        return False

    def _capped_displacement(self, node: Hashable) -> tuple[float, float]:
        fvd = self.fr_node_data[node]
        delta_length = max(EPSILON, fvd.norm())
        scale = min(delta_length, self.temperature) / delta_length
        dx = check_finite(fvd.x * scale, "calc_position [xdisp]")
        dy = check_finite(fvd.y * scale, "calc_position [ydisp]")
        return dx, dy

    def _positions_array(self, nodes: list[Hashable]) -> np.ndarray:
        return np.array([self.coordinates(node).as_tuple() for node in nodes], dtype=float).reshape(-1, 2)

    def calc_repulsion(self, nodes: list[Hashable]) -> None:
        raise NotImplementedError

    def calc_attraction(self, u: Hashable, v: Hashable) -> None:
        raise NotImplementedError

    def calc_position(self, node: Hashable) -> None:
        raise NotImplementedError


class FRLayout(_AnnealingLayout):
    """Fruchterman-Reingold layout.

    Args:
        graph: Graph to lay out
        size: Canvas size; the layout is seeded randomly inside it
        initializer: Optional seed function replacing random placement
        seed: Optional seed for random placement and border jitter
        attraction_multiplier: Scale of the edge attraction constant
        repulsion_multiplier: Scale of the node repulsion constant
        max_iterations: Iteration cap
    """

    def calc_repulsion(self, nodes: list[Hashable]) -> None:
        if not nodes:
            return
        delta, distance = _pairwise_deltas(self._positions_array(nodes))
        distance = np.maximum(distance, EPSILON)
        force = (self.repulsion_constant * self.repulsion_constant) / distance
        # delta is zero on the diagonal, so a node never pushes itself
        disp = np.sum(delta * (force / distance)[:, :, None], axis=1)
        if not np.all(np.isfinite(disp)):
            raise LayoutError("unexpected mathematical result in calc_repulsion [repulsion]")
        for node, (dx, dy) in zip(nodes, disp):
            data = self.fr_node_data[node]
            data.x = float(dx)
            data.y = float(dy)

    def calc_attraction(self, u: Hashable, v: Hashable) -> None:
        u_locked = self.is_locked(u)
        v_locked = self.is_locked(v)
        if u_locked and v_locked:
            return
        p1 = self.coordinates(u)
        p2 = self.coordinates(v)
        x_delta = p1.x - p2.x
        y_delta = p1.y - p2.y
        delta_length = max(EPSILON, math.sqrt(x_delta * x_delta + y_delta * y_delta))

        force = check_finite((delta_length * delta_length) / self.attraction_constant, "calc_attraction [force]")

        dx = (x_delta / delta_length) * force
        dy = (y_delta / delta_length) * force
        if not u_locked:
            self.fr_node_data[u].offset(-dx, -dy)
        if not v_locked:
            self.fr_node_data[v].offset(dx, dy)

    def calc_position(self, node: Hashable) -> None:
        size = self.require_size()
        dx, dy = self._capped_displacement(node)
        self.last_displacement_sq += dx * dx + dy * dy
        xyd = self.coordinates(node)
        new_x = xyd.x + dx
        new_y = xyd.y + dy

        border_width = size.width / 50.0
        if new_x < border_width:
            new_x = border_width + self.random.random() * border_width * 2.0
        elif new_x > size.width - border_width:
            new_x = size.width - border_width - self.random.random() * border_width * 2.0

        if new_y < border_width:
            new_y = border_width + self.random.random() * border_width * 2.0
        elif new_y > size.height - border_width:
            new_y = size.height - border_width - self.random.random() * border_width * 2.0

        xyd.set_location(new_x, new_y)


class FRLayout2(_AnnealingLayout):
    """Fruchterman-Reingold variant with locked-partner compensation and inner-bounds clamping.

    Takes the same arguments as ``FRLayout``.
    """

    def __init__(self, graph: nx.Graph, size: SizeLike | None = None, **kwargs) -> None:
        self.inner_bounds = BoundingBox(0.0, 0.0, 0.0, 0.0)
        super().__init__(graph, size=size, **kwargs)

    def set_size(self, width: float, height: float) -> None:
        super().set_size(width, height)
        self.inner_bounds = BoundingBox.from_size(self.size, inset=self.size.width / 50.0)

    def calc_repulsion(self, nodes: list[Hashable]) -> None:
        if not nodes:
            return
        delta, distance = _pairwise_deltas(self._positions_array(nodes))
        distance_sq = np.maximum(distance * distance, EPSILON)
        force = self.repulsion_constant * self.repulsion_constant
        if not math.isfinite(force):
            raise LayoutError("unexpected mathematical result in calc_repulsion [repulsion]")

        locked = np.array([self.is_locked(node) for node in nodes], dtype=bool)
        # A locked partner will not move away, so the free node takes the whole push
        n = len(nodes)
        weight = np.where(np.broadcast_to(locked[None, :], (n, n)), 2.0, 1.0)
        weight[locked[:, None] & locked[None, :]] = 0.0
        np.fill_diagonal(weight, 0.0)

        disp = np.sum(delta * (weight * force / distance_sq)[:, :, None], axis=1)
        if not np.all(np.isfinite(disp)):
            raise LayoutError("unexpected mathematical result in calc_repulsion [repulsion]")
        for node, (dx, dy) in zip(nodes, disp):
            data = self.fr_node_data[node]
            data.x = float(dx)
            data.y = float(dy)

    def calc_attraction(self, u: Hashable, v: Hashable) -> None:
        u_locked = self.is_locked(u)
        v_locked = self.is_locked(v)
        if u_locked and v_locked:
            return
        p1 = self.coordinates(u)
        p2 = self.coordinates(v)
        x_delta = p1.x - p2.x
        y_delta = p1.y - p2.y
        delta_length = max(EPSILON, p1.distance_to(p2))

        force = check_finite(delta_length / self.attraction_constant, "calc_attraction [force]")

        dx = x_delta * force
        dy = y_delta * force
        u_factor = 2.0 if v_locked else 1.0
        v_factor = 2.0 if u_locked else 1.0
        self.fr_node_data[u].offset(-u_factor * dx, -u_factor * dy)
        self.fr_node_data[v].offset(v_factor * dx, v_factor * dy)

    def calc_position(self, node: Hashable) -> None:
        dx, dy = self._capped_displacement(node)
        dx = max(-5.0, min(5.0, dx))
        dy = max(-5.0, min(5.0, dy))
        self.last_displacement_sq += dx * dx + dy * dy
        xyd = self.coordinates(node)
        xyd.set_location(xyd.x + dx, xyd.y + dy)
        self.inner_bounds.clamp(xyd)
