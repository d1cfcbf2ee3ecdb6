"""Kamada-Kawai spring layout.

Treats the graph as a system of springs between every pair of nodes whose
ideal lengths are proportional to their graph-theoretic distance. Each
step moves the single node with the largest energy gradient to a local
minimum by Newton-Raphson iteration.
"""

import logging
from collections.abc import Hashable

import networkx as nx
import numpy as np

from pygraphlayout.errors import LayoutError, check_finite
from pygraphlayout.layout.base import (
    AbstractLayout,
    Initializer,
    IterativeContext,
    SizeLike,
    as_dimension,
)
from pygraphlayout.model.graph import shortest_path_lengths

logger = logging.getLogger(__name__)

EPSILON = 0.1
# Coincident nodes would divide by zero
MIN_DISTANCE = 1e-9
NEWTON_ITERATIONS = 100


class KKLayout(AbstractLayout, IterativeContext):
    """Kamada-Kawai layout over unweighted shortest-path distances.

    Args:
        graph: Graph to lay out; edge direction is ignored
        size: Canvas size
        initializer: Optional seed function replacing random placement
        seed: Optional seed for random placement
        max_iterations: Iteration cap
        length_factor: Scale of the ideal edge length relative to the canvas
        disconnected_multiplier: Fraction of the diameter used between disconnected nodes
        adjust_for_gravity: Recenter unlocked nodes on the canvas after each step
        exchange_nodes: Swap node pairs to escape local minima
    """

    def __init__(
        self,
        graph: nx.Graph,
        size: SizeLike | None = None,
        initializer: Initializer | None = None,
        seed: int | None = None,
        max_iterations: int = 2000,
        length_factor: float = 0.9,
        disconnected_multiplier: float = 0.5,
        adjust_for_gravity: bool = True,
        exchange_nodes: bool = True,
    ) -> None:
        super().__init__(graph, initializer=initializer, seed=seed)
        self.max_iterations = max_iterations
        self.length_factor = length_factor
        self.disconnected_multiplier = disconnected_multiplier
        self.adjust_for_gravity = adjust_for_gravity
        self.exchange_nodes = exchange_nodes

        self.current_iteration = 0
        self.diameter = 0.0
        self.ideal_length = 0.0
        self.status = "KKLayout"
        self._nodes: list[Hashable] = []
        self._distances = np.zeros((0, 0))
        self._lengths = np.zeros((0, 0))
        self._strengths = np.zeros((0, 0))
        self.start_with_size(size)

    def set_size(self, width: float, height: float) -> None:
        # all nodes starting at one point would make every gradient vanish
        self.install_random_initializer(as_dimension((width, height)))
        super().set_size(width, height)

    def set_max_iterations(self, max_iterations: int) -> None:
        self.max_iterations = max_iterations

    def initialize(self) -> None:
        size = self.size
        if size is None:
            return
        self.current_iteration = 0
        self._nodes = self.nodes()
        n = len(self._nodes)
        index = {node: i for i, node in enumerate(self._nodes)}

        hops = np.full((n, n), np.inf)
        for source, lengths in shortest_path_lengths(self.graph).items():
            if source not in index:
                continue
            for target, length in lengths.items():
                if target in index:
                    hops[index[source], index[target]] = length

        finite = hops[np.isfinite(hops)]
        self.diameter = float(finite.max()) if finite.size else 0.0
        if self.diameter == 0:
            self.diameter = 1.0
        disconnected = self.diameter * self.disconnected_multiplier
        distances = np.minimum(hops, disconnected)
        np.fill_diagonal(distances, 1.0)

        self.ideal_length = size.min_dimension / self.diameter * self.length_factor
        self._distances = distances
        self._lengths = self.ideal_length * distances
        self._strengths = 1.0 / (distances * distances)
        logger.debug(
            f"KK initialized: {n} nodes, diameter={self.diameter}, ideal length={self.ideal_length:.3f}"
        )

    def reset(self) -> None:
        self.current_iteration = 0

    def _positions(self) -> np.ndarray:
        return np.array([self.coordinates(node).as_tuple() for node in self._nodes], dtype=float).reshape(-1, 2)

    def _store(self, xy: np.ndarray) -> None:
        for node, (x, y) in zip(self._nodes, xy):
            if not self.is_locked(node):
                self.coordinates(node).set_location(float(x), float(y))

    def energy(self, xy: np.ndarray | None = None) -> float:
        """Total spring energy of the current (or given) positions."""
        if xy is None:
            xy = self._positions()
        n = len(xy)
        if n < 2:
            return 0.0
        delta = xy[:, None, :] - xy[None, :, :]
        d = np.sqrt(np.einsum("ijk,ijk->ij", delta, delta))
        upper = np.triu_indices(n, 1)
        return float(np.sum(self._strengths[upper] / 2 * (d[upper] - self._lengths[upper]) ** 2))

    def _gradients(self, xy: np.ndarray) -> np.ndarray:
        delta = xy[:, None, :] - xy[None, :, :]
        d = np.maximum(np.sqrt(np.einsum("ijk,ijk->ij", delta, delta)), MIN_DISTANCE)
        common = self._strengths * (1 - self._lengths / d)
        np.fill_diagonal(common, 0.0)
        return np.sum(common[:, :, None] * delta, axis=1)

    def _delta_m(self, xy: np.ndarray, m: int) -> float:
        delta = xy[m] - xy
        d = np.maximum(np.hypot(delta[:, 0], delta[:, 1]), MIN_DISTANCE)
        common = self._strengths[m] * (1 - self._lengths[m] / d)
        common[m] = 0.0
        grad = np.sum(common[:, None] * delta, axis=0)
        return float(np.hypot(grad[0], grad[1]))

    def _delta_xy(self, xy: np.ndarray, m: int) -> tuple[float, float]:
        """Newton-Raphson displacement of node m."""
        others = np.arange(len(xy)) != m
        delta = xy[m] - xy[others]
        dx = delta[:, 0]
        dy = delta[:, 1]
        d = np.maximum(np.hypot(dx, dy), MIN_DISTANCE)
        ddd = d * d * d
        k = self._strengths[m][others]
        ideal = self._lengths[m][others]

        de_dx = np.sum(k * (1 - ideal / d) * dx)
        de_dy = np.sum(k * (1 - ideal / d) * dy)
        d2e_dx2 = np.sum(k * (1 - ideal * dy * dy / ddd))
        d2e_dxdy = np.sum(k * ideal * dx * dy / ddd)
        d2e_dy2 = np.sum(k * (1 - ideal * dx * dx / ddd))

        denominator = d2e_dx2 * d2e_dy2 - d2e_dxdy * d2e_dxdy
        delta_x = (d2e_dxdy * de_dy - d2e_dy2 * de_dx) / denominator
        delta_y = (d2e_dxdy * de_dx - d2e_dx2 * de_dy) / denominator
        return check_finite(float(delta_x), "calc_delta_xy [x]"), check_finite(float(delta_y), "calc_delta_xy [y]")

    def step(self) -> None:
        self.require_size()
        if len(self._nodes) != self.graph.number_of_nodes():
            logger.debug("Graph changed since initialization, rebuilding distance matrix")
            self.initialize()
        self.current_iteration += 1
        n = len(self._nodes)
        if n == 0:
            return

        xy = self._positions()
        self.status = f"Kamada-Kawai N={n} IT: {self.current_iteration} E={self.energy(xy):.3f}"

        locked = np.array([self.is_locked(node) for node in self._nodes], dtype=bool)
        delta_m = np.hypot(*self._gradients(xy).T)
        if not np.all(np.isfinite(delta_m)):
            raise LayoutError("unexpected mathematical result in calc_delta_m")
        delta_m[locked] = 0.0
        pm = int(np.argmax(delta_m))
        max_delta_m = float(delta_m[pm])
        if max_delta_m <= 0:
            return

        for _ in range(NEWTON_ITERATIONS):
            dx, dy = self._delta_xy(xy, pm)
            xy[pm] += (dx, dy)
            if self._delta_m(xy, pm) < EPSILON:
                break

        if self.adjust_for_gravity:
            self._adjust_for_gravity(xy, locked)

        if self.exchange_nodes and max_delta_m < EPSILON:
            self._exchange(xy, locked)

        self._store(xy)

    def _adjust_for_gravity(self, xy: np.ndarray, locked: np.ndarray) -> None:
        """Shift unlocked nodes so the center of gravity sits at the canvas center."""
        size = self.require_size()
        gravity = xy.mean(axis=0)
        shift = np.array([size.width / 2, size.height / 2]) - gravity
        xy[~locked] += shift

    def _exchange(self, xy: np.ndarray, locked: np.ndarray) -> None:
        """Swap the first pair of unlocked nodes whose exchange lowers the energy."""
        energy = self.energy(xy)
        n = len(xy)
        for i in range(n - 1):
            if locked[i]:
                continue
            for j in range(i + 1, n):
                if locked[j]:
                    continue
                xy[[i, j]] = xy[[j, i]]
                if self.energy(xy) < energy:
                    logger.debug(f"KK exchanged {self._nodes[i]!r} and {self._nodes[j]!r}")
                    return
                xy[[i, j]] = xy[[j, i]]

    def done(self) -> bool:
        return self.current_iteration > self.max_iterations
