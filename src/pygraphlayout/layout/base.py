"""Coordinate store, layout contract and the iteration-control capability."""

import logging
import random
from collections.abc import Callable, Hashable
from typing import Any

import networkx as nx

from pygraphlayout.errors import LayoutError, ValidationError, validate_graph, validate_positive
from pygraphlayout.layout.seed import RandomLocationSeed
from pygraphlayout.model.graph import snapshot_nodes
from pygraphlayout.model.point import Dimension, Point

logger = logging.getLogger(__name__)

Initializer = Callable[[Hashable], "Point | tuple[float, float]"]
SizeLike = Dimension | tuple[float, float]


def as_dimension(size: SizeLike) -> Dimension:
    """Convert a Dimension or (width, height) pair to a validated Dimension.

    Raises:
        ValidationError: If either side is not a positive number
    """
    if isinstance(size, Dimension):
        width, height = size.width, size.height
    else:
        width, height = size
    validate_positive(width, "width")
    validate_positive(height, "height")
    return Dimension(float(width), float(height))


class NodeDataMap(dict):
    """Per-node auxiliary records created with a default value on first access.

    Each layout instance owns its maps; they are not shared and not thread-safe.
    """

    def __init__(self, factory: Callable[[], Any]) -> None:
        super().__init__()
        self._factory = factory

    def __missing__(self, node: Hashable) -> Any:
        value = self._factory()
        self[node] = value
        return value


class IterativeContext:
    """Optional capability for layouts that converge over repeated steps.

    An external driver calls ``step()`` until ``done()`` returns True.
    ``reset()`` restarts the iteration without re-seeding positions.
    """

    def step(self) -> None:
        raise NotImplementedError

    def done(self) -> bool:
        raise NotImplementedError

    def reset(self) -> None:
        pass


def is_iterative(layout: object) -> bool:
    """Check whether a layout implements the iteration-control capability."""
    return isinstance(layout, IterativeContext)


class Layout:
    """Contract every layout exposes to renderers and drivers.

    Point values returned by ``get`` are copies; callers own them.
    """

    @property
    def graph(self) -> nx.Graph:
        raise NotImplementedError

    @property
    def size(self) -> Dimension | None:
        raise NotImplementedError

    def nodes(self) -> list[Hashable]:
        raise NotImplementedError

    def set_size(self, width: float, height: float) -> None:
        raise NotImplementedError

    def initialize(self) -> None:
        raise NotImplementedError

    def reset(self) -> None:
        raise NotImplementedError

    def set_initializer(self, initializer: Initializer) -> None:
        raise NotImplementedError

    def get(self, node: Hashable) -> Point:
        raise NotImplementedError

    def set_location(self, node: Hashable, location: Point | tuple[float, float]) -> None:
        raise NotImplementedError

    def lock(self, node: Hashable, state: bool = True) -> None:
        raise NotImplementedError

    def is_locked(self, node: Hashable) -> bool:
        raise NotImplementedError

    def __call__(self, node: Hashable) -> Point:
        return self.get(node)

    def positions(self) -> dict[Hashable, Point]:
        """Snapshot of every node's current position."""
        return {node: self.get(node) for node in self.nodes()}


class AbstractLayout(Layout):
    """Base layout holding a lazily populated coordinate store.

    Every graph node gets exactly one store entry, created on first access
    from the seed function (copied, never aliased) or at (0, 0). Locked
    nodes are read by iterative steps but never written.

    Args:
        graph: Graph to lay out; read, never mutated
        initializer: Optional seed function mapping a node to its starting point
        size: Optional canvas size
        seed: Optional seed for the layout's random number generator
    """

    #: Whether the layout needs successor/predecessor relations
    requires_directed = False
    #: Whether resizing shifts existing positions by half the size change
    recenter_on_resize = True

    def __init__(
        self,
        graph: nx.Graph,
        initializer: Initializer | None = None,
        size: SizeLike | None = None,
        seed: int | None = None,
    ) -> None:
        validate_graph(graph, directed=self.requires_directed)
        self._graph = graph
        self._size: Dimension | None = as_dimension(size) if size is not None else None
        self._locations: dict[Hashable, Point] = {}
        self._locked: set[Hashable] = set()
        self._initializer: Initializer | None = None
        self.initialized = False
        self.random = random.Random(seed)
        if initializer is not None:
            self.set_initializer(initializer)

    @property
    def graph(self) -> nx.Graph:
        return self._graph

    @property
    def size(self) -> Dimension | None:
        return self._size

    def nodes(self) -> list[Hashable]:
        return snapshot_nodes(self._graph)

    def set_graph(self, graph: nx.Graph) -> None:
        """Swap the underlying graph.

        Positions of nodes that survive the swap are kept; auxiliary
        per-node state is discarded and the layout re-initialized.
        """
        validate_graph(graph, directed=self.requires_directed)
        self._graph = graph
        self._locations = {n: p for n, p in self._locations.items() if n in graph}
        self._locked &= set(graph.nodes)
        self.clear_node_data()
        if self._size is not None:
            self.initialize()

    def clear_node_data(self) -> None:
        """Discard per-node auxiliary state. Subclasses with caches override this."""

    def set_size(self, width: float, height: float) -> None:
        """Resize the canvas, re-initialize, and recenter existing positions."""
        old_size = self._size
        self._size = as_dimension((width, height))
        self.initialize()
        if old_size is not None and self.recenter_on_resize:
            logger.debug(f"Recentering {type(self).__name__} from {old_size} to {self._size}")
            self._adjust_locations(old_size, self._size)

    def start_with_size(self, size: SizeLike | None) -> None:
        """Apply a canvas size given at construction time through ``set_size``."""
        if size is not None:
            dimension = as_dimension(size)
            self.set_size(dimension.width, dimension.height)

    def _adjust_locations(self, old_size: Dimension, size: Dimension) -> None:
        x_offset = (size.width - old_size.width) / 2
        y_offset = (size.height - old_size.height) / 2
        for node in self.nodes():
            self.offset_node(node, x_offset, y_offset)

    def require_size(self) -> Dimension:
        """Return the canvas size, failing if it was never set.

        Raises:
            LayoutError: If no size has been set
        """
        if self._size is None:
            raise LayoutError(f"{type(self).__name__} needs a canvas size; call set_size() first")
        return self._size

    def set_initializer(self, initializer: Initializer) -> None:
        if initializer is self:
            raise ValidationError("initializer", initializer, "a seed function other than the layout itself")
        self._initializer = initializer
        self._locations.clear()
        self.initialized = True

    def install_random_initializer(self, size: Dimension) -> None:
        """Seed unplaced nodes uniformly at random unless a seed function exists."""
        if not self.initialized:
            self.set_initializer(RandomLocationSeed(size, self.random))

    def initialize(self) -> None:
        pass

    def reset(self) -> None:
        pass

    def coordinates(self, node: Hashable) -> Point:
        """Live stored point for a node, created on first access.

        Internal to layout algorithms; external callers use ``get``.
        """
        point = self._locations.get(node)
        if point is None:
            if self._initializer is not None:
                point = Point.of(self._initializer(node))
            else:
                point = Point()
            self._locations[node] = point
        return point

    def get(self, node: Hashable) -> Point:
        return self.coordinates(node).copy()

    def set_location(self, node: Hashable, location: Point | tuple[float, float]) -> None:
        """Move a node. Does not lock it."""
        p = Point.of(location)
        self.coordinates(node).set_location(p.x, p.y)

    def offset_node(self, node: Hashable, x_offset: float, y_offset: float) -> None:
        c = self.coordinates(node)
        self.set_location(node, (c.x + x_offset, c.y + y_offset))

    def lock(self, node: Hashable, state: bool = True) -> None:
        if state:
            self._locked.add(node)
        else:
            self._locked.discard(node)

    def lock_all(self, state: bool = True) -> None:
        """Lock or unlock every node of the graph."""
        for node in self.nodes():
            self.lock(node, state)

    def is_locked(self, node: Hashable) -> bool:
        return node in self._locked

    def __repr__(self) -> str:
        return f"{type(self).__name__}(nodes={self._graph.number_of_nodes()}, size={self._size})"
