"""Composite layout: sublayouts for parts of the graph, a delegate for the rest."""

import logging
from collections.abc import Hashable

import networkx as nx

from pygraphlayout.layout.base import Initializer, IterativeContext, Layout, is_iterative
from pygraphlayout.model.point import Dimension, Point

logger = logging.getLogger(__name__)


class AggregateLayout(Layout, IterativeContext):
    """Combine a delegate layout with sublayouts placed at given centers.

    A node that belongs to a sublayout's graph is positioned by that
    sublayout, translated so the sublayout's canvas is centered on its
    center point. All other nodes are positioned by the delegate.

    Args:
        delegate: Layout for nodes outside every sublayout
    """

    def __init__(self, delegate: Layout) -> None:
        self._delegate = delegate
        self._layouts: dict[Layout, Point] = {}
        self._owners: dict[Hashable, Layout] = {}

    @property
    def delegate(self) -> Layout:
        return self._delegate

    @delegate.setter
    def delegate(self, delegate: Layout) -> None:
        self._delegate = delegate

    @property
    def layouts(self) -> dict[Layout, Point]:
        """Sublayouts and their centers."""
        return dict(self._layouts)

    def put(self, layout: Layout, center: Point | tuple[float, float]) -> None:
        """Add a sublayout, or move an existing one, centered at center."""
        self._layouts[layout] = Point.of(center)
        for node in layout.nodes():
            self._owners.setdefault(node, layout)
        logger.debug(f"Sublayout {layout!r} placed at {self._layouts[layout]}")

    def get_center(self, layout: Layout) -> Point | None:
        """Center a sublayout was put at, or None if it is not part of this aggregate."""
        center = self._layouts.get(layout)
        return center.copy() if center is not None else None

    def remove(self, layout: Layout) -> None:
        """Drop a sublayout; its nodes go to the next sublayout containing them, else the delegate."""
        if self._layouts.pop(layout, None) is None:
            return
        for node in [n for n, owner in self._owners.items() if owner is layout]:
            del self._owners[node]
            replacement = self._find_owner(node)
            if replacement is not None:
                self._owners[node] = replacement

    def remove_all(self) -> None:
        """Drop every sublayout so the delegate positions all nodes."""
        self._layouts.clear()
        self._owners.clear()

    def _find_owner(self, node: Hashable) -> Layout | None:
        for layout in self._layouts:
            if node in layout.graph:
                return layout
        return None

    def owner(self, node: Hashable) -> Layout | None:
        """Sublayout responsible for a node.

        A cached owner is re-checked against its graph. Nodes without an owner
        are looked up again on every call, so a node added to a sublayout graph
        later is picked up.

        Args:
            node: Node to look up

        Returns:
            Owning sublayout, or None when the delegate positions the node
        """
        layout = self._owners.get(node)
        if layout is not None and node in layout.graph:
            return layout
        layout = self._find_owner(node)
        if layout is not None:
            self._owners[node] = layout
        else:
            self._owners.pop(node, None)
        return layout

    def _offset(self, layout: Layout) -> tuple[float, float]:
        # a sublayout without a size is anchored at its center
        center = self._layouts[layout]
        size = layout.size
        if size is None:
            size = Dimension(0.0, 0.0)
        return center.x - size.width / 2, center.y - size.height / 2

    @property
    def graph(self) -> nx.Graph:
        return self._delegate.graph

    @property
    def size(self) -> Dimension | None:
        return self._delegate.size

    def nodes(self) -> list[Hashable]:
        return self._delegate.nodes()

    def set_size(self, width: float, height: float) -> None:
        self._delegate.set_size(width, height)

    def initialize(self) -> None:
        """Initialize the delegate, then every sublayout."""
        self._delegate.initialize()
        for layout in self._layouts:
            layout.initialize()

    def reset(self) -> None:
        """Restart iteration of every sublayout and the delegate."""
        for layout in self._layouts:
            layout.reset()
        self._delegate.reset()

    def set_initializer(self, initializer: Initializer) -> None:
        self._delegate.set_initializer(initializer)

    def get(self, node: Hashable) -> Point:
        """Position of a node in aggregate coordinates.

        Args:
            node: Node to look up

        Returns:
            Sublayout position shifted by the sublayout offset, or the delegate position
        """
        layout = self.owner(node)
        if layout is None:
            return self._delegate.get(node)
        dx, dy = self._offset(layout)
        return layout.get(node).translate(dx, dy)

    def set_location(self, node: Hashable, location: Point | tuple[float, float]) -> None:
        """Move a node given in aggregate coordinates.

        Owned nodes are translated back into sublayout coordinates. Nodes
        that are in no graph at all are ignored.
        """
        layout = self.owner(node)
        if layout is None:
            if node in self._delegate.graph:
                self._delegate.set_location(node, location)
            return
        dx, dy = self._offset(layout)
        layout.set_location(node, Point.of(location).translate(-dx, -dy))

    def lock(self, node: Hashable, state: bool = True) -> None:
        """Lock or unlock a node in every sublayout containing it and in the delegate."""
        for layout in self._layouts:
            if node in layout.graph:
                layout.lock(node, state)
        self._delegate.lock(node, state)

    def is_locked(self, node: Hashable) -> bool:
        """Whether any sublayout or the delegate holds the node locked."""
        if any(layout.is_locked(node) for layout in self._layouts):
            return True
        return self._delegate.is_locked(node)

    def _components(self) -> list[Layout]:
        return [*self._layouts, self._delegate]

    def step(self) -> None:
        """Advance every iterative sublayout and the delegate that is not done yet."""
        for layout in self._components():
            if is_iterative(layout) and not layout.done():
                layout.step()

    def done(self) -> bool:
        """True once every iterative component reports done."""
        return all(layout.done() for layout in self._components() if is_iterative(layout))
