"""Layout wrapper forwarding every call to a replaceable delegate."""

from collections.abc import Hashable

import networkx as nx

from pygraphlayout.layout.base import Initializer, IterativeContext, Layout, is_iterative
from pygraphlayout.model.point import Dimension, Point


class LayoutDecorator(Layout, IterativeContext):
    """Base for layouts that wrap another layout.

    Subclasses override the calls they want to change; everything else
    reaches the delegate untouched. Iteration calls are forwarded only
    when the delegate is iterative; a non-iterative delegate is always done.

    Args:
        delegate: Wrapped layout
    """

    def __init__(self, delegate: Layout) -> None:
        self._delegate = delegate

    @property
    def delegate(self) -> Layout:
        """Wrapped layout; assigning replaces it."""
        return self._delegate

    @delegate.setter
    def delegate(self, delegate: Layout) -> None:
        self._delegate = delegate

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
        self._delegate.initialize()

    def reset(self) -> None:
        self._delegate.reset()

    def set_initializer(self, initializer: Initializer) -> None:
        self._delegate.set_initializer(initializer)

    def get(self, node: Hashable) -> Point:
        """Position of a node as reported by the delegate."""
        return self._delegate.get(node)

    def set_location(self, node: Hashable, location: Point | tuple[float, float]) -> None:
        """Move a node in the delegate."""
        self._delegate.set_location(node, location)

    def lock(self, node: Hashable, state: bool = True) -> None:
        """Lock or unlock a node in the delegate."""
        self._delegate.lock(node, state)

    def is_locked(self, node: Hashable) -> bool:
        return self._delegate.is_locked(node)

    def step(self) -> None:
        """Advance the delegate one iteration if it is iterative."""
        if is_iterative(self._delegate):
            self._delegate.step()

    def done(self) -> bool:
        """Delegate convergence; a non-iterative delegate is always done."""
        if is_iterative(self._delegate):
            return self._delegate.done()
        return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._delegate!r})"
