"""Layout whose positions are whatever the seed function or caller says."""

import networkx as nx

from pygraphlayout.layout.base import AbstractLayout, Initializer, SizeLike


class StaticLayout(AbstractLayout):
    """Coordinate store with no placement algorithm of its own.

    Positions come from the seed function on first access, or from explicit
    ``set_location`` calls. Useful as the delegate of an ``AggregateLayout``
    or for positions computed elsewhere.

    Args:
        graph: Graph whose nodes are stored
        initializer: Optional seed function
        size: Optional canvas size
    """

    def __init__(self, graph: nx.Graph, initializer: Initializer | None = None, size: SizeLike | None = None) -> None:
        super().__init__(graph, initializer=initializer)
        self.start_with_size(size)
