"""Read-only access to the input graph.

Layouts never mutate the graph, but a UI thread may add or remove
nodes and edges while a driver is stepping a layout. Every pass works
on a snapshot of the node or edge view; when taking the snapshot
observes a concurrent structural change (networkx raises
``RuntimeError`` with "dictionary changed size during iteration" from its
views, or "Graph changed during iteration" from its algorithms), only that
snapshot is retried.
"""

import logging
from collections.abc import Callable, Hashable, Iterable
from typing import TypeVar

import networkx as nx

from pygraphlayout.errors import ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_SNAPSHOT_RETRIES = 100

_CONCURRENT_CHANGE_MESSAGES = ("changed size during iteration", "changed during iteration")


def _snapshot(view: Callable[[], Iterable[T]], what: str) -> list[T]:
    for attempt in range(MAX_SNAPSHOT_RETRIES):
        try:
            return list(view())
        except RuntimeError as e:
            if not any(message in str(e) for message in _CONCURRENT_CHANGE_MESSAGES):
                raise
            logger.debug(f"Concurrent change while reading {what}, retrying (attempt {attempt + 1})")
    return list(view())


def snapshot_nodes(graph: nx.Graph) -> list[Hashable]:
    """Return the graph's nodes as a list, retrying on concurrent modification."""
    return _snapshot(lambda: graph.nodes, "nodes")


def snapshot_edges(graph: nx.Graph) -> list[tuple[Hashable, Hashable]]:
    """Return the graph's edges as (u, v) pairs, retrying on concurrent modification."""
    return _snapshot(lambda: graph.edges(), "edges")


def successors(graph: nx.Graph, node: Hashable) -> list[Hashable]:
    """Children of a node in a directed graph (empty for unknown nodes)."""
    if node not in graph:
        return []
    return _snapshot(lambda: graph.successors(node), f"successors of {node!r}")


def predecessors(graph: nx.Graph, node: Hashable) -> list[Hashable]:
    """Parents of a node in a directed graph (empty for unknown nodes)."""
    if node not in graph:
        return []
    return _snapshot(lambda: graph.predecessors(node), f"predecessors of {node!r}")


def neighbors(graph: nx.Graph, node: Hashable) -> list[Hashable]:
    """Adjacent nodes ignoring edge direction."""
    if node not in graph:
        return []
    if graph.is_directed():
        return _snapshot(lambda: dict.fromkeys(nx.all_neighbors(graph, node)), f"neighbors of {node!r}")
    return _snapshot(lambda: graph.neighbors(node), f"neighbors of {node!r}")


def degree(graph: nx.Graph, node: Hashable) -> int:
    """Number of incident edges (in plus out for directed graphs)."""
    if node not in graph:
        return 0
    return graph.degree(node)


def roots(graph: nx.DiGraph) -> list[Hashable]:
    """Nodes with no predecessors, in graph order."""
    return [node for node in snapshot_nodes(graph) if graph.in_degree(node) == 0]


def sinks(graph: nx.DiGraph) -> list[Hashable]:
    """Nodes with no successors, in graph order."""
    return [node for node in snapshot_nodes(graph) if graph.out_degree(node) == 0]


def topological_order(graph: nx.DiGraph) -> list[Hashable]:
    """Nodes with every predecessor before its successors."""
    return _snapshot(lambda: nx.topological_sort(graph), "topological order")


def shortest_path_lengths(graph: nx.Graph) -> dict[Hashable, dict[Hashable, int]]:
    """Unweighted hop counts between every reachable pair of nodes.

    Edge direction is ignored for directed graphs.

    Returns:
        Mapping of source node to a mapping of target node to hop count
    """
    undirected = graph.to_undirected(as_view=True) if graph.is_directed() else graph
    return dict(_snapshot(lambda: nx.all_pairs_shortest_path_length(undirected), "shortest path lengths"))


def validate_acyclic(graph: nx.DiGraph) -> None:
    """Fail fast when a directed graph contains a cycle.

    Raises:
        ValidationError: If the graph has a cycle or no roots
    """
    if not nx.is_directed_acyclic_graph(graph):
        cycle = nx.find_cycle(graph)
        raise ValidationError("graph", cycle, "a graph without cycles")
    if not roots(graph):
        raise ValidationError("graph", graph, "at least one root")
