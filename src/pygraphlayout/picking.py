"""Proximity queries against a layout.

Answers "which node or edge is closest to this point" and "which nodes
lie in this region" by scanning the layout's current positions. Positions
are gathered into numpy arrays once per query so the distance math is
vectorized.
"""

import math
from collections.abc import Hashable

import networkx as nx
import numpy as np

from pygraphlayout.layout.base import Layout
from pygraphlayout.layout.box import BoundingBox
from pygraphlayout.model.graph import snapshot_edges, snapshot_nodes


def point_segment_distance_sq(
    px: float, py: float, points_a: np.ndarray, points_b: np.ndarray
) -> np.ndarray:
    """Squared distance from a point to each segment a[i]-b[i].

    Args:
        px: X coordinate of the query point
        py: Y coordinate of the query point
        points_a: (n, 2) array of segment start points
        points_b: (n, 2) array of segment end points

    Returns:
        (n,) array of squared distances. Degenerate segments measure to their start point.
    """
    query = np.array([px, py], dtype=float)
    seg = points_b - points_a
    seg_len_sq = np.einsum("ij,ij->i", seg, seg)
    rel = query[None, :] - points_a
    with np.errstate(invalid="ignore", divide="ignore"):
        t = np.einsum("ij,ij->i", rel, seg) / seg_len_sq
    t = np.where(seg_len_sq > 0, np.clip(t, 0.0, 1.0), 0.0)
    closest = points_a + seg * t[:, None]
    diff = query[None, :] - closest
    return np.einsum("ij,ij->i", diff, diff)


class RadiusElementAccessor:
    """Find nodes and edges near a point within a maximum distance.

    Args:
        layout: Layout whose positions are queried
        graph: Graph to query (the layout's graph if None)
        max_distance: Default search radius; infinite when not given
    """

    def __init__(self, layout: Layout, graph: nx.Graph | None = None, max_distance: float = math.inf) -> None:
        self.layout = layout
        self._graph = graph
        self.max_distance = max_distance

    @property
    def graph(self) -> nx.Graph:
        return self._graph if self._graph is not None else self.layout.graph

    def _limit_sq(self, max_distance: float | None) -> float:
        limit = self.max_distance if max_distance is None else max_distance
        return limit * limit

    def nearest_node(self, x: float, y: float, max_distance: float | None = None) -> Hashable | None:
        """Return the node closest to (x, y), or None if none lies within range.

        Args:
            x: X coordinate of the query point
            y: Y coordinate of the query point
            max_distance: Search radius overriding the accessor's default

        Returns:
            Closest node, or None
        """
        nodes = snapshot_nodes(self.graph)
        if not nodes:
            return None
        positions = np.array([self.layout.get(node).as_tuple() for node in nodes], dtype=float)
        diff = positions - np.array([x, y], dtype=float)
        distance_sq = np.einsum("ij,ij->i", diff, diff)
        best = int(np.argmin(distance_sq))
        if distance_sq[best] >= self._limit_sq(max_distance):
            return None
        return nodes[best]

    def nearest_edge(
        self, x: float, y: float, max_distance: float | None = None
    ) -> tuple[Hashable, Hashable] | None:
        """Return the edge whose segment passes closest to (x, y).

        Self-loops and edges whose endpoints share a position are skipped.

        Args:
            x: X coordinate of the query point
            y: Y coordinate of the query point
            max_distance: Search radius overriding the accessor's default

        Returns:
            Closest edge as a (u, v) tuple, or None
        """
        edges = []
        starts = []
        ends = []
        for u, v in snapshot_edges(self.graph):
            p1 = self.layout.get(u)
            p2 = self.layout.get(v)
            if p1 == p2:
                continue
            edges.append((u, v))
            starts.append(p1.as_tuple())
            ends.append(p2.as_tuple())
        if not edges:
            return None

        distance_sq = point_segment_distance_sq(
            x, y, np.array(starts, dtype=float), np.array(ends, dtype=float)
        )
        best = int(np.argmin(distance_sq))
        if distance_sq[best] >= self._limit_sq(max_distance):
            return None
        return edges[best]

    def nodes_within(self, region: BoundingBox) -> set[Hashable]:
        """Return every node whose position lies inside region."""
        found = set()
        for node in snapshot_nodes(self.graph):
            p = self.layout.get(node)
            if region.contains_point(p.x, p.y):
                found.add(node)
        return found
