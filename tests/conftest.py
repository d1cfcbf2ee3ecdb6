"""Shared fixtures for pygraphlayout tests."""

import sys
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import networkx as nx
import pytest


@pytest.fixture
def cycle_graph() -> nx.Graph:
    """Undirected 6-node cycle."""
    return nx.cycle_graph(6)


@pytest.fixture
def binary_tree() -> nx.DiGraph:
    """Root with two children, each with two children."""
    return nx.DiGraph(
        [
            ("root", "a"),
            ("root", "b"),
            ("a", "a1"),
            ("a", "a2"),
            ("b", "b1"),
            ("b", "b2"),
        ]
    )


@pytest.fixture
def diamond_dag() -> nx.DiGraph:
    """Small DAG: top -> left/right -> bottom."""
    return nx.DiGraph([("top", "left"), ("top", "right"), ("left", "bottom"), ("right", "bottom")])
