"""Unit tests for the circle layout."""

import sys
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import math

import networkx as nx
import pytest

from pygraphlayout.errors import ValidationError
from pygraphlayout.layout import CircleLayout


def test_five_nodes_on_given_radius():
    """Test placement of a 5-cycle with an explicit radius."""
    layout = CircleLayout(nx.cycle_graph(5), size=(200, 200), radius=80)

    for i in range(5):
        angle = 2 * math.pi * i / 5
        p = layout.get(i)
        assert p.x == pytest.approx(100.0 + 80.0 * math.cos(angle))
        assert p.y == pytest.approx(100.0 + 80.0 * math.sin(angle))
        assert layout.angle(i) == pytest.approx(angle)
    assert layout.get(0).x == pytest.approx(180.0)

    print("✓ Circle placement test passed")


def test_auto_radius_uses_smaller_side():
    """Test that an unset radius is 45% of the smaller canvas side."""
    layout = CircleLayout(nx.cycle_graph(4), size=(200, 100))

    assert layout.radius == pytest.approx(45.0)
    assert layout.get(0).x == pytest.approx(145.0)
    assert layout.get(0).y == pytest.approx(50.0)

    layout.set_size(400, 400)
    assert layout.radius == pytest.approx(180.0)

    print("✓ Circle auto radius test passed")


def test_explicit_node_order():
    """Test placing nodes in a caller-given order."""
    layout = CircleLayout(nx.path_graph(["a", "b", "c"]), size=(100, 100), radius=10)

    layout.set_node_order(nodes=["c", "a", "b"])
    layout.initialize()

    assert layout.angle("c") == 0.0
    assert layout.angle("a") == pytest.approx(2 * math.pi / 3)
    assert layout.node_order == ["c", "a", "b"]

    print("✓ Circle explicit order test passed")


def test_key_node_order():
    """Test sorting the node order with a key function."""
    layout = CircleLayout(nx.path_graph([3, 1, 2]), size=(100, 100), radius=10)

    layout.set_node_order(key=lambda node: -node)
    layout.reset()

    assert layout.node_order == [3, 2, 1]
    assert layout.angle(2) == pytest.approx(2 * math.pi / 3)

    print("✓ Circle key order test passed")


def test_incomplete_order_rejected():
    """Test that an explicit order missing nodes is rejected."""
    layout = CircleLayout(nx.path_graph(3), size=(100, 100))

    with pytest.raises(ValidationError):
        layout.set_node_order(nodes=[0, 1])

    print("✓ Circle order validation test passed")


def test_order_follows_graph_changes():
    """Test that removed nodes drop out of the order and new ones are appended."""
    graph = nx.path_graph(3)
    layout = CircleLayout(graph, size=(100, 100))
    layout.set_node_order(nodes=[2, 1, 0])

    graph.remove_node(1)
    graph.add_node(5)

    assert layout.node_order == [2, 0, 5]

    print("✓ Circle order update test passed")


def test_resize_keeps_circle_centered():
    """Test that resizing re-places nodes around the new center."""
    layout = CircleLayout(nx.cycle_graph(6), size=(200, 200), radius=50)

    layout.set_size(400, 300)

    for node in range(6):
        p = layout.get(node)
        assert math.hypot(p.x - 200.0, p.y - 150.0) == pytest.approx(50.0)

    print("✓ Circle resize test passed")


def test_locked_nodes_are_still_placed():
    """Test that the geometric placement does not consult locks."""
    layout = CircleLayout(nx.cycle_graph(4), size=(200, 200), radius=50)
    layout.set_location(0, (0.0, 0.0))
    layout.lock(0)

    layout.initialize()

    assert layout.get(0).x == pytest.approx(150.0)

    print("✓ Circle locking test passed")
