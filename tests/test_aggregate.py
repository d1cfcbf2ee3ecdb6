#!/usr/bin/env python3
"""Unit tests for the aggregate and decorator layouts.

Tests:
- Sublayout translation and inverse translation
- Delegate fallthrough
- Iteration fan-out
- Removal and lock forwarding
- Decorator forwarding
"""

import sys
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import networkx as nx

from pygraphlayout.layout import (
    AggregateLayout,
    FRLayout,
    ISOMLayout,
    LayoutDecorator,
    StaticLayout,
    is_iterative,
)
from pygraphlayout.model import Dimension, Point


def _aggregate() -> tuple[AggregateLayout, StaticLayout, StaticLayout]:
    graph = nx.path_graph(6)
    delegate = StaticLayout(graph, size=(600, 600))
    sub = StaticLayout(graph.subgraph([0, 1, 2]), size=(40, 40))
    aggregate = AggregateLayout(delegate)
    aggregate.put(sub, (300, 300))
    return aggregate, delegate, sub


def test_sublayout_positions_are_translated():
    """Test that a sublayout's canvas is centered on its center point."""
    aggregate, _, sub = _aggregate()
    sub.set_location(0, (10.0, 10.0))

    assert aggregate.get(0) == Point(290.0, 290.0)
    assert aggregate.owner(0) is sub
    assert aggregate.get_center(sub) == Point(300.0, 300.0)

    print("✓ Sublayout translation test passed")


def test_other_nodes_fall_through_to_delegate():
    """Test that nodes outside every sublayout come from the delegate."""
    aggregate, delegate, _ = _aggregate()
    delegate.set_location(4, (123.0, 45.0))

    assert aggregate.get(4) == Point(123.0, 45.0)
    assert aggregate.owner(4) is None
    assert aggregate.size == Dimension(600.0, 600.0)
    assert aggregate.nodes() == delegate.nodes()

    print("✓ Delegate fallthrough test passed")


def test_set_location_applies_inverse_translation():
    """Test that writes through the aggregate land in sublayout coordinates."""
    aggregate, delegate, sub = _aggregate()

    aggregate.set_location(1, (300.0, 300.0))
    aggregate.set_location(5, (1.0, 2.0))

    assert sub.get(1) == Point(20.0, 20.0)
    assert aggregate.get(1) == Point(300.0, 300.0)
    assert delegate.get(5) == Point(1.0, 2.0)

    print("✓ Inverse translation test passed")


def test_set_location_ignores_unknown_node():
    """Test that a node in no graph is not added to the delegate."""
    aggregate, delegate, _ = _aggregate()

    aggregate.set_location("ghost", (1.0, 1.0))

    assert "ghost" not in delegate._locations

    print("✓ Unknown node test passed")


def test_step_fans_out_until_all_done():
    """Test that stepping advances each unfinished iterative component."""
    graph = nx.cycle_graph(6)
    delegate = ISOMLayout(graph, size=(600, 600), seed=1, max_epoch=5)
    sub = ISOMLayout(graph.subgraph([0, 1, 2]), size=(40, 40), seed=2, max_epoch=3)
    aggregate = AggregateLayout(delegate)
    aggregate.put(sub, (100, 100))

    assert is_iterative(aggregate)
    aggregate.step()
    aggregate.step()
    assert sub.done()
    assert not aggregate.done()

    aggregate.step()
    aggregate.step()
    assert aggregate.done()
    assert sub.epoch == 3
    assert delegate.epoch == 5

    aggregate.reset()
    assert not aggregate.done()

    print("✓ Step fan-out test passed")


def test_aggregate_of_static_layouts_is_done():
    """Test that an aggregate with no iterative parts is always done."""
    aggregate, _, _ = _aggregate()

    aggregate.step()

    assert aggregate.done()

    print("✓ Static aggregate test passed")


def test_remove_reassigns_owner():
    """Test that removing a sublayout hands its nodes to another or the delegate."""
    graph = nx.path_graph(6)
    delegate = StaticLayout(graph, size=(600, 600))
    first = StaticLayout(graph.subgraph([0, 1]), size=(20, 20))
    second = StaticLayout(graph.subgraph([1, 2]), size=(20, 20))
    aggregate = AggregateLayout(delegate)
    aggregate.put(first, (50, 50))
    aggregate.put(second, (200, 200))
    assert aggregate.owner(1) is first

    aggregate.remove(first)
    assert aggregate.owner(1) is second
    assert aggregate.owner(0) is None
    assert first not in aggregate.layouts

    aggregate.remove_all()
    assert aggregate.owner(2) is None
    assert aggregate.layouts == {}

    print("✓ Remove test passed")


def test_lock_is_forwarded():
    """Test that locks reach both the owning sublayout and the delegate."""
    aggregate, delegate, sub = _aggregate()

    aggregate.lock(0)
    aggregate.lock(4)

    assert sub.is_locked(0)
    assert delegate.is_locked(0)
    assert aggregate.is_locked(4)
    assert not sub.is_locked(4)

    aggregate.lock(0, False)
    assert not aggregate.is_locked(0)

    print("✓ Lock forwarding test passed")


def test_decorator_forwards_to_delegate():
    """Test that an undecorated call reaches the wrapped layout."""
    inner = FRLayout(nx.cycle_graph(5), size=(200, 200), seed=3)
    decorator = LayoutDecorator(inner)

    decorator.step()
    decorator.set_location(0, (10.0, 20.0))
    decorator.lock(0)

    assert inner.current_iteration == 1
    assert inner.get(0) == Point(10.0, 20.0)
    assert inner.is_locked(0)
    assert decorator.get(0) == Point(10.0, 20.0)
    assert decorator.size == Dimension(200.0, 200.0)
    assert decorator.graph is inner.graph
    assert not decorator.done()
    assert "FRLayout" in repr(decorator)

    print("✓ Decorator forwarding test passed")


def test_decorator_over_static_layout_is_done():
    """Test that a non-iterative delegate makes the decorator done."""
    decorator = LayoutDecorator(StaticLayout(nx.path_graph(2)))

    decorator.step()

    assert decorator.done()

    decorator.delegate = FRLayout(nx.path_graph(2), size=(100, 100))
    assert not decorator.done()

    print("✓ Decorator static delegate test passed")


def test_node_added_to_sublayout_graph_changes_owner():
    """Test that a node first seen as delegate-owned moves to a sublayout once its graph gains it."""
    delegate = StaticLayout(nx.path_graph(6), size=(600, 600))
    sub_graph = nx.Graph([(0, 1)])
    sub = StaticLayout(sub_graph, size=(40, 40))
    aggregate = AggregateLayout(delegate)
    aggregate.put(sub, (300, 300))

    assert aggregate.owner(5) is None

    sub_graph.add_node(5)
    sub.set_location(5, (10.0, 10.0))

    assert aggregate.owner(5) is sub
    assert aggregate.get(5) == Point(290.0, 290.0)

    print("✓ Late ownership test passed")


def run_all_tests():
    """Run all aggregate and decorator tests."""
    print("=== Running Aggregate Layout Tests ===\n")

    test_sublayout_positions_are_translated()
    test_other_nodes_fall_through_to_delegate()
    test_set_location_applies_inverse_translation()
    test_set_location_ignores_unknown_node()
    test_step_fans_out_until_all_done()
    test_aggregate_of_static_layouts_is_done()
    test_remove_reassigns_owner()
    test_node_added_to_sublayout_graph_changes_owner()
    test_lock_is_forwarded()
    test_decorator_forwards_to_delegate()
    test_decorator_over_static_layout_is_done()

    print("\n=== All Aggregate Layout Tests Passed! ===")


if __name__ == "__main__":
    run_all_tests()
