"""Unit tests for the radial tree layout."""

import sys
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import math

import pytest

from pygraphlayout.errors import ValidationError
from pygraphlayout.layout import RadialTreeLayout, TreeLayout
from pygraphlayout.model import Point


def test_polar_projection_round_trips(binary_tree):
    """Test that inverting the projection recovers the tree-layout coordinates."""
    layout = RadialTreeLayout(binary_tree)

    for node in binary_tree:
        recovered = layout.polar_to_tree(layout.polar_locations[node])
        tree = layout.tree_location(node)
        assert recovered.x == pytest.approx(tree.x)
        assert recovered.y == pytest.approx(tree.y)

    print("✓ Radial round trip test passed")


def test_tree_coordinates_match_tree_layout(binary_tree):
    """Test that the underlying tree coordinates are the plain tree layout's."""
    radial = RadialTreeLayout(binary_tree)
    tree = TreeLayout(binary_tree)

    for node in binary_tree:
        assert radial.tree_location(node) == tree.get(node)

    print("✓ Radial tree coordinate test passed")


def test_get_lies_at_polar_radius_from_center(binary_tree):
    """Test that Cartesian output sits at the polar radius around the center."""
    layout = RadialTreeLayout(binary_tree)
    center = layout.center

    for node in binary_tree:
        p = layout.get(node)
        assert p.distance_to(center) == pytest.approx(layout.polar_locations[node].radius)

    print("✓ Radial distance test passed")


def test_deepest_row_reaches_half_width(binary_tree):
    """Test the radius scaling of the deepest row."""
    layout = RadialTreeLayout(binary_tree)

    deepest = layout.polar_locations["a1"].radius
    assert deepest == pytest.approx(300.0 * (170.0 - 50.0) / 170.0)
    assert deepest < layout.size.width / 2

    print("✓ Radial scaling test passed")


def test_set_location_round_trip(binary_tree):
    """Test that a moved node reads back where it was put."""
    layout = RadialTreeLayout(binary_tree)

    layout.set_location("a", (350.0, 260.0))

    p = layout.get("a")
    assert p.x == pytest.approx(350.0)
    assert p.y == pytest.approx(260.0)
    assert layout.polar_locations["a"].theta == pytest.approx(math.atan2(-40.0, 50.0))

    print("✓ Radial set_location test passed")


def test_set_size_rebuilds_around_new_center(binary_tree):
    """Test that resizing recomputes the projection around the new center."""
    layout = RadialTreeLayout(binary_tree)

    layout.set_size(800, 800)

    assert layout.center == Point(400.0, 400.0)
    assert layout.get("root").distance_to(layout.center) == pytest.approx(
        layout.polar_locations["root"].radius
    )
    assert layout.polar_locations["a1"].radius == pytest.approx(400.0 * 120.0 / 170.0)

    print("✓ Radial resize test passed")


def test_set_size_rejects_non_positive(binary_tree):
    """Test that a negative or zero canvas side is rejected and the old size kept."""
    layout = RadialTreeLayout(binary_tree)
    layout.set_size(800, 800)

    with pytest.raises(ValidationError):
        layout.set_size(-100, 0)

    assert layout.center == Point(400.0, 400.0)

    print("✓ Radial size validation test passed")
