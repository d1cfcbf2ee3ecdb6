"""Tests for the command line entry point."""

import sys
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import json
import math

import pytest

from pygraphlayout.__main__ import main, parse_args


@pytest.fixture
def square_edges(tmp_path: Path) -> Path:
    path = tmp_path / "square.edges"
    path.write_text("a b\nb c\nc d\nd a\n")
    return path


@pytest.fixture
def tree_edges(tmp_path: Path) -> Path:
    path = tmp_path / "tree.edges"
    path.write_text("root a\nroot b\na a1\n")
    return path


def test_parse_args_defaults(square_edges):
    """Test default option values."""
    args = parse_args([str(square_edges)])

    assert args.layout == "fr"
    assert args.width == 600.0
    assert args.height == 600.0
    assert args.iterations == 1000
    assert not args.directed
    assert args.seed is None

    print("✓ Argument defaults test passed")


def test_circle_layout_json(square_edges, capsys):
    """Test that the circle layout prints every node on the auto-sized circle."""
    assert main([str(square_edges), "--layout", "circle"]) == 0

    positions = json.loads(capsys.readouterr().out)
    assert sorted(positions) == ["a", "b", "c", "d"]
    for x, y in positions.values():
        assert math.hypot(x - 300.0, y - 300.0) == pytest.approx(270.0)

    print("✓ Circle CLI test passed")


def test_seeded_runs_are_reproducible(square_edges, capsys):
    """Test that --seed makes an iterative layout repeatable."""
    assert main([str(square_edges), "--layout", "fr", "--seed", "3", "--iterations", "50"]) == 0
    first = capsys.readouterr().out
    assert main([str(square_edges), "--layout", "fr", "--seed", "3", "--iterations", "50"]) == 0
    second = capsys.readouterr().out

    assert first == second

    print("✓ Seeded CLI test passed")


def test_tree_layout_requires_directed(tree_edges, capsys):
    """Test that a directed-only layout fails cleanly on an undirected read."""
    assert main([str(tree_edges), "--layout", "tree"]) == 1
    assert "Error:" in capsys.readouterr().err

    print("✓ Undirected tree CLI test passed")


def test_tree_layout_directed(tree_edges, capsys):
    """Test the tree layout from a directed edge list."""
    assert main([str(tree_edges), "--layout", "tree", "--directed"]) == 0

    positions = json.loads(capsys.readouterr().out)
    assert positions["root"][1] == pytest.approx(70.0)
    assert positions["a1"][1] == pytest.approx(170.0)

    print("✓ Directed tree CLI test passed")


def test_missing_file(tmp_path, capsys):
    """Test the error path for a nonexistent edge list."""
    assert main([str(tmp_path / "missing.edges")]) == 1
    assert "does not exist" in capsys.readouterr().err

    print("✓ Missing file CLI test passed")


def test_fr2_layout_json(square_edges, capsys):
    """Test that the FR2 layout runs from the command line and stays on the canvas."""
    assert main([str(square_edges), "--layout", "fr2", "--seed", "1", "--iterations", "20"]) == 0

    positions = json.loads(capsys.readouterr().out)
    assert sorted(positions) == ["a", "b", "c", "d"]
    for x, y in positions.values():
        assert 0.0 <= x <= 600.0
        assert 0.0 <= y <= 600.0

    print("✓ FR2 CLI test passed")
