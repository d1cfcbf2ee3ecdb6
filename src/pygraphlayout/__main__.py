"""Main entry point for pygraphlayout."""

import argparse
import json
import logging
import sys
from collections.abc import Callable
from pathlib import Path

import networkx as nx

from pygraphlayout.errors import GraphLayoutError
from pygraphlayout.layout import (
    BalloonLayout,
    CircleLayout,
    DAGLayout,
    FRLayout,
    FRLayout2,
    ISOMLayout,
    KKLayout,
    Layout,
    RadialTreeLayout,
    SpringLayout,
    TreeLayout,
    is_iterative,
)

logger = logging.getLogger(__name__)

LayoutFactory = Callable[[nx.Graph, argparse.Namespace], Layout]


def _canvas(args: argparse.Namespace) -> tuple[float, float]:
    return (args.width, args.height)


def _radial(graph: nx.Graph, args: argparse.Namespace) -> Layout:
    layout = RadialTreeLayout(graph)
    layout.set_size(args.width, args.height)
    return layout


def _balloon(graph: nx.Graph, args: argparse.Namespace) -> Layout:
    layout = BalloonLayout(graph, seed=args.seed)
    layout.set_size(args.width, args.height)
    return layout


LAYOUTS: dict[str, LayoutFactory] = {
    "circle": lambda g, a: CircleLayout(g, size=_canvas(a)),
    "spring": lambda g, a: SpringLayout(g, size=_canvas(a), seed=a.seed),
    "fr": lambda g, a: FRLayout(g, size=_canvas(a), seed=a.seed),
    "fr2": lambda g, a: FRLayout2(g, size=_canvas(a), seed=a.seed),
    "isom": lambda g, a: ISOMLayout(g, size=_canvas(a), seed=a.seed),
    "kk": lambda g, a: KKLayout(g, size=_canvas(a), seed=a.seed),
    "dag": lambda g, a: DAGLayout(g, size=_canvas(a), seed=a.seed),
    "tree": lambda g, a: TreeLayout(g),
    "radial": _radial,
    "balloon": _balloon,
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Argument list (sys.argv[1:] if None)

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="pygraphlayout",
        description="Compute 2D node coordinates for a graph and print them as JSON",
    )
    parser.add_argument(
        "edgelist",
        type=Path,
        help="Edge list file, one 'u v' pair per line",
    )
    parser.add_argument(
        "--layout",
        choices=sorted(LAYOUTS),
        default="fr",
        help="Layout algorithm to use (default: fr)",
    )
    parser.add_argument(
        "--width",
        type=float,
        default=600.0,
        metavar="W",
        help="Canvas width (default: 600)",
    )
    parser.add_argument(
        "--height",
        type=float,
        default=600.0,
        metavar="H",
        help="Canvas height (default: 600)",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=1000,
        metavar="N",
        help="Maximum number of steps for iterative layouts (default: 1000)",
    )
    parser.add_argument(
        "--directed",
        action="store_true",
        help="Read the edge list as a directed graph (required by dag, tree, radial and balloon)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible layouts",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def run_layout(layout: Layout, iterations: int) -> int:
    """Step an iterative layout until done or out of iterations.

    Returns:
        Number of steps taken
    """
    if not is_iterative(layout):
        return 0
    steps = 0
    while steps < iterations and not layout.done():
        layout.step()
        steps += 1
    logger.debug(f"{type(layout).__name__} ran {steps} steps, done={layout.done()}")
    return steps


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code
    """
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    if not args.edgelist.is_file():
        print(f"Error: Edge list '{args.edgelist}' does not exist", file=sys.stderr)
        return 1

    create_using = nx.DiGraph if args.directed else nx.Graph
    try:
        graph = nx.read_edgelist(args.edgelist, create_using=create_using, nodetype=str)
    except (TypeError, ValueError) as e:
        print(f"Error: Could not read edge list '{args.edgelist}': {e}", file=sys.stderr)
        return 1

    try:
        layout = LAYOUTS[args.layout](graph, args)
        run_layout(layout, args.iterations)
    except GraphLayoutError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    positions = {str(node): [p.x, p.y] for node, p in layout.positions().items()}
    json.dump(positions, sys.stdout)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
