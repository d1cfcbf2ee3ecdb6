"""Error handling utilities for pygraphlayout.

Provides exception classes and validation helpers shared by
every layout algorithm.
"""

import math

import networkx as nx


class GraphLayoutError(Exception):
    """Base exception for pygraphlayout errors."""

    pass


class LayoutError(GraphLayoutError):
    """Exception raised when a layout computation hits an internal invariant violation."""

    def __init__(self, reason: str) -> None:
        """Initialize layout error.

        Args:
            reason: Reason for failure
        """
        self.reason = reason
        super().__init__(f"Layout calculation failed: {reason}")


class ValidationError(GraphLayoutError, ValueError):
    """Exception raised when input validation fails."""

    def __init__(self, field: str, value: object, expected: str) -> None:
        """Initialize validation error.

        Args:
            field: Field name that failed validation
            value: Invalid value
            expected: Expected type/description
        """
        self.field = field
        self.value = value
        self.expected = expected
        super().__init__(f"Validation failed for '{field}': expected {expected}, got {value!r}")


def validate_positive(value: int | float, name: str = "value") -> None:
    """Validate that a value is strictly positive and finite.

    Raises:
        ValidationError: If value is zero, negative or not finite
    """
    if not (math.isfinite(value) and value > 0):
        raise ValidationError(name, value, "positive number")


def validate_graph(graph: object, directed: bool = False) -> None:
    """Validate a layout's input graph.

    Args:
        graph: Graph to validate
        directed: Whether the layout needs successor/predecessor relations

    Raises:
        ValidationError: If the graph is missing, empty or of the wrong kind
    """
    if graph is None:
        raise ValidationError("graph", graph, "a networkx graph")
    if not isinstance(graph, nx.Graph):
        raise ValidationError("graph", type(graph).__name__, "a networkx graph")
    if graph.number_of_nodes() == 0:
        raise ValidationError("graph", graph, "a graph with at least one node")
    if directed and not graph.is_directed():
        raise ValidationError("graph", type(graph).__name__, "a directed graph")


def check_finite(value: float, where: str) -> float:
    """Return value unchanged, raising LayoutError if it is NaN or infinite.

    Args:
        value: Intermediate force or displacement value
        where: Name of the computation, reported in the error

    Raises:
        LayoutError: If value is not finite
    """
    if not math.isfinite(value):
        raise LayoutError(f"unexpected mathematical result in {where}: {value}")
    return value
