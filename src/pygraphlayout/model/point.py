"""Point and dimension classes for 2D layout."""

import math
from dataclasses import dataclass


@dataclass
class Point:
    """Mutable 2D point.

    Attributes:
        x: X coordinate
        y: Y coordinate
    """

    x: float = 0.0
    y: float = 0.0

    @classmethod
    def of(cls, value: "Point | tuple[float, float]") -> "Point":
        """Create a new point from a Point or an (x, y) pair.

        The result never aliases the argument.
        """
        if isinstance(value, Point):
            return cls(value.x, value.y)
        x, y = value
        return cls(float(x), float(y))

    def copy(self) -> "Point":
        """Return an independent copy of this point."""
        return Point(self.x, self.y)

    def set_location(self, x: float, y: float) -> None:
        """Move this point in place."""
        self.x = x
        self.y = y

    def translate(self, dx: float, dy: float) -> "Point":
        """Create a new point translated by the given amounts."""
        return Point(self.x + dx, self.y + dy)

    def distance_sq(self, other: "Point") -> float:
        """Squared distance to another point."""
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def distance_to(self, other: "Point") -> float:
        """Euclidean distance to another point."""
        return math.sqrt(self.distance_sq(other))

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)

    def __repr__(self) -> str:
        """String representation."""
        return f"Point(x={self.x:.2f}, y={self.y:.2f})"


@dataclass
class PolarPoint:
    """A position expressed as an angle (radians) and a radius around a center.

    Attributes:
        theta: Angle in radians
        radius: Distance from the center
    """

    theta: float = 0.0
    radius: float = 0.0

    def set_location(self, other: "PolarPoint") -> None:
        """Copy another polar point's coordinates into this one."""
        self.theta = other.theta
        self.radius = other.radius

    def to_cartesian(self) -> Point:
        """Convert to a Cartesian point relative to the origin."""
        return polar_to_cartesian(self.theta, self.radius)


def polar_to_cartesian(theta: float, radius: float) -> Point:
    """Convert polar coordinates to a Cartesian point around the origin.

    Args:
        theta: Angle in radians
        radius: Distance from the origin

    Returns:
        Cartesian point
    """
    return Point(radius * math.cos(theta), radius * math.sin(theta))


def cartesian_to_polar(point: Point) -> PolarPoint:
    """Convert a Cartesian point around the origin to polar coordinates.

    Args:
        point: Point relative to the origin

    Returns:
        Polar point with theta in (-pi, pi]
    """
    theta = math.atan2(point.y, point.x)
    radius = math.hypot(point.x, point.y)
    return PolarPoint(theta, radius)


@dataclass(frozen=True)
class Dimension:
    """Canvas size.

    Attributes:
        width: Width of the canvas
        height: Height of the canvas
    """

    width: float
    height: float

    @property
    def center(self) -> Point:
        """Get the center point of the canvas."""
        return Point(self.width / 2, self.height / 2)

    @property
    def max_dimension(self) -> float:
        """Larger of width and height."""
        return max(self.width, self.height)

    @property
    def min_dimension(self) -> float:
        """Smaller of width and height."""
        return min(self.width, self.height)
