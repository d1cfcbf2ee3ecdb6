"""Bounding box for region queries and bounds clamping."""

from dataclasses import dataclass

from pygraphlayout.model.point import Dimension, Point


@dataclass
class BoundingBox:
    """Axis-aligned 2D rectangle.

    Attributes:
        x: Minimum X coordinate
        y: Minimum Y coordinate
        width: Extent along X
        height: Extent along Y
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def min_x(self) -> float:
        """Minimum X coordinate."""
        return self.x

    @property
    def max_x(self) -> float:
        """Maximum X coordinate."""
        return self.x + self.width

    @property
    def min_y(self) -> float:
        """Minimum Y coordinate."""
        return self.y

    @property
    def max_y(self) -> float:
        """Maximum Y coordinate."""
        return self.y + self.height

    def intersects(self, other: "BoundingBox") -> bool:
        """Check if this bounding box intersects with another.

        Args:
            other: Other bounding box to check intersection with

        Returns:
            True if the boxes intersect, False otherwise
        """
        return (
            self.min_x < other.max_x
            and self.max_x > other.min_x
            and self.min_y < other.max_y
            and self.max_y > other.min_y
        )

    def contains_point(self, x: float, y: float) -> bool:
        """Check if a point is inside this bounding box (edges inclusive)."""
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def clamp(self, point: Point) -> None:
        """Move a point in place to the nearest location inside the box."""
        point.set_location(
            max(self.min_x, min(point.x, self.max_x)),
            max(self.min_y, min(point.y, self.max_y)),
        )

    @classmethod
    def from_corners(cls, x1: float, y1: float, x2: float, y2: float) -> "BoundingBox":
        """Create a bounding box from two opposite corners in any order."""
        return cls(x=min(x1, x2), y=min(y1, y2), width=abs(x2 - x1), height=abs(y2 - y1))

    @classmethod
    def from_size(cls, size: Dimension, inset: float = 0.0) -> "BoundingBox":
        """Create the canvas rectangle, optionally shrunk by an inset on every side.

        Args:
            size: Canvas size
            inset: Margin removed from each side

        Returns:
            A new BoundingBox instance
        """
        return cls.from_corners(inset, inset, size.width - inset, size.height - inset)
