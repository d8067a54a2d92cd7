"""
Point, size and rectangle primitives shared by the crop pipeline.

Coordinates carry no notion of which space they live in (container,
displayed image or source image); callers keep track of that.
"""
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Point2D:
    """A 2D point."""
    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Size:
    """Width and height of an image or container."""
    width: float
    height: float

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Size must be positive: {self.width}x{self.height}")
        return self.width / self.height


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle with a top-left origin."""
    x: float
    y: float
    width: float
    height: float

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def origin(self) -> Point2D:
        return Point2D(self.x, self.y)

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    @property
    def center(self) -> Point2D:
        return Point2D(self.x + self.width / 2, self.y + self.height / 2)


def cross_product(p1: Point2D, p2: Point2D, p3: Point2D) -> float:
    """
    Z-component of the cross product of (p1->p2) and (p1->p3).

    Positive when p1, p2, p3 turn one way, negative the other way and
    exactly zero when the three points are collinear.
    """
    return (p2.x - p1.x) * (p3.y - p1.y) - (p2.y - p1.y) * (p3.x - p1.x)


def clamp_to_rect(point: Point2D, rect: Rect) -> Point2D:
    """
    Clamp a point into a rectangle, each axis independently.

    Args:
        point: Point to clamp
        rect: Bounds (edges inclusive)

    Returns:
        The nearest point inside the rectangle. Coordinates must be finite;
        NaN is returned unchanged.
    """
    return Point2D(
        min(max(point.x, rect.min_x), rect.max_x),
        min(max(point.y, rect.min_y), rect.max_y),
    )
