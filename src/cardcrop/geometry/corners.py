"""
Corner roles and the four-corner set manipulated by the crop tool.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterator, Tuple

import numpy as np

from .primitives import Point2D, Rect


class CornerRole(Enum):
    """Semantic role of a crop handle."""
    TOP_LEFT = "top_left"
    TOP_RIGHT = "top_right"
    BOTTOM_RIGHT = "bottom_right"
    BOTTOM_LEFT = "bottom_left"


# Cyclic order shared by the validator, projector and redress engine
CYCLE_ORDER = (
    CornerRole.TOP_LEFT,
    CornerRole.TOP_RIGHT,
    CornerRole.BOTTOM_RIGHT,
    CornerRole.BOTTOM_LEFT,
)


@dataclass(frozen=True)
class CornerSet:
    """
    Four corner points with fixed roles.

    No positional ordering is enforced (top_left.x may exceed top_right.x);
    only the winding of the cycle is ever checked.
    """
    top_left: Point2D
    top_right: Point2D
    bottom_right: Point2D
    bottom_left: Point2D

    @classmethod
    def from_rect(cls, rect: Rect) -> "CornerSet":
        """Corners of an axis-aligned rectangle."""
        return cls(
            top_left=Point2D(rect.min_x, rect.min_y),
            top_right=Point2D(rect.max_x, rect.min_y),
            bottom_right=Point2D(rect.max_x, rect.max_y),
            bottom_left=Point2D(rect.min_x, rect.max_y),
        )

    @classmethod
    def from_points(cls, points) -> "CornerSet":
        """
        Build from four (x, y) pairs in cycle order.

        Args:
            points: [top_left, top_right, bottom_right, bottom_left]

        Raises:
            ValueError: If not exactly 4 points are given
        """
        points = list(points)
        if len(points) != 4:
            raise ValueError(f"Expected 4 points, got {len(points)}")
        return cls(*(Point2D(float(x), float(y)) for x, y in points))

    def get(self, role: CornerRole) -> Point2D:
        return getattr(self, role.value)

    def with_corner(self, role: CornerRole, point: Point2D) -> "CornerSet":
        """Copy with one corner moved."""
        return replace(self, **{role.value: point})

    def in_cycle_order(self) -> Tuple[Point2D, Point2D, Point2D, Point2D]:
        return tuple(self.get(role) for role in CYCLE_ORDER)

    def items(self) -> Iterator[Tuple[CornerRole, Point2D]]:
        for role in CYCLE_ORDER:
            yield role, self.get(role)

    def to_array(self) -> np.ndarray:
        """4x2 float32 array in cycle order."""
        return np.array([p.as_tuple() for p in self.in_cycle_order()], dtype=np.float32)
