"""
Convexity check for the four crop corners.
"""
from .corners import CornerSet
from .primitives import cross_product


def is_convex(corners: CornerSet) -> bool:
    """
    Check whether the corners form a convex quadrilateral.

    The points are walked in the cycle (top_left, top_right, bottom_right,
    bottom_left). The turn at every vertex must have the same sign as the
    turn at the first one. A zero cross product (three collinear corners)
    never matches, so degenerate sets are rejected. Either winding
    direction is accepted.

    Args:
        corners: Corner set in any coordinate space

    Returns:
        True if the quadrilateral is strictly convex
    """
    points = corners.in_cycle_order()
    turns = [
        cross_product(points[i - 1], points[i], points[(i + 1) % 4])
        for i in range(4)
    ]

    reference = turns[0]
    if reference == 0:
        return False

    positive = reference > 0
    return all(turn != 0 and (turn > 0) == positive for turn in turns)
