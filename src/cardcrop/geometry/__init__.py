"""
Geometry of the crop tool: primitives, corners, convexity, layout and projection.
"""
from .primitives import Point2D, Size, Rect, cross_product, clamp_to_rect
from .corners import CornerRole, CornerSet, CYCLE_ORDER
from .convexity import is_convex
from .viewport import compute_display_rect, to_display_local
from .projector import project_to_source_space, project_corners

__all__ = [
    "Point2D",
    "Size",
    "Rect",
    "cross_product",
    "clamp_to_rect",
    "CornerRole",
    "CornerSet",
    "CYCLE_ORDER",
    "is_convex",
    "compute_display_rect",
    "to_display_local",
    "project_to_source_space",
    "project_corners",
]
