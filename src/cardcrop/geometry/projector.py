"""
Projection of view-space points into source-image pixel space.

The redress engine expects a bottom-left origin, while view coordinates
have their origin at the top-left, so the y axis is inverted on the way.
"""
from .corners import CornerSet
from .primitives import Point2D, Rect, Size


def project_to_source_space(view_point: Point2D, display_rect: Rect, source_size: Size) -> Point2D:
    """
    Map a container point onto the (upright) source image.

    Args:
        view_point: Point in container coordinates
        display_rect: Where the image is displayed in the container
        source_size: Upright pixel size of the source image

    Returns:
        Source pixel coordinates with a bottom-left origin. No rounding.
    """
    if display_rect.width <= 0 or display_rect.height <= 0:
        raise ValueError(f"Display rect must have a positive size: {display_rect}")

    scale_x = source_size.width / display_rect.width
    scale_y = source_size.height / display_rect.height

    raw_x = (view_point.x - display_rect.x) * scale_x
    raw_y = (view_point.y - display_rect.y) * scale_y

    return Point2D(raw_x, source_size.height - raw_y)


def project_corners(corners: CornerSet, display_rect: Rect, source_size: Size) -> CornerSet:
    """Project each corner independently, keeping its role."""
    return CornerSet(
        top_left=project_to_source_space(corners.top_left, display_rect, source_size),
        top_right=project_to_source_space(corners.top_right, display_rect, source_size),
        bottom_right=project_to_source_space(corners.bottom_right, display_rect, source_size),
        bottom_left=project_to_source_space(corners.bottom_left, display_rect, source_size),
    )
