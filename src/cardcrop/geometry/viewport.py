"""
Aspect-fit layout of an image inside a container.
"""
from .primitives import Point2D, Rect, Size, clamp_to_rect

__all__ = ["compute_display_rect", "clamp_to_rect", "to_display_local"]


def compute_display_rect(container_size: Size, image_size: Size) -> Rect:
    """
    Compute where an image is drawn when fitted (contain) into a container.

    Args:
        container_size: Size of the viewport
        image_size: Visual size of the image

    Returns:
        Rectangle of the displayed image in container coordinates

    Raises:
        ValueError: If either size is not positive
    """
    container_aspect = container_size.aspect_ratio
    image_aspect = image_size.aspect_ratio

    if container_aspect > image_aspect:
        # Height-constrained, margins left and right
        height = container_size.height
        width = height * image_aspect
        return Rect((container_size.width - width) / 2, 0.0, width, height)

    # Width-constrained, margins top and bottom
    width = container_size.width
    height = width / image_aspect
    return Rect(0.0, (container_size.height - height) / 2, width, height)


def to_display_local(point: Point2D, display_rect: Rect) -> Point2D:
    """Convert a container point into the display rect's own coordinates."""
    return Point2D(point.x - display_rect.x, point.y - display_rect.y)
