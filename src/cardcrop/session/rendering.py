"""
Drawing helpers for the crop tool: quadrilateral overlay and magnifier.
"""
from typing import Optional

import cv2
import numpy as np

from ..geometry.primitives import Point2D
from ..geometry.viewport import to_display_local
from .crop_session import CropSession

# BGR colors
NORMAL_COLOR = (255, 0, 0)
WARNING_COLOR = (0, 0, 255)
HANDLE_FILL = (255, 255, 255)
MAGNIFIER_BORDER = (128, 128, 128)


def render_overlay(session: CropSession, handle_radius: int = 20, background=(0, 0, 0)) -> np.ndarray:
    """
    Draw the container as the user sees it.

    The image is placed in its display rect, tinted red while the selection
    is not convex, with the quadrilateral outline and the four handles on top.

    Args:
        session: Crop session to draw
        handle_radius: Radius of a handle in pixels
        background: Letterbox color

    Returns:
        BGR image the size of the container
    """
    width = int(round(session.container_size.width))
    height = int(round(session.container_size.height))
    canvas = np.full((height, width, 3), background, dtype=np.uint8)

    display = session.display_image()
    x0 = int(round(session.display_rect.x))
    y0 = int(round(session.display_rect.y))
    h = min(display.shape[0], height - y0)
    w = min(display.shape[1], width - x0)
    canvas[y0:y0 + h, x0:x0 + w] = display[:h, :w]

    color = NORMAL_COLOR if session.convex else WARNING_COLOR
    if not session.convex:
        tint = np.zeros_like(canvas[y0:y0 + h, x0:x0 + w])
        tint[:] = WARNING_COLOR
        canvas[y0:y0 + h, x0:x0 + w] = cv2.addWeighted(canvas[y0:y0 + h, x0:x0 + w], 0.7, tint, 0.3, 0)

    points = np.round(session.corners.to_array()).astype(np.int32)
    cv2.polylines(canvas, [points.reshape(-1, 1, 2)], True, color, 2)

    for x, y in points:
        cv2.circle(canvas, (int(x), int(y)), handle_radius, HANDLE_FILL, -1)
        cv2.circle(canvas, (int(x), int(y)), handle_radius, NORMAL_COLOR, 2)

    return canvas


def magnifier_preview(session: CropSession, magnification: float = 2.0, size: int = 100) -> Optional[np.ndarray]:
    """
    Magnified circular view of the display image under the dragged handle.

    Args:
        session: Crop session
        magnification: Zoom factor
        size: Diameter of the preview in pixels

    Returns:
        size x size BGR image, or None when no handle is being dragged
    """
    if not session.is_dragging or session.drag_position is None:
        return None

    display = session.display_image()
    local = to_display_local(session.drag_position, session.display_rect)

    half = max(1, int(round(size / (2 * magnification))))
    cx, cy = int(round(local.x)), int(round(local.y))
    x0, y0 = cx - half, cy - half

    # Outside the image stays white
    patch = np.full((2 * half, 2 * half, 3), 255, dtype=np.uint8)
    h, w = display.shape[:2]
    sx0, sy0 = max(x0, 0), max(y0, 0)
    sx1, sy1 = min(x0 + 2 * half, w), min(y0 + 2 * half, h)
    if sx1 > sx0 and sy1 > sy0:
        patch[sy0 - y0:sy1 - y0, sx0 - x0:sx1 - x0] = display[sy0:sy1, sx0:sx1]

    zoomed = cv2.resize(patch, (size, size), interpolation=cv2.INTER_NEAREST)

    center = size // 2
    yy, xx = np.ogrid[:size, :size]
    zoomed[(xx - center) ** 2 + (yy - center) ** 2 > center ** 2] = 255
    cv2.circle(zoomed, (center, center), center - 1, MAGNIFIER_BORDER, 2)

    # Crosshair
    cv2.line(zoomed, (center, 0), (center, size - 1), (0, 0, 0), 2)
    cv2.line(zoomed, (0, center), (size - 1, center), (0, 0, 0), 2)

    return zoomed


def place_magnifier(canvas: np.ndarray, zoom: np.ndarray, position: Point2D, offset_y: float = -80.0) -> np.ndarray:
    """
    Paste a magnifier onto the overlay, centred offset_y pixels below the handle.

    A negative offset draws it above the pointer so the finger does not cover
    it. Only the circular part is pasted and anything past the canvas edges
    is clipped.

    Args:
        canvas: Overlay from render_overlay (modified in place)
        zoom: Square preview from magnifier_preview
        position: Handle position in container coordinates
        offset_y: Vertical offset of the magnifier centre

    Returns:
        The canvas
    """
    size = zoom.shape[0]
    center = size // 2
    x0 = int(round(position.x)) - center
    y0 = int(round(position.y + offset_y)) - center

    h, w = canvas.shape[:2]
    cx0, cy0 = max(x0, 0), max(y0, 0)
    cx1, cy1 = min(x0 + size, w), min(y0 + size, h)
    if cx1 <= cx0 or cy1 <= cy0:
        return canvas

    yy, xx = np.ogrid[:size, :size]
    inside = (xx - center) ** 2 + (yy - center) ** 2 <= center ** 2
    inside = inside[cy0 - y0:cy1 - y0, cx0 - x0:cx1 - x0]

    region = canvas[cy0:cy1, cx0:cx1]
    region[inside] = zoom[cy0 - y0:cy1 - y0, cx0 - x0:cx1 - x0][inside]
    return canvas
