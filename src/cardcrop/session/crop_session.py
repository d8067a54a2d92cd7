"""
Crop session: the live state behind the four-handle crop tool.

A session is opened once the container size is known, holds the handles in
container coordinates while the user drags them, and on commit projects them
into source pixel space and runs the perspective redress.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional
import logging
import math

import cv2
import numpy as np

from ..errors import InvalidConfiguration, MissingSourceImage, RedressFailure
from ..geometry.convexity import is_convex
from ..geometry.corners import CornerRole, CornerSet
from ..geometry.primitives import Point2D, Rect, Size, clamp_to_rect
from ..geometry.projector import project_corners
from ..geometry.viewport import compute_display_rect
from ..imaging.orientation import normalize_orientation
from ..imaging.source_image import SourceImage
from ..redress.perspective_redress import PerspectiveRedressor

logger = logging.getLogger(__name__)


class DragEventType(Enum):
    """Kind of pointer event coming from the input layer."""
    CHANGED = "changed"
    ENDED = "ended"


@dataclass(frozen=True)
class DragEvent:
    """A pointer event aimed at one handle."""
    type: DragEventType
    position: Point2D
    role: CornerRole


class CropSession:
    """
    Transient state of one crop tool invocation.

    Attributes:
        source: Borrowed source image (never modified)
        display_rect: Where the image is drawn inside the container
        initial_corners: Corners restored by reset()
        corners: Live handle positions in container coordinates
        convex: Whether the live corners form a convex quadrilateral
        dragging: Role of the handle being dragged, or None when idle
        drag_position: Last accepted (clamped) drag position
    """

    def __init__(self, source: Optional[SourceImage], container_size: Size, config: Optional[Dict] = None):
        """
        Open a session over a laid-out container.

        Args:
            source: Image to crop. None is tolerated; commit then does nothing.
            container_size: Size of the viewport the image is fitted into
            config: Optional dict with 'crop' and 'redress' sections
        """
        config = config or {}
        self.crop_config = {
            'handle_hit_radius': 20.0,
        }
        self.crop_config.update(config.get('crop', {}))
        self.redress_config = dict(config.get('redress', {}))

        self.source = source
        self.container_size = container_size
        if source is not None:
            self.display_rect = compute_display_rect(container_size, source.size)
        else:
            self.display_rect = Rect(0.0, 0.0, container_size.width, container_size.height)

        self.initial_corners = CornerSet.from_rect(self.display_rect)
        self.corners = self.initial_corners
        self.convex = True
        self.dragging: Optional[CornerRole] = None
        self.drag_position: Optional[Point2D] = None
        self.closed = False
        self._display_image = None

        logger.debug(f"Opened crop session: container {container_size}, display rect {self.display_rect}")

    @property
    def is_dragging(self) -> bool:
        return self.dragging is not None

    def hit_test(self, point: Point2D) -> Optional[CornerRole]:
        """
        Find the handle whose hit region contains a press.

        Returns:
            Role of the nearest handle within the hit radius, or None
        """
        radius = self.crop_config['handle_hit_radius']
        best_role, best_distance = None, None
        for role, corner in self.corners.items():
            distance = math.hypot(point.x - corner.x, point.y - corner.y)
            if distance <= radius and (best_distance is None or distance < best_distance):
                best_role, best_distance = role, distance
        return best_role

    def drag(self, role: CornerRole, position: Point2D) -> Point2D:
        """
        Move one handle to a pointer position.

        The position is clamped to the display rect before it is accepted and
        the convexity flag is recomputed over all four corners.

        Args:
            role: Handle being dragged
            position: Raw pointer position in container coordinates

        Returns:
            The accepted (clamped) position

        Raises:
            ValueError: If the position is not finite
        """
        if not (math.isfinite(position.x) and math.isfinite(position.y)):
            raise ValueError(f"Drag position must be finite, got ({position.x}, {position.y})")

        accepted = clamp_to_rect(position, self.display_rect)
        self.corners = self.corners.with_corner(role, accepted)
        self.dragging = role
        self.drag_position = accepted
        self.convex = is_convex(self.corners)
        return accepted

    def end_drag(self) -> None:
        self.dragging = None

    def handle_event(self, event: DragEvent) -> None:
        """Dispatch an input-layer event to drag() or end_drag()."""
        if event.type == DragEventType.CHANGED:
            self.drag(event.role, event.position)
        elif event.type == DragEventType.ENDED:
            self.end_drag()
        else:
            raise ValueError(f"Unknown drag event type: {event.type}")

    def reset(self) -> None:
        """Put every handle back on the display rect corners."""
        self.corners = self.initial_corners
        self.convex = True
        self.dragging = None
        self.drag_position = None

    def display_image(self) -> np.ndarray:
        """
        Upright source pixels scaled to the display rect (BGR).

        Raises:
            MissingSourceImage: If the session has no source image
        """
        if self.source is None:
            raise MissingSourceImage("Session has no source image")

        if self._display_image is None:
            upright = normalize_orientation(self.source.pixels, self.source.orientation)
            if upright.ndim == 2:
                upright = cv2.cvtColor(upright, cv2.COLOR_GRAY2BGR)
            width = max(1, int(round(self.display_rect.width)))
            height = max(1, int(round(self.display_rect.height)))
            self._display_image = cv2.resize(upright, (width, height), interpolation=cv2.INTER_AREA)
        return self._display_image

    def redress_now(self, corners: Optional[CornerSet] = None) -> SourceImage:
        """
        Project the corners and run the redress.

        Args:
            corners: Snapshot of corners to use (defaults to the live ones)

        Returns:
            New upright image

        Raises:
            MissingSourceImage: If the session has no source image
            InvalidConfiguration: If the corners are not convex
            RedressFailure: If the redress fails
        """
        if self.source is None:
            raise MissingSourceImage("Cannot crop without a source image")

        corners = corners or self.corners
        if not is_convex(corners):
            raise InvalidConfiguration("Please adjust the points to form a convex shape.")

        # Orientation is applied here, before any source coordinate exists
        redressor = PerspectiveRedressor(self.source, self.redress_config)
        source_corners = project_corners(corners, self.display_rect, redressor.size)
        redressor.set_source_points(source_corners)
        return redressor.apply_correction()

    def commit(self, on_cropped: Optional[Callable[[SourceImage], None]] = None) -> Optional[SourceImage]:
        """
        Produce the cropped image if the selection allows it.

        A non-convex selection or a failed redress produces nothing and
        leaves the session open; the callback is only invoked on success.

        Args:
            on_cropped: Called with the new image on success

        Returns:
            The new image, or None if nothing was produced
        """
        if self.closed:
            logger.debug("Commit on a closed session ignored")
            return None

        try:
            result = self.redress_now()
        except MissingSourceImage as e:
            logger.error(f"Commit without source image: {e}")
            return None
        except InvalidConfiguration as e:
            logger.info(f"Commit refused: {e}")
            return None
        except RedressFailure as e:
            logger.warning(f"Redress failed, keeping previous image: {e}")
            return None

        if on_cropped is not None:
            on_cropped(result)
        return result

    def close(self) -> None:
        """Tear the session down; pending background results are dropped."""
        self.closed = True
        self.dragging = None
        self._display_image = None
