"""
Perspective Redress Module

This module flattens the part of a photo bounded by four user-chosen corners
onto an upright rectangle using a homography.

Typical use case:
- User photographs a card at an angle
- User drags 4 handles onto the card's corners
- Handles are projected into source pixel space (bottom-left origin)
- System warps the quadrilateral into a straight rectangular image
"""

import cv2
import numpy as np
from typing import Dict, Optional, Tuple
import logging

from ..errors import RedressFailure
from ..geometry.corners import CornerSet
from ..geometry.primitives import Size
from ..imaging.orientation import Orientation, normalize_orientation
from ..imaging.source_image import SourceImage

logger = logging.getLogger(__name__)

SUPPORTED_INTERPOLATIONS = ("LINEAR", "CUBIC", "LANCZOS4")


class PerspectiveRedressor:
    """
    Maps a quadrilateral of a source image onto an upright rectangle.

    The source orientation is applied once, when the redressor is built, so
    `size` is the upright size that corner coordinates must be computed
    against.

    Attributes:
        image: Upright pixels of the source (numpy array)
        source_points: Corners in row/column pixel space, cycle order
        output_size: (width, height) of the redressed image
        config: Configuration dictionary with interpolation and limits
    """

    def __init__(self, image: SourceImage, config: Optional[Dict] = None):
        """
        Initialize the redressor with a source image.

        Args:
            image: Source image with its orientation tag
            config: Optional configuration dictionary. If None, uses defaults.
        """
        self.image = normalize_orientation(image.pixels, image.orientation)
        self.source_points = None
        self.output_size = None
        self.transformation_matrix = None
        self.redressed_image = None

        # Default configuration
        self.config = {
            'max_output_megapixels': 24.0,
            'interpolation_downsize': 'CUBIC',
            'interpolation_upsize': 'LINEAR',
            'min_quad_area': 1.0,
            'min_transformation_determinant': 0.01,
            'max_transformation_determinant': 100.0,
        }

        if config:
            self.config.update(config)

        for key in ('interpolation_downsize', 'interpolation_upsize'):
            if self.config[key] not in SUPPORTED_INTERPOLATIONS:
                raise ValueError(f"{key} must be one of {SUPPORTED_INTERPOLATIONS}, got {self.config[key]}")

    @property
    def size(self) -> Size:
        """Upright size of the source image."""
        return Size(self.image.shape[1], self.image.shape[0])

    def set_source_points(self, corners: CornerSet) -> None:
        """
        Set the corners to flatten.

        Args:
            corners: Corners in source pixel space with a bottom-left origin,
                     as produced by the coordinate projector

        Raises:
            RedressFailure: If the corners cannot bound a region
        """
        points = corners.to_array()
        if not np.all(np.isfinite(points)):
            raise RedressFailure(f"Corner coordinates are not finite: {points.tolist()}")

        # Back to row/column space, origin top-left
        points[:, 1] = self.image.shape[0] - points[:, 1]

        area = cv2.contourArea(points)
        if area < self.config['min_quad_area']:
            raise RedressFailure(f"Selected region is degenerate ({area:.2f} sq px)")

        self.source_points = points
        self.transformation_matrix = None
        self.output_size = self._calculate_output_size()

    def compute_transform(self) -> np.ndarray:
        """
        Compute the perspective transformation matrix.

        Returns:
            3x3 homography matrix

        Raises:
            RedressFailure: If source points are not set or the matrix is singular
        """
        if self.source_points is None:
            raise RedressFailure("Source points not set. Call set_source_points() first.")

        output_width_px, output_height_px = self.output_size

        # Destination points: upright rectangle
        dst_points = np.array([
            [0, 0],                                    # top-left
            [output_width_px, 0],                      # top-right
            [output_width_px, output_height_px],       # bottom-right
            [0, output_height_px]                      # bottom-left
        ], dtype=np.float32)

        try:
            matrix = cv2.getPerspectiveTransform(self.source_points, dst_points)
        except cv2.error as e:
            raise RedressFailure(f"Could not compute perspective transform: {e}") from e

        if matrix is None or not np.all(np.isfinite(matrix)) or abs(np.linalg.det(matrix)) < 1e-12:
            raise RedressFailure("Perspective transform is singular")

        self.transformation_matrix = matrix
        self._validate_transformation_matrix()

        logger.debug(f"Computed transformation matrix for {output_width_px}x{output_height_px}px output")

        return self.transformation_matrix

    def apply_correction(self) -> SourceImage:
        """
        Warp the selected quadrilateral onto the output rectangle.

        Returns:
            New upright image (orientation UP)

        Raises:
            RedressFailure: If the transform or the raster cannot be produced
        """
        if self.transformation_matrix is None:
            self.compute_transform()

        output_width_px, output_height_px = self.output_size

        # Select interpolation method based on sizing
        input_area = self.image.shape[0] * self.image.shape[1]
        output_area = output_width_px * output_height_px
        is_downsizing = output_area < input_area

        interp_method = self.config['interpolation_downsize'] if is_downsizing else self.config['interpolation_upsize']
        flags = getattr(cv2, f"INTER_{interp_method}")

        try:
            warped = cv2.warpPerspective(
                self.image,
                self.transformation_matrix,
                (output_width_px, output_height_px),
                flags=flags
            )
        except cv2.error as e:
            raise RedressFailure(f"Could not rasterize redressed image: {e}") from e

        if warped is None or warped.size == 0:
            raise RedressFailure("Redressed image is empty")

        self.redressed_image = SourceImage(warped, Orientation.UP)

        logger.info(f"Applied perspective redress: {self.image.shape[:2]} -> {warped.shape[:2]}")
        logger.debug(f"Interpolation: {interp_method} ({'downsizing' if is_downsizing else 'upsizing'})")

        return self.redressed_image

    def _calculate_output_size(self) -> Tuple[int, int]:
        """
        Pick the output resolution from the straightened quadrilateral.

        Width and height are the longer of each pair of opposite edges,
        scaled down if the result exceeds the configured megapixel cap.

        Returns:
            (width_px, height_px) tuple
        """
        tl, tr, br, bl = self.source_points
        width = max(np.linalg.norm(tr - tl), np.linalg.norm(br - bl))
        height = max(np.linalg.norm(br - tr), np.linalg.norm(bl - tl))

        output_width_px = int(round(width))
        output_height_px = int(round(height))

        if output_width_px < 1 or output_height_px < 1:
            raise RedressFailure(f"Selected region too thin: {width:.2f}x{height:.2f}px")

        max_pixels = self.config['max_output_megapixels'] * 1_000_000
        if output_width_px * output_height_px > max_pixels:
            scale = np.sqrt(max_pixels / (output_width_px * output_height_px))
            output_width_px = max(1, int(output_width_px * scale))
            output_height_px = max(1, int(output_height_px * scale))
            logger.info(f"Output capped at {self.config['max_output_megapixels']}MP: {output_width_px}x{output_height_px}px")

        return output_width_px, output_height_px

    def _validate_transformation_matrix(self) -> None:
        """Warn about extreme distortion in the computed transformation matrix."""
        det = np.linalg.det(self.transformation_matrix[:2, :2])

        min_det = self.config['min_transformation_determinant']
        max_det = self.config['max_transformation_determinant']

        if abs(det) < min_det or abs(det) > max_det:
            logger.warning(
                f"Transformation matrix determinant {det:.3f} outside normal range "
                f"[{min_det}, {max_det}]. This may indicate extreme perspective distortion."
            )


def redress(image: SourceImage, corners: CornerSet, config: Optional[Dict] = None) -> SourceImage:
    """
    Convenience function to perform the redress in one call.

    Args:
        image: Source image with its orientation tag
        corners: Corners in upright source pixel space, bottom-left origin
        config: Optional configuration dictionary

    Returns:
        Redressed, upright image

    Raises:
        RedressFailure: If the transform or raster cannot be produced
    """
    redressor = PerspectiveRedressor(image, config)
    redressor.set_source_points(corners)
    return redressor.apply_correction()
