"""
EXIF orientation handling.

A stored buffer may be rotated and/or mirrored relative to how it should be
viewed. The tag values follow the EXIF standard; normalising applies the
transform that brings the buffer upright.
"""
from enum import IntEnum
from typing import Tuple

import cv2
import numpy as np


class Orientation(IntEnum):
    """EXIF orientation tag (0x0112)."""
    UP = 1
    UP_MIRRORED = 2
    DOWN = 3
    DOWN_MIRRORED = 4
    LEFT_MIRRORED = 5
    RIGHT = 6
    RIGHT_MIRRORED = 7
    LEFT = 8

    @property
    def swaps_axes(self) -> bool:
        """Whether the upright image has width and height exchanged."""
        return self >= Orientation.LEFT_MIRRORED


EXIF_ORIENTATION_TAG = 0x0112


def parse_orientation(value) -> Orientation:
    """
    Convert a raw tag value into an Orientation.

    Missing or out-of-range values count as upright, the way image viewers
    treat them.
    """
    try:
        return Orientation(int(value))
    except (TypeError, ValueError):
        return Orientation.UP


def oriented_size(width: int, height: int, orientation: Orientation) -> Tuple[int, int]:
    """Width and height after normalisation."""
    if orientation.swaps_axes:
        return height, width
    return width, height


def normalize_orientation(pixels: np.ndarray, orientation: Orientation) -> np.ndarray:
    """
    Return an upright copy of a raw pixel buffer.

    Args:
        pixels: HxW or HxWxC array as stored
        orientation: Orientation tag of the buffer

    Returns:
        New contiguous array in upright orientation
    """
    if orientation == Orientation.UP:
        return pixels.copy()
    if orientation == Orientation.UP_MIRRORED:
        return cv2.flip(pixels, 1)
    if orientation == Orientation.DOWN:
        return cv2.rotate(pixels, cv2.ROTATE_180)
    if orientation == Orientation.DOWN_MIRRORED:
        return cv2.flip(pixels, 0)
    if orientation == Orientation.LEFT_MIRRORED:
        return cv2.transpose(pixels)
    if orientation == Orientation.RIGHT:
        return cv2.rotate(pixels, cv2.ROTATE_90_CLOCKWISE)
    if orientation == Orientation.RIGHT_MIRRORED:
        return cv2.flip(cv2.transpose(pixels), -1)
    if orientation == Orientation.LEFT:
        return cv2.rotate(pixels, cv2.ROTATE_90_COUNTERCLOCKWISE)
    raise ValueError(f"Unknown orientation: {orientation}")
