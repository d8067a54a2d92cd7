"""
Image model handed between the picker, the crop tool and persistence.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Union
import logging

import cv2
import numpy as np
from PIL import Image

from ..geometry.primitives import Size
from .orientation import EXIF_ORIENTATION_TAG, Orientation, normalize_orientation, oriented_size, parse_orientation

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class SourceImage:
    """
    Pixel buffer plus the orientation it was stored with.

    Attributes:
        pixels: Raw buffer (BGR or grayscale numpy array, as stored)
        orientation: EXIF orientation of the buffer
    """
    pixels: np.ndarray
    orientation: Orientation = Orientation.UP

    def __post_init__(self):
        if self.pixels is None or self.pixels.ndim not in (2, 3):
            shape = None if self.pixels is None else self.pixels.shape
            raise ValueError(f"Invalid image shape: {shape}")
        if self.pixels.shape[0] == 0 or self.pixels.shape[1] == 0:
            raise ValueError(f"Image is empty: {self.pixels.shape}")

    @property
    def raw_size(self) -> Size:
        """Size of the stored buffer."""
        return Size(self.pixels.shape[1], self.pixels.shape[0])

    @property
    def size(self) -> Size:
        """Visual size, i.e. the size once orientation is applied."""
        w, h = oriented_size(self.pixels.shape[1], self.pixels.shape[0], self.orientation)
        return Size(w, h)

    def upright(self) -> "SourceImage":
        """New image with the orientation applied to the pixels."""
        return SourceImage(normalize_orientation(self.pixels, self.orientation), Orientation.UP)


def pil_to_bgr(pil_img: Image.Image) -> np.ndarray:
    rgb = np.array(pil_img.convert("RGB"))
    return cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR)


def bgr_to_pil(bgr: np.ndarray) -> Image.Image:
    if bgr.ndim == 2:
        return Image.fromarray(bgr)
    return Image.fromarray(cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB))


def from_pil(pil_img: Image.Image) -> SourceImage:
    """
    Wrap a Pillow image without applying its EXIF orientation.

    The raw buffer and the tag are kept apart so the crop tool can decide
    when to normalise.
    """
    orientation = parse_orientation(pil_img.getexif().get(EXIF_ORIENTATION_TAG, 1))
    return SourceImage(pil_to_bgr(pil_img), orientation)


def load_source_image(image_path: Union[str, Path]) -> SourceImage:
    """
    Load an image from disk, keeping the stored orientation tag.

    Args:
        image_path: Path to image file

    Returns:
        SourceImage with the raw pixels and its orientation

    Raises:
        FileNotFoundError: If image file doesn't exist
        ValueError: If image cannot be decoded
    """
    path = Path(image_path)
    if not path.exists():
        raise FileNotFoundError(f"Image not found: {path}")

    try:
        with Image.open(path) as pil_img:
            image = from_pil(pil_img)
    except OSError as e:
        raise ValueError(f"Could not load image: {path}") from e

    logger.debug(f"Loaded {path.name}: {image.raw_size.width}x{image.raw_size.height}, orientation {image.orientation.name}")
    return image


def encode_image(image: SourceImage, ext: str = ".jpg", quality: int = 92) -> bytes:
    """
    Encode an image for storage, upright and without orientation metadata.

    Args:
        image: Image to encode
        ext: Target format extension (".jpg", ".png", ...)
        quality: JPEG quality (ignored for other formats)

    Returns:
        Encoded bytes
    """
    pixels = normalize_orientation(image.pixels, image.orientation)
    params = [cv2.IMWRITE_JPEG_QUALITY, int(quality)] if ext.lower() in (".jpg", ".jpeg") else []
    ok, buffer = cv2.imencode(ext, pixels, params)
    if not ok:
        raise ValueError(f"Could not encode image as {ext}")
    return buffer.tobytes()


def save_image(image: SourceImage, output_path: Union[str, Path], quality: int = 92) -> Path:
    """Write an image to disk, creating parent directories as needed."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(encode_image(image, path.suffix or ".jpg", quality))
    logger.info(f"Saved image to {path}")
    return path
