"""
Image model, orientation handling and encoding.
"""
from .orientation import Orientation, normalize_orientation, oriented_size, parse_orientation
from .source_image import SourceImage, load_source_image, from_pil, encode_image, save_image

__all__ = [
    "Orientation",
    "normalize_orientation",
    "oriented_size",
    "parse_orientation",
    "SourceImage",
    "load_source_image",
    "from_pil",
    "encode_image",
    "save_image",
]
