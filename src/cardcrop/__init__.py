"""
cardcrop: four-corner perspective crop for photographed cards.

The geometry package keeps the handles valid and maps them into source
pixels, the redress package flattens the selected quadrilateral, and the
session package ties both to an interactive drag workflow.
"""
from .errors import CropError, InvalidConfiguration, RedressFailure, MissingSourceImage
from .geometry import CornerRole, CornerSet, Point2D, Rect, Size, is_convex, compute_display_rect, project_to_source_space
from .imaging import Orientation, SourceImage, load_source_image
from .redress import PerspectiveRedressor, redress
from .session import CropSession, RedressWorker

__version__ = "0.1.0"

__all__ = [
    "CropError",
    "InvalidConfiguration",
    "RedressFailure",
    "MissingSourceImage",
    "CornerRole",
    "CornerSet",
    "Point2D",
    "Rect",
    "Size",
    "is_convex",
    "compute_display_rect",
    "project_to_source_space",
    "Orientation",
    "SourceImage",
    "load_source_image",
    "PerspectiveRedressor",
    "redress",
    "CropSession",
    "RedressWorker",
]
