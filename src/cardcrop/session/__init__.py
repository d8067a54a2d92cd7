"""
Interactive crop session, rendering and background commit.
"""
from .crop_session import CropSession, DragEvent, DragEventType
from .rendering import render_overlay, magnifier_preview, place_magnifier
from .worker import RedressWorker

__all__ = [
    "CropSession",
    "DragEvent",
    "DragEventType",
    "render_overlay",
    "magnifier_preview",
    "place_magnifier",
    "RedressWorker",
]
