"""
Error types raised by the crop/redress pipeline.
"""


class CropError(Exception):
    """Base class for crop session failures."""


class InvalidConfiguration(CropError):
    """The four corners do not form a convex quadrilateral."""


class RedressFailure(CropError):
    """The perspective transform could not be built or rasterized."""


class MissingSourceImage(CropError):
    """A commit was requested without a source image."""
