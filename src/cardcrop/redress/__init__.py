"""
Perspective redress of a selected quadrilateral.
"""
from .perspective_redress import PerspectiveRedressor, redress

__all__ = ["PerspectiveRedressor", "redress"]
