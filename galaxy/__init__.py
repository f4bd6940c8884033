"""Procedural spiral galaxy rendered as an animated point cloud."""

from .animator import advance, display_rotation
from .engine import GalaxyEngine
from .generator import PointBuffer, generate
from .parameters import GalaxyConfigError, GalaxyParameters

__all__ = [
    "GalaxyParameters",
    "GalaxyConfigError",
    "PointBuffer",
    "generate",
    "advance",
    "display_rotation",
    "GalaxyEngine",
]

__version__ = "0.1.0"
