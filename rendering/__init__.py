"""Rendering components for the flock viewer."""

from .birds import BirdRenderer
from .grid import Grid
from .text import TextRenderer

__all__ = ["BirdRenderer", "Grid", "TextRenderer"]
