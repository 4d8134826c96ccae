"""Rendering backends.

:author: Shay Hill
:created: 2025-10-19

The cairo backend is imported on demand, because importing cairosvg fails on
systems without the cairo library.
"""

from svg_visual_bbox.backends.base import RenderBackend
from svg_visual_bbox.backends.inkscape import InkscapeBackend

__all__ = ["InkscapeBackend", "RenderBackend"]
