"""Errors raised while measuring visual bounding boxes.

:author: Shay Hill
:created: 2025-10-19

A degenerate region of interest is *not* an error. It collapses to a ``None``
result. Everything below is fatal for the call that raises it. Rasterization is
deterministic, so nothing here is retried.
"""

from __future__ import annotations


class VisualBBoxError(Exception):
    """Base class for every error raised by svg_visual_bbox."""


class NotFoundError(VisualBBoxError, LookupError):
    """A target element could not be resolved inside an svg document."""


class RenderLoadError(VisualBBoxError):
    """Serialized svg markup could not be rendered or decoded into pixels."""


class PixelReadSecurityError(VisualBBoxError):
    """Pixels cannot be read back from a surface tainted by cross-origin content.

    :param references: the offending resource references, in document order
    """

    def __init__(self, msg: str, references: tuple[str, ...] = ()) -> None:
        """Keep the references that tainted the surface."""
        super().__init__(msg)
        self.references = references


class CrossRootError(VisualBBoxError, ValueError):
    """Union targets do not all live in the same root svg element."""
