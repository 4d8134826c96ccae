"""A protocol for the rendering capability measurement depends on.

This package does not render svg. It asks a backend to turn self-contained svg
markup into pixels, and to report the geometric extent of a drawing. Anything that
provides these two methods can be passed as ``backend=`` to the measuring
functions.

Attributes:
    render (coroutine method): svg markup to png bytes of an exact pixel size.
    geometric_bbox (method): geometric extent of a root svg's whole drawing, in
        its user units, ignoring viewBox clipping.

:author: Shay Hill
:created: 2025-10-19
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from lxml.etree import (
        _Element as EtreeElement,  # pyright: ignore[reportPrivateUsage]
    )

    from svg_visual_bbox.bounding_boxes.type_bounding_box import BoundingBox


class RenderBackend(Protocol):
    """Protocol for svg renderers."""

    async def render(
        self, markup: bytes, width: int, height: int, *, base_url: str | None = None
    ) -> bytes:
        """Render svg markup to a png image.

        :param markup: a complete svg document
        :param width: output width in pixels
        :param height: output height in pixels
        :param base_url: url relative references in markup resolve against
        :return: png bytes, transparent where nothing is drawn
        :raises RenderLoadError: if the markup cannot be rendered
        """
        ...

    def geometric_bbox(self, svg_root: EtreeElement) -> BoundingBox | None:
        """Get the geometric extent of everything drawn in an svg root.

        :param svg_root: an svg element
        :return: bounding box in svg_root user units, or None if nothing has
            geometry

        Measurement calls this in a worker thread, so it may block.
        """
        ...
