"""Render with cairosvg.

This optional module requires the cairosvg library and the cairo C library it
loads. Geometry comes from svgelements, which is pure Python.

:author: Shay Hill
:created: 2025-10-19
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from paragraphs import par

try:
    import cairosvg
    from cairocffi import CairoError
except (ImportError, OSError) as err:
    msg = par(
        """cairosvg or the cairo library is not installed. Install it using
        'pip install cairosvg' (and your platform's cairo package) to use
        svg_visual_bbox.backends.cairo."""
    )
    raise ImportError(msg) from err

from svg_visual_bbox.exceptions import RenderLoadError
from svg_visual_bbox.geometry import geometric_bbox

if TYPE_CHECKING:
    from lxml.etree import (
        _Element as EtreeElement,  # pyright: ignore[reportPrivateUsage]
    )

    from svg_visual_bbox.bounding_boxes.type_bounding_box import BoundingBox

_log = logging.getLogger(__name__)


class CairoBackend:
    """Render svg markup with cairosvg in a worker thread.

    :param unsafe: passed to cairosvg. Allow external file access, xml entities,
        and very large files. Leave False for untrusted documents.
    """

    def __init__(self, *, unsafe: bool = False) -> None:
        """Initialize the backend."""
        self.unsafe = unsafe

    async def render(
        self, markup: bytes, width: int, height: int, *, base_url: str | None = None
    ) -> bytes:
        """Render svg markup to png bytes of an exact size.

        :param markup: a complete svg document
        :param width: output width in pixels
        :param height: output height in pixels
        :param base_url: url relative references in markup resolve against
        :return: png bytes
        :raises RenderLoadError: if cairosvg cannot parse or draw the markup, or
            cairo cannot create a surface that large
        """
        _log.debug("cairosvg render %dx%d", width, height)
        try:
            png = await asyncio.to_thread(
                cairosvg.svg2png,
                bytestring=markup,
                url=base_url,
                output_width=width,
                output_height=height,
                unsafe=self.unsafe,
            )
        except (
            CairoError,
            ValueError,
            TypeError,
            OSError,
            SyntaxError,
            MemoryError,
        ) as e:
            msg = f"Failed rendering serialized svg with cairosvg: {e}"
            raise RenderLoadError(msg) from e
        if not png:
            msg = "Failed rendering serialized svg with cairosvg: no output"
            raise RenderLoadError(msg)
        return png

    def geometric_bbox(self, svg_root: EtreeElement) -> BoundingBox | None:
        """Get the geometric extent of a drawing with svgelements.

        :param svg_root: an svg element
        :return: bounding box in svg_root user units or None
        """
        return geometric_bbox(svg_root)
