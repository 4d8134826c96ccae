"""Rasterize an isolated svg clone over a region of interest.

:author: Shay Hill
:created: 2025-10-19

One pass: point the clone's viewBox at the region of interest (ROI), size it in
pixels, serialize it, await the backend's render (the only suspension point in a
pass), then draw the decoded image onto a fresh, transparent surface.

The ROI maps exactly onto the surface. ``preserveAspectRatio="none"`` keeps pixel
rounding of the surface size from letterboxing the ROI.
"""

from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING

from paragraphs import par
from PIL import Image, UnidentifiedImageError

from svg_visual_bbox.constructors import update_element
from svg_visual_bbox.exceptions import PixelReadSecurityError, RenderLoadError
from svg_visual_bbox.security import find_untrusted_references
from svg_visual_bbox.string_conversion import svg_tostring

if TYPE_CHECKING:
    from lxml.etree import (
        _Element as EtreeElement,  # pyright: ignore[reportPrivateUsage]
    )
    from PIL.Image import Image as ImageType

    from svg_visual_bbox.backends.base import RenderBackend
    from svg_visual_bbox.bounding_boxes.type_bounding_box import BoundingBox
    from svg_visual_bbox.document import SvgDocument

_log = logging.getLogger(__name__)

_TRANSPARENT = (0, 0, 0, 0)


class Raster:
    """A drawn RGBA surface.

    :param image: RGBA image. Owned by this raster. Do not share it.
    :param untrusted_references: references to cross-origin content drawn (or
        attempted) on this surface. Any reference taints the surface.
    """

    def __init__(
        self, image: ImageType, untrusted_references: tuple[str, ...] = ()
    ) -> None:
        """Initialize the raster."""
        self._image = image
        self.untrusted_references = untrusted_references

    @property
    def width(self) -> int:
        """Width in pixels."""
        return self._image.width

    @property
    def height(self) -> int:
        """Height in pixels."""
        return self._image.height

    @property
    def tainted(self) -> bool:
        """True if cross-origin content makes the pixels unreadable."""
        return bool(self.untrusted_references)

    def read_pixels(self) -> ImageType:
        """Read back the RGBA pixels.

        :return: the RGBA image
        :raises PixelReadSecurityError: if the surface is tainted. Being unable to
            read pixels is never the same as reading transparent pixels.
        """
        if self.tainted:
            refs = ", ".join(self.untrusted_references)
            msg = par(
                f"""Cannot read pixels: the surface is tainted by cross-origin
                references ({refs}). Ensure the svg and referenced images and fonts
                are same-origin with the document's base_url, or list their origins
                in SvgDocument.cors_origins if they are served with CORS
                headers."""
            )
            raise PixelReadSecurityError(msg, self.untrusted_references)
        return self._image


def get_pixel_size(roi: BoundingBox, pixels_per_unit: float) -> tuple[int, int]:
    """Get the raster size for a region at a resolution.

    :param roi: region of interest in user units
    :param pixels_per_unit: resolution factor
    :return: (width, height), each rounded and floored at 1
    """
    width = max(1, round(roi.width * pixels_per_unit))
    height = max(1, round(roi.height * pixels_per_unit))
    return width, height


def _decode_png(png: bytes) -> ImageType:
    """Decode png bytes to an RGBA image.

    :raises RenderLoadError: if the bytes are not a readable image, or the image
        is larger than Pillow will decode
    """
    try:
        with Image.open(io.BytesIO(png)) as image:
            return image.convert("RGBA")
    except (
        Image.DecompressionBombError,
        UnidentifiedImageError,
        OSError,
        ValueError,
    ) as e:
        msg = f"Failed decoding rendered svg: {e}"
        raise RenderLoadError(msg) from e


async def rasterize(
    clone: EtreeElement,
    roi: BoundingBox,
    pixels_per_unit: float,
    backend: RenderBackend,
    document: SvgDocument,
) -> Raster:
    """Rasterize an isolated svg root over a region of interest.

    :param clone: an isolated copy of an svg root. It is modified (viewBox,
        width, height, preserveAspectRatio), so never pass a live root.
    :param roi: region of interest in root user units. Must not be empty.
    :param pixels_per_unit: resolution factor
    :param backend: renderer
    :param document: where clone came from, to resolve and trust references
    :return: a Raster of exactly ``get_pixel_size(roi, pixels_per_unit)``
    :raises RenderLoadError: if the backend or the png decoder fails
    """
    width, height = get_pixel_size(roi, pixels_per_unit)
    _ = update_element(
        clone,
        viewBox=roi.view_box_str,
        width=width,
        height=height,
        preserveAspectRatio="none",
    )
    markup = svg_tostring(clone)
    untrusted = find_untrusted_references(clone, document)

    png = await backend.render(markup, width, height, base_url=document.base_url)
    drawn = _decode_png(png)
    if drawn.size != (width, height):
        _log.debug("resizing render from %s to %s", drawn.size, (width, height))
        drawn = drawn.resize((width, height))

    surface = Image.new("RGBA", (width, height), _TRANSPARENT)
    surface.alpha_composite(drawn)
    return Raster(surface, untrusted)
