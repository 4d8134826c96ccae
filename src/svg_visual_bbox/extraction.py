"""Find the visible extent of a raster and map it back to user units.

:author: Shay Hill
:created: 2025-10-19

Any pixel with alpha > 0 is visible. There is no anti-aliasing threshold: a box a
fraction of a pixel too large is better than one that clips real content.

Every pixel is scanned. Visible content can appear anywhere on the surface, so
there is no early exit. Pillow does the scan in C (``getbbox`` on the alpha
channel), which finds the same min and max rows and columns of nonzero alpha that a
row-by-row loop would.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from svg_visual_bbox.bounding_boxes.type_bounding_box import BoundingBox

if TYPE_CHECKING:
    from PIL.Image import Image as ImageType

    from svg_visual_bbox.rasterize import Raster


def find_alpha_extents(pixels: ImageType) -> tuple[int, int, int, int] | None:
    """Find inclusive pixel extents of nonzero alpha.

    :param pixels: an RGBA (or LA) image
    :return: (x_min, y_min, x_max, y_max), all inclusive, or None if every pixel
        is fully transparent
    """
    box = pixels.getchannel("A").getbbox()
    if box is None:
        return None
    left, upper, right, lower = box
    return left, upper, right - 1, lower - 1


def extract_bbox_from_pixels(
    pixels: ImageType, pixels_per_unit: float, roi: BoundingBox
) -> BoundingBox | None:
    """Get the user-space box around the visible pixels of an image.

    :param pixels: RGBA image covering roi
    :param pixels_per_unit: resolution the image was drawn at
    :param roi: region of interest the image covers. Only the origin is used.
    :return: visible box in root user units or None

    A single lit pixel has width and height ``1 / pixels_per_unit``, not zero.
    """
    extents = find_alpha_extents(pixels)
    if extents is None:
        return None
    x_min, y_min, x_max, y_max = extents
    return BoundingBox(
        roi.x + x_min / pixels_per_unit,
        roi.y + y_min / pixels_per_unit,
        (x_max - x_min + 1) / pixels_per_unit,
        (y_max - y_min + 1) / pixels_per_unit,
    )


def extract_bbox(
    raster: Raster, pixels_per_unit: float, roi: BoundingBox
) -> BoundingBox | None:
    """Get the user-space box around the visible pixels of a raster.

    :param raster: surface from ``rasterize``
    :param pixels_per_unit: resolution the raster was drawn at
    :param roi: region of interest the raster covers
    :return: visible box in root user units or None
    :raises PixelReadSecurityError: if the raster is tainted
    """
    return extract_bbox_from_pixels(raster.read_pixels(), pixels_per_unit, roi)
