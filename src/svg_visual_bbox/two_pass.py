"""Two-pass visual bounding box of one svg element.

:author: Shay Hill
:created: 2025-10-19

1. Clone the root ``<svg>``, isolate the target element while keeping ``<defs>``.
2. PASS 1: rasterize a large region at coarse resolution -> rough bbox.
3. Expand rough bbox with a large safety margin.
4. PASS 2: rasterize only that region at high resolution -> precise bbox.

Filters, shadows, and markers can draw far outside an element's geometry, so the
margin has two terms. A percentage alone under-margins small elements. A constant
alone under-margins large ones.

All bounding boxes are in the root ``<svg>``'s user coordinate system (its viewBox
units). Each pass maps its pixels back to user units on its own, so the fine pass
refines the coarse result instead of transforming it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from svg_visual_bbox.bounding_boxes.bound_helpers import parse_view_box
from svg_visual_bbox.bounding_boxes.type_bounding_box import BoundingBox
from svg_visual_bbox.document import resolve_target, wait_for_document_fonts
from svg_visual_bbox.extraction import extract_bbox
from svg_visual_bbox.isolation import isolate_target
from svg_visual_bbox.options import BBoxOptions
from svg_visual_bbox.rasterize import rasterize

if TYPE_CHECKING:
    from lxml.etree import (
        _Element as EtreeElement,  # pyright: ignore[reportPrivateUsage]
    )

    from svg_visual_bbox.backends.base import RenderBackend
    from svg_visual_bbox.document import ResolvedTarget, SvgDocument

_log = logging.getLogger(__name__)


def default_backend() -> RenderBackend:
    """Create the default renderer, a cairosvg backend.

    :return: CairoBackend instance
    :raises ImportError: if cairosvg or the cairo library is missing
    """
    from svg_visual_bbox.backends.cairo import CairoBackend

    return CairoBackend()


async def get_geometric_region(
    svg_root: EtreeElement, backend: RenderBackend
) -> BoundingBox | None:
    """Get the geometric extent of a drawing without blocking the event loop.

    :param svg_root: an svg element
    :param backend: renderer
    :return: ``backend.geometric_bbox(svg_root)``, run in a worker thread. Parsing
        a drawing or calling an Inkscape subprocess can take a while.
    """
    return await asyncio.to_thread(backend.geometric_bbox, svg_root)


async def get_visible_region(
    svg_root: EtreeElement, document: SvgDocument, backend: RenderBackend
) -> BoundingBox | None:
    """Get the region of an svg root that is visible in its viewport.

    :param svg_root: an svg element
    :param document: the document svg_root is in
    :param backend: renderer, used for geometry if nothing else is known
    :return: the viewBox. Without one, the viewport at (0, 0) in css pixels.
        Without a viewport size, the geometric extent of the drawing.
    """
    view_box = parse_view_box(svg_root.get("viewBox"))
    if view_box is not None:
        return view_box
    viewport = document.get_viewport(svg_root)
    if viewport is not None:
        return BoundingBox(0, 0, *viewport)
    return await get_geometric_region(svg_root, backend)


async def get_search_region(
    svg_root: EtreeElement,
    document: SvgDocument,
    backend: RenderBackend,
    options: BBoxOptions,
) -> BoundingBox | None:
    """Get the coarse-pass region of interest.

    :param svg_root: an svg element
    :param document: the document svg_root is in
    :param backend: renderer
    :param options: ``mode`` selects the visible region ("clipped") or the
        geometric extent of the whole drawing ("unclipped")
    :return: region of interest in user units or None
    """
    if options.mode == "unclipped":
        return await get_geometric_region(svg_root, backend)
    return await get_visible_region(svg_root, document, backend)


def get_layout_scale(
    svg_root: EtreeElement, document: SvgDocument, options: BBoxOptions
) -> float:
    """Get rendered css pixels per user unit.

    :param svg_root: an svg element
    :param document: the document svg_root is in
    :param options: if ``use_layout_scale`` is False, the scale is 1
    :return: mean of the horizontal and vertical scale, or 1 if the viewBox or the
        rendered size is unknown
    """
    if not options.use_layout_scale:
        return 1.0
    view_box = parse_view_box(svg_root.get("viewBox"))
    viewport = document.get_viewport(svg_root)
    if view_box is None or viewport is None:
        return 1.0
    width, height = viewport
    if width <= 0 or height <= 0:
        return 1.0
    return (width / view_box.width + height / view_box.height) / 2


async def rasterize_and_extract(
    target: EtreeElement,
    svg_root: EtreeElement,
    roi: BoundingBox,
    pixels_per_unit: float,
    backend: RenderBackend,
    document: SvgDocument,
) -> BoundingBox | None:
    """Run one pass: isolate, rasterize, and scan.

    :param target: element to measure
    :param svg_root: the svg element that contains target
    :param roi: region of interest in user units
    :param pixels_per_unit: resolution factor
    :param backend: renderer
    :param document: the document svg_root is in
    :return: visible box in root user units, or None if roi is empty or nothing
        is visible in it
    """
    if roi.is_empty:
        return None
    clone, _ = isolate_target(target, svg_root)
    raster = await rasterize(clone, roi, pixels_per_unit, backend, document)
    return extract_bbox(raster, pixels_per_unit, roi)


async def measure_resolved(
    resolved: ResolvedTarget, options: BBoxOptions, backend: RenderBackend
) -> BoundingBox | None:
    """Run both passes for a resolved target. Fonts are assumed ready.

    :param resolved: element, its svg root, and its document
    :param options: measurement options
    :param backend: renderer
    :return: visual bounding box in root user units or None
    """
    target, svg_root, document = resolved
    coarse_roi = await get_search_region(svg_root, document, backend, options)
    if coarse_roi is None:
        _log.debug("no search region for %s", target.tag)
        return None

    base = get_layout_scale(svg_root, document, options)
    coarse_res, fine_res = options.resolutions(base)

    coarse_bbox = await rasterize_and_extract(
        target, svg_root, coarse_roi, coarse_res, backend, document
    )
    _log.debug("coarse pass %s @ %s -> %s", coarse_roi, coarse_res, coarse_bbox)
    if coarse_bbox is None:
        return None

    margin = options.margin_for(max(coarse_bbox.width, coarse_bbox.height))
    fine_roi = coarse_bbox.expand(margin)
    if fine_roi.is_empty:
        return None

    fine_bbox = await rasterize_and_extract(
        target, svg_root, fine_roi, fine_res, backend, document
    )
    _log.debug("fine pass %s @ %s -> %s", fine_roi, fine_res, fine_bbox)
    return fine_bbox


async def compute_bbox(
    target: EtreeElement | str,
    options: BBoxOptions | None = None,
    *,
    document: SvgDocument | None = None,
    backend: RenderBackend | None = None,
) -> BoundingBox | None:
    """Get the visual bounding box of one svg element.

    :param target: lxml element or the id of an element in ``document``
    :param options: measurement options, defaults to ``BBoxOptions()``
    :param document: the document target is in. Required for an id target.
    :param backend: renderer, defaults to a cairosvg backend
    :return: the box around every non-transparent pixel the element draws, in
        root-svg user units, or None if it draws nothing visible in the search
        region
    :raises NotFoundError: if target cannot be resolved
    :raises RenderLoadError: if the backend cannot render the isolated element
    :raises PixelReadSecurityError: if cross-origin content taints the raster
    """
    options = options or BBoxOptions()
    resolved = resolve_target(target, document)
    backend = backend or default_backend()
    await wait_for_document_fonts(resolved.document, options.font_timeout_ms)
    return await measure_resolved(resolved, options, backend)
