"""Operations built from several two-pass measurements.

:author: Shay Hill
:created: 2025-10-19

* union of several elements in one root svg
* visible (clipped to the viewBox) and full (unclipped) boxes of one element
* how far to expand a root viewBox so it shows the whole drawing
* repair a root svg missing its viewBox or size
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple

from svg_visual_bbox.bounding_boxes.bound_helpers import parse_view_box
from svg_visual_bbox.bounding_boxes.type_bounding_box import BoundingBox
from svg_visual_bbox.constructors import update_element
from svg_visual_bbox.document import (
    SvgDocument,
    resolve_target,
    wait_for_document_fonts,
)
from svg_visual_bbox.exceptions import CrossRootError, NotFoundError
from svg_visual_bbox.main import write_svg
from svg_visual_bbox.nsmap import is_svg_element
from svg_visual_bbox.options import BBoxOptions
from svg_visual_bbox.string_conversion import format_number
from svg_visual_bbox.two_pass import default_backend, measure_resolved
from svg_visual_bbox.unit_conversion import try_parse_unit

if TYPE_CHECKING:
    import os
    from collections.abc import Sequence

    from lxml.etree import (
        _Element as EtreeElement,  # pyright: ignore[reportPrivateUsage]
    )

    from svg_visual_bbox.backends.base import RenderBackend

_log = logging.getLogger(__name__)


class UnionBBox(NamedTuple):
    """Union of visual boxes.

    :param bbox: box around every visible element
    :param element_bboxes: each visible element mapped to its own box. Elements
        that draw nothing visible are left out.
    """

    bbox: BoundingBox
    element_bboxes: dict[EtreeElement, BoundingBox]


class VisibleAndFull(NamedTuple):
    """Visual box inside the viewBox and visual box of the whole drawing."""

    visible: BoundingBox | None
    full: BoundingBox | None


class Padding(NamedTuple):
    """Padding on each side of a box, in user units."""

    left: float
    top: float
    right: float
    bottom: float


class ViewBoxExpansion(NamedTuple):
    """How to expand a root viewBox so it covers the full drawing."""

    current_view_box: BoundingBox
    visible_bbox: BoundingBox | None
    full_bbox: BoundingBox
    padding: Padding
    new_view_box: BoundingBox


async def compute_union_bbox(
    targets: Sequence[EtreeElement | str],
    options: BBoxOptions | None = None,
    *,
    document: SvgDocument | None = None,
    backend: RenderBackend | None = None,
) -> UnionBBox | None:
    """Get the union of the visual bounding boxes of several elements.

    :param targets: lxml elements or ids of elements in ``document``
    :param options: measurement options, applied to every target
    :param document: the document targets are in. Required for id targets.
    :param backend: renderer, defaults to a cairosvg backend
    :return: the union of every non-None box and the box of each element, or None
        if no element draws anything visible
    :raises ValueError: if targets is empty
    :raises CrossRootError: if targets are in more than one root svg. This is
        checked before anything is rendered.
    """
    if not targets:
        msg = "targets must be a non-empty sequence of elements or ids"
        raise ValueError(msg)
    options = options or BBoxOptions()
    resolved = [resolve_target(t, document) for t in targets]
    svg_root = resolved[0].svg_root
    if any(r.svg_root is not svg_root for r in resolved[1:]):
        msg = "all elements must live in the same <svg> root"
        raise CrossRootError(msg)

    backend = backend or default_backend()
    await wait_for_document_fonts(resolved[0].document, options.font_timeout_ms)

    element_bboxes: dict[EtreeElement, BoundingBox] = {}
    for target in resolved:
        bbox = await measure_resolved(target, options, backend)
        if bbox is not None:
            element_bboxes[target.element] = bbox
    if not element_bboxes:
        return None
    return UnionBBox(BoundingBox.union(*element_bboxes.values()), element_bboxes)


async def compute_visible_and_full(
    target: EtreeElement | str,
    options: BBoxOptions | None = None,
    *,
    document: SvgDocument | None = None,
    backend: RenderBackend | None = None,
) -> VisibleAndFull:
    """Get an element's visual box inside the viewBox and ignoring the viewBox.

    :param target: lxml element or the id of an element in ``document``
    :param options: measurement options. ``mode`` is overridden.
    :param document: the document target is in. Required for an id target.
    :param backend: renderer, defaults to a cairosvg backend
    :return: (visible, full). Comparing the two shows content drawn outside the
        current viewport.
    """
    options = options or BBoxOptions()
    resolved = resolve_target(target, document)
    backend = backend or default_backend()
    await wait_for_document_fonts(resolved.document, options.font_timeout_ms)
    visible = await measure_resolved(resolved, options.replace(mode="clipped"), backend)
    full = await measure_resolved(resolved, options.replace(mode="unclipped"), backend)
    return VisibleAndFull(visible, full)


def get_view_box_expansion(
    current_view_box: BoundingBox,
    full_bbox: BoundingBox,
    visible_bbox: BoundingBox | None = None,
) -> ViewBoxExpansion:
    """Get the padding that makes a viewBox cover a full bbox.

    :param current_view_box: the root's viewBox
    :param full_bbox: the unclipped visual box of the drawing
    :param visible_bbox: optionally, the clipped visual box, for the record
    :return: per-side padding (never negative) and the padded viewBox. A viewBox
        that already covers the drawing is never shrunk.
    """
    padding = Padding(
        left=max(0.0, current_view_box.x - full_bbox.x),
        top=max(0.0, current_view_box.y - full_bbox.y),
        right=max(0.0, full_bbox.x2 - current_view_box.x2),
        bottom=max(0.0, full_bbox.y2 - current_view_box.y2),
    )
    new_view_box = current_view_box.expand(*padding)
    return ViewBoxExpansion(
        current_view_box, visible_bbox, full_bbox, padding, new_view_box
    )


async def compute_view_box_expansion(
    root_svg: EtreeElement | str,
    options: BBoxOptions | None = None,
    *,
    document: SvgDocument | None = None,
    backend: RenderBackend | None = None,
) -> ViewBoxExpansion | None:
    """Get how much to expand a root viewBox so it shows the whole drawing.

    :param root_svg: an ``<svg>`` element or its id in ``document``
    :param options: measurement options. ``mode`` is overridden.
    :param document: the document root_svg is in. Required for an id.
    :param backend: renderer, defaults to a cairosvg backend
    :return: current viewBox, visible and full boxes, padding, and new viewBox, or
        None if nothing is drawn at all
    :raises NotFoundError: if root_svg cannot be found or is not an ``<svg>``
    :raises ValueError: if root_svg has no usable viewBox
    """
    resolved = resolve_target(root_svg, document)
    if not is_svg_element(resolved.element):
        msg = f"target must be an <svg> element or its id, not {resolved.element.tag}"
        raise NotFoundError(msg)
    current_view_box = parse_view_box(resolved.element.get("viewBox"))
    if current_view_box is None:
        msg = "root <svg> must have a viewBox"
        raise ValueError(msg)

    visible, full = await compute_visible_and_full(
        resolved.element, options, document=resolved.document, backend=backend
    )
    if full is None:
        return None
    return get_view_box_expansion(current_view_box, full, visible)


def _scale_length(length: str, scale: float, fallback: float) -> str:
    """Scale an absolute length attribute value, keeping its unit.

    :param length: a width or height value, e.g., "60mm"
    :param scale: factor to multiply the value by
    :param fallback: user units to use if length is relative, unparseable, or not
        positive
    :return: scaled length string, e.g., "30mm"
    """
    parsed = try_parse_unit(length)
    if parsed is None or parsed[0] <= 0:
        return format_number(fallback)
    value, unit = parsed
    return f"{format_number(value * scale)}{unit.value[0]}"


def _synthesize_size(root: EtreeElement, view_box: BoundingBox) -> tuple[str, str]:
    """Fill in missing width and height from the viewBox aspect ratio.

    :param root: an svg element
    :param view_box: its viewBox
    :return: (width, height) attribute values. An existing value is kept as is. A
        derived value keeps the unit of the other. If the other cannot be scaled
        ("100%", "auto"), the derived value is the viewBox size in user units.
    """
    width = root.get("width")
    height = root.get("height")
    aspect = view_box.width / view_box.height
    if width is not None and height is not None:
        return width, height
    if width is not None:
        return width, _scale_length(width, 1 / aspect, view_box.height)
    if height is not None:
        return _scale_length(height, aspect, view_box.width), height
    return format_number(view_box.width), format_number(view_box.height)


async def repair_view_box(
    root_svg: EtreeElement,
    options: BBoxOptions | None = None,
    *,
    document: SvgDocument | None = None,
    backend: RenderBackend | None = None,
) -> EtreeElement:
    """Give a root svg a viewBox and size if it is missing them.

    :param root_svg: an ``<svg>`` element
    :param options: measurement options. ``mode`` is overridden.
    :param document: the document root_svg is in
    :param backend: renderer, defaults to a cairosvg backend
    :return: root_svg
    :raises ValueError: if the drawing has no visible content
    :effects: if there is no viewBox, sets it to the full visual bbox. If width or
        height are missing, synthesizes them from the viewBox aspect ratio. An
        existing viewBox is left alone.
    """
    _, full = await compute_visible_and_full(
        root_svg, options, document=document, backend=backend
    )
    if full is None:
        msg = "Full drawing bbox is empty; nothing to fix."
        raise ValueError(msg)

    view_box = parse_view_box(root_svg.get("viewBox"))
    if view_box is None:
        view_box = full
        _ = update_element(root_svg, viewBox=full.view_box_str)
        _log.debug("set viewBox to %s", full.view_box_str)

    width, height = _synthesize_size(root_svg, view_box)
    _ = update_element(root_svg, width=width, height=height)
    return root_svg


async def repair_svg_file(
    svg: str | os.PathLike[str],
    output: str | os.PathLike[str] | None = None,
    options: BBoxOptions | None = None,
    *,
    backend: RenderBackend | None = None,
) -> str:
    """Repair an svg file missing its viewBox or size.

    :param svg: path to an svg file
    :param output: optional path to output file. Defaults to
        ``<svg stem>.fixed.svg`` beside the input.
    :param options: measurement options
    :param backend: renderer, defaults to a cairosvg backend
    :return: output filename
    :raises FileNotFoundError: if svg does not exist
    :effects: writes the repaired svg to ``output``
    """
    svg = Path(svg)
    if not svg.exists():
        msg = f"SVG file does not exist: {svg}"
        raise FileNotFoundError(msg)
    output = svg.with_suffix(".fixed.svg") if output is None else Path(output)
    document = SvgDocument.from_file(svg)
    root = await repair_view_box(
        document.root, options, document=document, backend=backend
    )
    return write_svg(output, root)
