"""Geometric extent of an svg drawing.

The unclipped search region is the geometric extent of everything the root draws,
whether or not the viewBox shows it. Treat this as a place to start looking, never
as a result. The fine pass and its margin do the rest.

svgelements gives text no width or height, and glyph extents depend on fonts it
cannot load. Each ``<text>`` is swapped for a generous placeholder rect around its
anchor: one em of advance per character on either side (to cover any
``text-anchor`` and right-to-left runs), 1.2 em above the baseline and 0.5 em
below. The placeholder keeps the text's transform and ancestors, so it lands where
the text does.

:author: Shay Hill
:created: 2025-10-19
"""

from __future__ import annotations

import copy
import io
import math
import re
from typing import TYPE_CHECKING

from svgelements import SVG

from svg_visual_bbox.bounding_boxes.type_bounding_box import BoundingBox
from svg_visual_bbox.constructors import new_element
from svg_visual_bbox.nsmap import local_name
from svg_visual_bbox.string_conversion import svg_tostring
from svg_visual_bbox.unit_conversion import try_user_units

if TYPE_CHECKING:
    from lxml.etree import (
        _Element as EtreeElement,  # pyright: ignore[reportPrivateUsage]
    )

# attributes that map root user units to a viewport
_VIEWPORT_ATTRIBUTES = ("viewBox", "width", "height", "x", "y", "preserveAspectRatio")

# text placeholder extent in ems
_TEXT_ADVANCE = 1.0
_TEXT_ASCENT = 1.2
_TEXT_DESCENT = 0.5

# css initial value of font-size ("medium")
_DEFAULT_FONT_SIZE = 16

# text attributes the placeholder rect carries over
_PLACEHOLDER_ATTRIBUTES = ("id", "transform", "display", "visibility")

_STYLE_FONT_SIZE = re.compile(r"font-size\s*:\s*(?P<size>[^;!]+)")
_LIST_SEPARATOR = re.compile(r"[\s,]+")


def _unframe(svg_root: EtreeElement) -> EtreeElement:
    """Copy an svg root with no viewport transform, so user units are output units.

    :param svg_root: an svg element
    :return: a copy of svg_root without viewBox, size, or position attributes
    """
    unframed = copy.deepcopy(svg_root)
    for attr in _VIEWPORT_ATTRIBUTES:
        _ = unframed.attrib.pop(attr, None)
    return unframed


def get_font_size(elem: EtreeElement) -> float:
    """Get the absolute font size that applies to an element.

    :param elem: an element, usually ``<text>``
    :return: the first absolute font size set on elem or an ancestor, in a style
        or a presentation attribute. Relative sizes ("2em", "120%") are skipped.
        16 if none is found.
    """
    for node in (elem, *elem.iterancestors()):
        match = _STYLE_FONT_SIZE.search(node.get("style", ""))
        for value in (match["size"] if match else None, node.get("font-size")):
            size = try_user_units(value)
            if size is not None and size > 0:
                return size
    return _DEFAULT_FONT_SIZE


def _get_first_coordinate(value: str | None) -> float:
    """Get the first value of an x or y coordinate list, 0 if missing."""
    if not value or not value.strip():
        return 0
    first = _LIST_SEPARATOR.split(value.strip())[0]
    return try_user_units(first) or 0


def get_text_placeholder(text: EtreeElement) -> EtreeElement | None:
    """Create a rect that covers everything a ``<text>`` element could draw.

    :param text: a ``<text>`` element
    :return: a ``<rect>`` in the text's coordinate system, or None if there are no
        characters to draw
    """
    chars = len("".join(text.itertext()).strip())
    if not chars:
        return None
    em = get_font_size(text)
    x = _get_first_coordinate(text.get("x"))
    y = _get_first_coordinate(text.get("y"))
    advance = chars * em * _TEXT_ADVANCE
    rect = new_element(
        "rect",
        x=x - advance,
        y=y - em * _TEXT_ASCENT,
        width=2 * advance,
        height=em * (_TEXT_ASCENT + _TEXT_DESCENT),
    )
    for attr in _PLACEHOLDER_ATTRIBUTES:
        value = text.get(attr)
        if value is not None:
            rect.set(attr, value)
    return rect


def _replace_text(svg_root: EtreeElement) -> None:
    """Swap every ``<text>`` in a tree for its placeholder rect.

    :param svg_root: an svg element. It is modified, so never pass a live root.
    """
    for text in [x for x in svg_root.iter() if local_name(x) == "text"]:
        parent = text.getparent()
        if parent is None:
            continue
        placeholder = get_text_placeholder(text)
        if placeholder is None:
            parent.remove(text)
        else:
            parent.replace(text, placeholder)


def geometric_bbox(svg_root: EtreeElement) -> BoundingBox | None:
    """Get the geometric bounding box of everything drawn in an svg root.

    :param svg_root: an svg element
    :return: bounding box in svg_root user units, stroke widths included, or None
        if nothing has geometry
    """
    unframed = _unframe(svg_root)
    _replace_text(unframed)
    markup = svg_tostring(unframed)
    svg = SVG.parse(io.BytesIO(markup), reify=True)
    bounds = svg.bbox(with_stroke=True)
    if bounds is None:
        return None
    x, y, x2, y2 = (float(v) for v in bounds)
    if not all(map(math.isfinite, (x, y, x2, y2))):
        return None
    return BoundingBox.from_limits(x, y, x2, y2)
