"""Helper functions for bounding boxes and svg viewports.

:author: Shay Hill
:created: 2024-05-03
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from svg_visual_bbox.bounding_boxes.type_bounding_box import BoundingBox
from svg_visual_bbox.unit_conversion import try_user_units

if TYPE_CHECKING:
    from lxml.etree import (
        _Element as EtreeElement,  # pyright: ignore[reportPrivateUsage]
    )

_VIEW_BOX_SEPARATOR = re.compile(r"[\s,]+")


def parse_view_box(view_box: str | None) -> BoundingBox | None:
    """Parse a viewBox attribute value.

    :param view_box: "x y width height", commas allowed as separators
    :return: BoundingBox or None if the value is missing, malformed, or has zero
        width or height (which disables rendering of the element)
    """
    if not view_box:
        return None
    try:
        x, y, width, height = map(float, _VIEW_BOX_SEPARATOR.split(view_box.strip()))
    except ValueError:
        return None
    if width <= 0 or height <= 0:
        return None
    return BoundingBox(x, y, width, height)


def get_viewport_size(root: EtreeElement) -> tuple[float, float] | None:
    """Get the width and height attributes of an svg root in css pixels.

    :param root: an svg element
    :return: (width, height) or None if either is missing, relative ("100%"), or
        not positive
    """
    width = try_user_units(root.get("width"))
    height = try_user_units(root.get("height"))
    if width is None or height is None or width <= 0 or height <= 0:
        return None
    return width, height
