"""Test configuration for pytest.

:author: Shay Hill
:created: 7/2/2019
"""

from __future__ import annotations

import io
import math
import shutil
from pathlib import Path
from typing import TYPE_CHECKING, Any

from lxml import etree
from PIL import Image, ImageDraw

from svg_visual_bbox.bounding_boxes.bound_helpers import parse_view_box
from svg_visual_bbox.bounding_boxes.type_bounding_box import BoundingBox
from svg_visual_bbox.constructors import update_element
from svg_visual_bbox.nsmap import NSMAP, local_name
from svg_visual_bbox.string_conversion import get_view_box_str

if TYPE_CHECKING:
    import os

    from lxml.etree import (
        _Element as EtreeElement,  # pyright: ignore[reportPrivateUsage]
    )

    from svg_visual_bbox.string_conversion import ElemAttrib


def pytest_assertrepr_compare(
    config: Any, op: str, left: str, right: str
) -> list[str] | None:
    """See full error diffs"""
    del config
    if op in ("==", "!="):
        return [f"{left} {op} {right}"]
    return None


INKSCAPE = Path(shutil.which("inkscape") or r"C:\Program Files\Inkscape\bin\inkscape")


def has_inkscape(inkscape: str | os.PathLike[str]) -> bool:
    """Check if Inkscape is available at a path.

    The Inkscape command-line calls require an inkscape executable without a ".exe"
    extension, so look for either.
    """
    inkscape = Path(inkscape)
    return inkscape.exists() or inkscape.with_suffix(".exe").exists()


def new_svg_root(
    x_: float | None = None,
    y_: float | None = None,
    width_: float | None = None,
    height_: float | None = None,
    **attributes: ElemAttrib,
) -> EtreeElement:
    """Create an svg root element from viewBox style parameters.

    The viewBox is set only if all four trailing-underscore parameters are given.
    Explicit attributes (width, height, id, a viewBox string) override it.
    """
    inferred: dict[str, ElemAttrib] = {}
    if x_ is not None and y_ is not None and width_ is not None and height_ is not None:
        inferred["viewBox"] = get_view_box_str(x_, y_, width_, height_)
    inferred.update(attributes)
    svg_root = etree.Element(f"{{{NSMAP[None]}}}svg", nsmap=NSMAP)
    return update_element(svg_root, **inferred)


def has_cairo() -> bool:
    """Check if cairosvg and the cairo library can be loaded."""
    try:
        from svg_visual_bbox.backends.cairo import CairoBackend  # noqa: F401
    except ImportError:
        return False
    return True


def _is_hidden(elem: EtreeElement) -> bool:
    """Check for display="none" on an element or any ancestor."""
    return any(e.get("display") == "none" for e in (elem, *elem.iterancestors()))


def _iter_drawn_rects(
    svg_root: EtreeElement, *, bleed: bool = True
) -> list[BoundingBox]:
    """Get the painted extent of every visible rect in a tree.

    A ``data-bleed`` attribute grows the painted extent past the geometry, the
    way a blur or a drop shadow would.
    """
    rects: list[BoundingBox] = []
    for elem in svg_root.iter():
        if local_name(elem) != "rect" or _is_hidden(elem):
            continue
        if elem.get("fill") == "none" or elem.get("fill-opacity") == "0":
            continue
        keys = ("x", "y", "width", "height")
        bbox = BoundingBox(*(float(elem.get(k, 0)) for k in keys))
        if bleed:
            bbox = bbox.expand(float(elem.get("data-bleed", 0)))
        rects.append(bbox)
    return rects


class FakeBackend:
    """Draw only ``<rect>`` elements, pixel-exact, with Pillow.

    Records the size and viewBox of every render so tests can see what each
    pass asked for.
    """

    def __init__(self) -> None:
        self.renders: list[tuple[int, int, BoundingBox]] = []
        self.base_urls: list[str | None] = []

    async def render(
        self, markup: bytes, width: int, height: int, *, base_url: str | None = None
    ) -> bytes:
        root = etree.fromstring(markup)
        view_box = parse_view_box(root.get("viewBox"))
        assert view_box is not None
        self.renders.append((width, height, view_box))
        self.base_urls.append(base_url)

        scale_x = width / view_box.width
        scale_y = height / view_box.height
        image = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        draw = ImageDraw.Draw(image)
        for rect in _iter_drawn_rects(root):
            x0 = math.floor((rect.x - view_box.x) * scale_x + 1e-9)
            y0 = math.floor((rect.y - view_box.y) * scale_y + 1e-9)
            x1 = math.ceil((rect.x2 - view_box.x) * scale_x - 1e-9)
            y1 = math.ceil((rect.y2 - view_box.y) * scale_y - 1e-9)
            if x1 <= x0 or y1 <= y0:
                continue
            draw.rectangle((x0, y0, x1 - 1, y1 - 1), fill=(0, 0, 255, 255))
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()

    def geometric_bbox(self, svg_root: EtreeElement) -> BoundingBox | None:
        rects = [r for r in _iter_drawn_rects(svg_root, bleed=False) if not r.is_empty]
        if not rects:
            return None
        return BoundingBox.union(*rects)
