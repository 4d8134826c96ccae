"""Import functions into the package namespace.

:author: Shay Hill
:created: 2025-10-19
"""

from svg_visual_bbox.backends import InkscapeBackend, RenderBackend
from svg_visual_bbox.bounding_boxes.bound_helpers import parse_view_box
from svg_visual_bbox.bounding_boxes.type_bounding_box import BoundingBox
from svg_visual_bbox.composition import (
    Padding,
    UnionBBox,
    ViewBoxExpansion,
    VisibleAndFull,
    compute_union_bbox,
    compute_view_box_expansion,
    compute_visible_and_full,
    get_view_box_expansion,
    repair_svg_file,
    repair_view_box,
)
from svg_visual_bbox.constructors.new_element import (
    new_element,
    new_sub_element,
    update_element,
)
from svg_visual_bbox.document import (
    SvgDocument,
    resolve_target,
    wait_for_document_fonts,
)
from svg_visual_bbox.exceptions import (
    CrossRootError,
    NotFoundError,
    PixelReadSecurityError,
    RenderLoadError,
    VisualBBoxError,
)
from svg_visual_bbox.extraction import extract_bbox
from svg_visual_bbox.isolation import isolate_target
from svg_visual_bbox.main import parse_svg, write_svg
from svg_visual_bbox.nsmap import NSMAP
from svg_visual_bbox.options import BBoxOptions
from svg_visual_bbox.rasterize import Raster, rasterize
from svg_visual_bbox.string_conversion import (
    format_attr_dict,
    format_number,
    format_numbers,
)
from svg_visual_bbox.two_pass import compute_bbox

__all__ = [
    "NSMAP",
    "BBoxOptions",
    "BoundingBox",
    "CrossRootError",
    "InkscapeBackend",
    "NotFoundError",
    "Padding",
    "PixelReadSecurityError",
    "Raster",
    "RenderBackend",
    "RenderLoadError",
    "SvgDocument",
    "UnionBBox",
    "ViewBoxExpansion",
    "VisibleAndFull",
    "VisualBBoxError",
    "compute_bbox",
    "compute_union_bbox",
    "compute_view_box_expansion",
    "compute_visible_and_full",
    "extract_bbox",
    "format_attr_dict",
    "format_number",
    "format_numbers",
    "get_view_box_expansion",
    "isolate_target",
    "new_element",
    "new_sub_element",
    "parse_svg",
    "parse_view_box",
    "rasterize",
    "repair_svg_file",
    "repair_view_box",
    "resolve_target",
    "update_element",
    "wait_for_document_fonts",
    "write_svg",
]
