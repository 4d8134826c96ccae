"""Quasi-private functions for high-level string conversion.

:author: Shay Hill
:created: 7/26/2020

Rounding some numbers to ensure quality svg rendering:
* Rounding floats to six digits after the decimal

Region-of-interest viewBoxes are written through these functions, so an ROI
survives serialization with six digits of precision. That is far below a single
pixel at any resolution factor this package uses.
"""

from __future__ import annotations

import itertools as it
from typing import TYPE_CHECKING, TypeAlias, cast

import svg_path_data
from lxml import etree

from svg_visual_bbox.nsmap import NSMAP

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from lxml.etree import (
        _Element as EtreeElement,  # pyright: ignore[reportPrivateUsage]
    )

# Types svg_visual_bbox can format to pass through to lxml constructors.
ElemAttrib: TypeAlias = str | float | None


def format_number(num: float | str, resolution: int | None = 6) -> str:
    """Format a number into an svg-readable float string with resolution = 6.

    :param num: number to format (string or float)
    :param resolution: number of digits after the decimal point, defaults to 6. None
        to match behavior of `str(num)`.
    :return: string representation of the number with six digits after the decimal
        (if in fixed-point notation). Will return exponential notation when shorter.
    """
    return svg_path_data.format_number(num, resolution=resolution)


def format_numbers(
    nums: Iterable[float] | Iterable[str] | Iterable[float | str],
) -> list[str]:
    """Format multiple strings to limited precision.

    :param nums: iterable of floats
    :return: list of formatted strings
    """
    return [format_number(num) for num in nums]


def _fix_key_and_format_val(key: str, val: ElemAttrib) -> Iterator[tuple[str, str]]:
    """Format one key, value pair for an svg element.

    :param key: element attribute name
    :param val: element attribute value
    :return: tuple of key, value

    * convert float values to formatted strings
    * replace '_' with '-' in keywords
    * remove trailing '_' from keywords
    * will convert `namespace:tag` to a qualified name

    SVG attribute names like `fill-opacity` and `stroke-width` are not valid python
    keywords, but can be passed as `fill_opacity` and `stroke_width`. ``viewBox``
    passes through unchanged.
    """
    if "http:" in key or "https:" in key:
        key_ = key
    elif ":" in key:
        namespace, tag = key.split(":")
        key_ = str(etree.QName(NSMAP[namespace], tag))
    else:
        key_ = key.rstrip("_").replace("_", "-")

    if val is None:
        val_ = "none"
    elif isinstance(val, (int, float)):
        val_ = format_number(val)
    else:
        val_ = val

    yield key_, val_


def format_attr_dict(**attributes: ElemAttrib) -> dict[str, str]:
    """Use svg_visual_bbox key / value fixer to create a dict of attributes.

    :param attributes: element attribute names and values.
    :return: dict of attributes, each key a valid svg attribute name, each value a str
    """
    items = attributes.items()
    return dict(it.chain(*(_fix_key_and_format_val(k, v) for k, v in items)))


def set_attributes(elem: EtreeElement, **attributes: ElemAttrib) -> None:
    """Set name: value items as element attributes. Make every value a string.

    :param elem: element to receive element.set(keyword, str(value)) calls
    :param attributes: element attribute names and values. Knows what to do with
        'text' keyword.
    :effects: updates ``elem``
    """
    attr_dict = format_attr_dict(**attributes)

    if "text" in attr_dict:
        elem.text = attr_dict.pop("text")

    for key, val in attr_dict.items():
        elem.set(key, val)


def svg_tostring(xml: EtreeElement, **tostring_kwargs: str | bool | None) -> bytes:
    """Serialize an svg element into self-contained markup.

    :param xml: root node of your svg geometry
    :param tostring_kwargs: keyword arguments to etree.tostring.
    :return: bytestring of svg file contents

    Encoding defaults to UTF-8, so non-ascii text (CJK, Arabic) reaches the
    renderer as text rather than character references.
    """
    tostring_kwargs["pretty_print"] = tostring_kwargs.get("pretty_print", False)
    tostring_kwargs["encoding"] = tostring_kwargs.get("encoding", "UTF-8")
    as_bytes = etree.tostring(etree.ElementTree(xml), **tostring_kwargs)  # type: ignore
    return cast("bytes", as_bytes)


def get_view_box_str(x: float, y: float, width: float, height: float) -> str:
    """Create a space-delimited string.

    :param x: x value in upper-left corner
    :param y: y value in upper-left corner
    :param width: width of viewBox
    :param height: height of viewBox
    :return: space-delimited string "x y width height"
    """
    dims = format_numbers((x, y, width, height))
    return " ".join(dims)
