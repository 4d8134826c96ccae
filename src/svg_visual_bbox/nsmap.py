"""xml namespace entries for svg files.

:author: Shay Hill
:created: 1/14/2021

Only the namespaces this package reads or writes. Tags are compared by local name
where possible, because documents in the wild are not always namespaced.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from lxml.etree import QName

if TYPE_CHECKING:
    from lxml.etree import (
        _Element as EtreeElement,  # pyright: ignore[reportPrivateUsage]
    )

SVG_NAMESPACE = "http://www.w3.org/2000/svg"
XLINK_NAMESPACE = "http://www.w3.org/1999/xlink"

NSMAP = {
    None: SVG_NAMESPACE,
    "svg": SVG_NAMESPACE,
    "xlink": XLINK_NAMESPACE,
}


def local_name(elem: EtreeElement) -> str | None:
    """Get the tag of an element without its namespace.

    :param elem: an etree element, comment, or processing instruction
    :return: local tag name (e.g., "svg", "defs") or None for comments and
        processing instructions, which have no string tag.
    """
    if not isinstance(elem.tag, str):
        return None
    return QName(elem.tag).localname


def is_svg_element(elem: EtreeElement) -> bool:
    """Determine if an element is an ``<svg>`` element, namespaced or not."""
    return local_name(elem) == "svg"
