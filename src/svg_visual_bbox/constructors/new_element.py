"""SVG Element constructors. Create an svg element from a dictionary.

:author: Shay Hill
:created: 1/31/2020

This is principally to allow passing values, rather than strings, as svg element
parameters. Will translate ``stroke_width=10`` to ``stroke-width="10"``

Elements are created in the svg namespace unless the tag says otherwise. Cloned
and isolated documents are serialized for a renderer, and renderers need the
namespace.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from lxml import etree

from svg_visual_bbox.nsmap import SVG_NAMESPACE
from svg_visual_bbox.string_conversion import set_attributes

if TYPE_CHECKING:
    from lxml.etree import (
        QName,
    )
    from lxml.etree import (
        _Element as EtreeElement,  # pyright: ignore[reportPrivateUsage]
    )

    from svg_visual_bbox.string_conversion import ElemAttrib


def _qualify(tag: str | QName) -> str | QName:
    """Put an unqualified tag in the svg namespace."""
    if isinstance(tag, str) and not tag.startswith("{"):
        return f"{{{SVG_NAMESPACE}}}{tag}"
    return tag


def new_element(tag: str | QName, **attributes: ElemAttrib) -> EtreeElement:
    """Create an etree.Element, make every kwarg value a string.

    :param tag: element tag
    :param attributes: element attribute names and values
    :returns: new ``tag`` element

        >>> elem = new_element('rect', x=0, y=0, fill_opacity=0.5)
        >>> elem.get('fill-opacity')
        '0.5'
    """
    elem = etree.Element(_qualify(tag))
    set_attributes(elem, **attributes)
    return elem


def new_sub_element(
    parent: EtreeElement, tag: str | QName, **attributes: ElemAttrib
) -> EtreeElement:
    """Create an etree.SubElement, make every kwarg value a string.

    :param parent: parent element
    :param tag: element tag
    :param attributes: element attribute names and values
    :returns: new ``tag`` element
    """
    elem = etree.SubElement(parent, _qualify(tag))
    set_attributes(elem, **attributes)
    return elem


def update_element(elem: EtreeElement, **attributes: ElemAttrib) -> EtreeElement:
    """Update an existing etree.Element with additional params.

    :param elem: at etree element
    :param attributes: element attribute names and values
    :returns: the element with updated attributes

    This is to take advantage of the argument conversion in ``new_element``.
    """
    set_attributes(elem, **attributes)
    return elem
