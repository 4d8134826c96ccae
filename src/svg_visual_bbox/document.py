"""The live document a measurement runs against.

:author: Shay Hill
:created: 2025-10-19

A browser gives a script ambient access to ``document``, its fonts, and its
layout. Here that context is explicit: an ``SvgDocument`` wraps an lxml tree and
carries what rasterization needs to know about where the document came from (for
resolving and trusting references), how large it is drawn (for layout scale), and
how to tell when its fonts are ready.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple
from urllib.parse import urlsplit

from lxml import etree
from lxml.etree import _Element as EtreeElement  # pyright: ignore[reportPrivateUsage]

from svg_visual_bbox.bounding_boxes.bound_helpers import get_viewport_size
from svg_visual_bbox.exceptions import NotFoundError
from svg_visual_bbox.main import parse_svg
from svg_visual_bbox.nsmap import is_svg_element

if TYPE_CHECKING:
    import os
    from collections.abc import Awaitable, Callable

_log = logging.getLogger(__name__)


@dataclasses.dataclass
class SvgDocument:
    """An svg document and the context it is rendered in.

    :param root: the document element. Usually an ``<svg>``, but any tree with
        ``<svg>`` elements inside works.
    :param base_url: url (or file uri) the document was loaded from. Relative
        references resolve against it, and it defines the document's origin.
    :param cors_origins: origins ("https://cdn.example.com") trusted to serve
        resources with CORS headers. References to them do not taint a raster.
    :param viewport: rendered (width, height) of the root svg in css pixels. If
        None, the root width and height attributes are used.
    :param fonts_ready: optional zero-argument coroutine function that completes
        when the fonts the document uses are loaded.
    """

    root: EtreeElement
    base_url: str | None = None
    cors_origins: frozenset[str] = frozenset()
    viewport: tuple[float, float] | None = None
    fonts_ready: Callable[[], Awaitable[object]] | None = None

    @classmethod
    def from_file(
        cls, svg: str | os.PathLike[str], **kwargs: object
    ) -> SvgDocument:
        """Parse an svg file into a document.

        :param svg: path to an svg file
        :param kwargs: any other SvgDocument field
        :return: SvgDocument with ``base_url`` set to the file's uri
        """
        path = Path(svg).resolve()
        kwargs.setdefault("base_url", path.as_uri())
        return cls(parse_svg(str(path)), **kwargs)  # type: ignore[arg-type]

    @classmethod
    def from_string(cls, markup: str | bytes, **kwargs: object) -> SvgDocument:
        """Parse svg markup into a document.

        :param markup: svg source
        :param kwargs: any other SvgDocument field
        :return: SvgDocument
        """
        if isinstance(markup, str):
            markup = markup.encode("utf-8")
        return cls(etree.fromstring(markup), **kwargs)  # type: ignore[arg-type]

    @property
    def origin(self) -> tuple[str, str] | None:
        """Scheme and host the document was loaded from, if known."""
        if not self.base_url:
            return None
        parts = urlsplit(self.base_url)
        return parts.scheme.lower(), parts.netloc.lower()

    def get_element_by_id(self, id_: str) -> EtreeElement | None:
        """Find the first element with an id.

        :param id_: the id attribute value
        :return: the element or None
        """
        for elem in self.root.iter():
            if elem.get("id") == id_:
                return elem
        return None

    def contains(self, elem: EtreeElement) -> bool:
        """Determine if an element belongs to this document's tree."""
        return elem.getroottree().getroot() is self.root

    def get_viewport(self, svg_root: EtreeElement) -> tuple[float, float] | None:
        """Get the rendered size of an svg root in css pixels.

        :param svg_root: the svg element being measured
        :return: the explicit viewport, else the root width and height attributes,
            else None
        """
        return self.viewport or get_viewport_size(svg_root)


class ResolvedTarget(NamedTuple):
    """A target resolved to a single concrete element."""

    element: EtreeElement
    svg_root: EtreeElement
    document: SvgDocument


def find_svg_root(elem: EtreeElement) -> EtreeElement | None:
    """Find the outermost ``<svg>`` element containing (or being) elem.

    :param elem: any element
    :return: the outermost svg ancestor-or-self, or None if there is none
    """
    svg_root = elem if is_svg_element(elem) else None
    for ancestor in elem.iterancestors():
        if is_svg_element(ancestor):
            svg_root = ancestor
    return svg_root


def resolve_target(
    target: EtreeElement | str, document: SvgDocument | None = None
) -> ResolvedTarget:
    """Resolve an element or an id to one element inside an svg document.

    :param target: an lxml element or the id of an element in ``document``
    :param document: the document to look in. Required for id targets. For element
        targets, defaults to a document around the element's tree.
    :return: the element, its root svg, and the document
    :raises NotFoundError: if the target cannot be found, is not an element, is not
        inside an ``<svg>``, or is not part of ``document``
    """
    if isinstance(target, str):
        if document is None:
            msg = f"cannot resolve id {target!r} without a document"
            raise NotFoundError(msg)
        elem = document.get_element_by_id(target)
        if elem is None:
            msg = f"element not found: {target!r}"
            raise NotFoundError(msg)
    elif isinstance(target, EtreeElement) and isinstance(target.tag, str):
        elem = target
    else:
        msg = f"target must be an svg element or an element id, not {target!r}"
        raise NotFoundError(msg)

    svg_root = find_svg_root(elem)
    if svg_root is None:
        msg = f"element is not inside an <svg>: {elem.tag}"
        raise NotFoundError(msg)

    if document is None:
        document = SvgDocument(elem.getroottree().getroot())
    elif not document.contains(elem):
        msg = f"element is not part of the given document: {elem.tag}"
        raise NotFoundError(msg)
    return ResolvedTarget(elem, svg_root, document)


async def wait_for_document_fonts(document: SvgDocument, timeout_ms: float) -> None:
    """Wait until the document's fonts are loaded, or until a timeout.

    :param document: the document. Without a ``fonts_ready`` callback there is
        nothing to wait for.
    :param timeout_ms: max time to wait. Zero or negative waits fully.
    :effects: awaits ``document.fonts_ready()``

    A timeout is not an error. Measurement goes ahead with whatever fonts are
    available, the same way a page renders with fallback fonts.
    """
    if document.fonts_ready is None:
        return
    if timeout_ms <= 0:
        await document.fonts_ready()
        return
    try:
        await asyncio.wait_for(document.fonts_ready(), timeout_ms / 1000)
    except asyncio.TimeoutError:
        _log.info("fonts not ready after %sms, measuring anyway", timeout_ms)
