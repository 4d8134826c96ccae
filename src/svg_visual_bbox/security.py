"""Find references that would taint a raster surface.

:author: Shay Hill
:created: 2025-10-19

A browser refuses to hand back the pixels of a canvas that has drawn cross-origin
content without CORS permission. The same policy applies here, so a measurement
never silently depends on (or leaks) content the document is not entitled to read:

    * fragment references ("#grad") and ``data:`` uris are always allowed
    * references resolving to the document's own origin are allowed
    * references to an origin in ``SvgDocument.cors_origins`` are allowed
    * anything else taints the surface

Relative references in a document without a ``base_url`` have no origin to load
from. They are treated as same-origin.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING
from urllib.parse import urljoin, urlsplit

from svg_visual_bbox.nsmap import XLINK_NAMESPACE, local_name

if TYPE_CHECKING:
    from collections.abc import Iterator

    from lxml.etree import (
        _Element as EtreeElement,  # pyright: ignore[reportPrivateUsage]
    )

    from svg_visual_bbox.document import SvgDocument

_HREF_ATTRIBUTES = ("href", f"{{{XLINK_NAMESPACE}}}href")

# elements that load or draw what their href points to. A hyperlink (``<a>``) is
# followed on click, never loaded to render.
_LOADING_ELEMENTS = frozenset(
    {
        "image",
        "use",
        "feImage",
        "textPath",
        "tref",
        "pattern",
        "linearGradient",
        "radialGradient",
        "filter",
        "font-face-uri",
    }
)

_CSS_URL = re.compile(r"""url\(\s*(['"]?)(?P<ref>[^'")]+)\1\s*\)""")
_CSS_IMPORT = re.compile(r"""@import\s+(['"])(?P<ref>[^'"]+)\1""")


def _iter_css_references(css: str) -> Iterator[str]:
    """Yield ``url(...)`` and ``@import "..."`` targets in css text."""
    for match in _CSS_URL.finditer(css):
        yield match["ref"].strip()
    for match in _CSS_IMPORT.finditer(css):
        yield match["ref"].strip()


def iter_references(root: EtreeElement) -> Iterator[str]:
    """Yield every resource reference a renderer would load from an element tree.

    :param root: element to search (root included)
    :yield: href values of loading elements, presentation-attribute and style
        ``url()`` values, and ``<style>`` ``url()`` and ``@import`` values, in
        document order

    Subtrees with ``display="none"`` are not rendered, so their references are
    never loaded and are skipped.
    """
    if not isinstance(root.tag, str) or root.get("display") == "none":
        return
    if local_name(root) in _LOADING_ELEMENTS:
        for attr in _HREF_ATTRIBUTES:
            href = root.get(attr)
            if href is not None:
                yield href.strip()
    for key, value in root.attrib.items():
        if key in _HREF_ATTRIBUTES:
            continue
        yield from _iter_css_references(value)
    if local_name(root) == "style" and root.text:
        yield from _iter_css_references(root.text)
    for child in root:
        yield from iter_references(child)


def _origin(url: str) -> tuple[str, str]:
    parts = urlsplit(url)
    return parts.scheme.lower(), parts.netloc.lower()


def is_trusted_reference(reference: str, document: SvgDocument) -> bool:
    """Determine if a renderer may load a reference without tainting the surface.

    :param reference: an href or css url value
    :param document: the document the reference appears in
    :return: True for fragments, data uris, same-origin and CORS-trusted references
    """
    if not reference or reference.startswith("#"):
        return True
    if reference.lower().startswith("data:"):
        return True
    resolved = urljoin(document.base_url or "", reference)
    scheme, netloc = _origin(resolved)
    if not scheme:
        return True
    if (scheme, netloc) == document.origin:
        return True
    trusted = {_origin(x) for x in document.cors_origins}
    return (scheme, netloc) in trusted


def find_untrusted_references(
    root: EtreeElement, document: SvgDocument
) -> tuple[str, ...]:
    """Find references that would taint a raster of root.

    :param root: the (isolated) tree about to be rendered
    :param document: the document it was cloned from
    :return: untrusted references in document order, without duplicates
    """
    found = (r for r in iter_references(root) if not is_trusted_reference(r, document))
    return tuple(dict.fromkeys(found))
