"""Test finding references that taint a raster.

:author: Shay Hill
:created: 2025-10-19
"""

import asyncio

import pytest
from conftest import FakeBackend, new_svg_root

from svg_visual_bbox.bounding_boxes.type_bounding_box import BoundingBox
from svg_visual_bbox.constructors import new_sub_element
from svg_visual_bbox.document import SvgDocument
from svg_visual_bbox.exceptions import PixelReadSecurityError
from svg_visual_bbox.options import BBoxOptions
from svg_visual_bbox.security import (
    find_untrusted_references,
    is_trusted_reference,
    iter_references,
)
from svg_visual_bbox.two_pass import compute_bbox

BASE_URL = "https://example.com/art/drawing.svg"


@pytest.fixture
def document() -> SvgDocument:
    return SvgDocument(new_svg_root(0, 0, 10, 10), base_url=BASE_URL)


class TestIsTrustedReference:
    @pytest.mark.parametrize(
        "reference",
        [
            "",
            "#grad",
            "data:image/png;base64,AAAA",
            "DATA:font/woff2;base64,AAAA",
            "img.png",
            "../img.png",
            "https://example.com/img.png",
            "//example.com/img.png",
        ],
    )
    def test_trusted(self, document: SvgDocument, reference: str):
        assert is_trusted_reference(reference, document)

    @pytest.mark.parametrize(
        "reference",
        [
            "https://cdn.example.net/img.png",
            "http://example.com/img.png",
            "https://example.com:8443/img.png",
            "file:///etc/passwd",
        ],
    )
    def test_untrusted(self, document: SvgDocument, reference: str):
        assert not is_trusted_reference(reference, document)

    def test_cors_origin(self, document: SvgDocument):
        document.cors_origins = frozenset({"https://cdn.example.net"})
        assert is_trusted_reference("https://cdn.example.net/img.png", document)

    def test_relative_without_base_url(self):
        document = SvgDocument(new_svg_root())
        assert is_trusted_reference("img.png", document)
        assert not is_trusted_reference("https://example.com/img.png", document)


class TestFindReferences:
    def test_iter_references(self):
        root = new_svg_root(0, 0, 10, 10)
        _ = new_sub_element(root, "image", href="a.png")
        _ = new_sub_element(root, "use", **{"xlink:href": "#b"})
        _ = new_sub_element(root, "rect", fill="url(#grad)")
        _ = new_sub_element(root, "rect", style="fill: url( 'c.svg#p' )")
        _ = new_sub_element(
            root,
            "style",
            text='@import "d.css"; text { font-family: url(e.woff) }',
        )
        assert list(iter_references(root)) == [
            "a.png",
            "#b",
            "#grad",
            "c.svg#p",
            "e.woff",
            "d.css",
        ]

    def test_find_untrusted(self, document: SvgDocument):
        root = document.root
        _ = new_sub_element(root, "image", href="https://evil.net/a.png")
        _ = new_sub_element(root, "image", href="https://evil.net/a.png")
        _ = new_sub_element(root, "image", href="local.png")
        _ = new_sub_element(root, "style", text="@import 'https://fonts.net/f.css';")
        assert find_untrusted_references(root, document) == (
            "https://evil.net/a.png",
            "https://fonts.net/f.css",
        )

    def test_nothing_untrusted(self, document: SvgDocument):
        _ = new_sub_element(document.root, "rect", fill="url(#grad)")
        assert find_untrusted_references(document.root, document) == ()

    def test_hyperlinks_are_not_loaded(self):
        """An ``<a>`` href is followed on click, never loaded to draw."""
        root = new_svg_root(0, 0, 10, 10)
        link = new_sub_element(root, "a", href="https://example.org/about")
        _ = new_sub_element(link, "rect", width=1, height=1)
        _ = new_sub_element(root, "a", **{"xlink:href": "https://example.org/b"})
        assert list(iter_references(root)) == []

    def test_hidden_subtrees_are_not_loaded(self):
        root = new_svg_root(0, 0, 10, 10)
        group = new_sub_element(root, "g", display="none")
        _ = new_sub_element(group, "image", href="https://evil.net/a.png")
        _ = new_sub_element(root, "image", href="b.png")
        assert list(iter_references(root)) == ["b.png"]


class TestMeasureWithLinks:
    """Links anywhere in a document do not taint a measurement."""

    def _measure(self, document: SvgDocument, target_id: str) -> BoundingBox | None:
        options = BBoxOptions(coarse_factor=1, fine_factor=4, safety_margin_user=5)
        return asyncio.run(
            compute_bbox(target_id, options, document=document, backend=FakeBackend())
        )

    def test_link_around_target(self, document: SvgDocument):
        link = new_sub_element(document.root, "a", href="https://example.org/about")
        _ = new_sub_element(link, "rect", id="r", x=1, y=2, width=3, height=4)
        assert self._measure(document, "r") == BoundingBox(1, 2, 3, 4)

    def test_link_beside_target(self, document: SvgDocument):
        _ = new_sub_element(document.root, "rect", id="r", x=1, y=2, width=3, height=4)
        link = new_sub_element(document.root, "a", href="https://example.org/about")
        _ = new_sub_element(link, "rect", x=5, y=5, width=1, height=1)
        assert self._measure(document, "r") == BoundingBox(1, 2, 3, 4)

    def test_hidden_external_image_beside_target(self, document: SvgDocument):
        """Isolation hides the image, so it is never loaded."""
        _ = new_sub_element(document.root, "rect", id="r", x=1, y=2, width=3, height=4)
        _ = new_sub_element(document.root, "image", href="https://evil.net/a.png")
        assert self._measure(document, "r") == BoundingBox(1, 2, 3, 4)

    def test_external_image_in_target(self, document: SvgDocument):
        group = new_sub_element(document.root, "g", id="g")
        _ = new_sub_element(group, "rect", x=1, y=2, width=3, height=4)
        _ = new_sub_element(group, "image", href="https://evil.net/a.png")
        with pytest.raises(PixelReadSecurityError):
            _ = self._measure(document, "g")
