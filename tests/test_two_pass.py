"""Test the two-pass visual bounding box.

Uses a fake backend that draws rects pixel-exact, so results are exact.

:author: Shay Hill
:created: 2025-10-19
"""

import asyncio
import threading

import pytest
from conftest import FakeBackend, new_svg_root
from lxml.etree import _Element as EtreeElement  # pyright: ignore[reportPrivateUsage]

from svg_visual_bbox.bounding_boxes.type_bounding_box import BoundingBox
from svg_visual_bbox.constructors import new_sub_element
from svg_visual_bbox.document import SvgDocument
from svg_visual_bbox.exceptions import NotFoundError
from svg_visual_bbox.options import BBoxOptions
from svg_visual_bbox.two_pass import (
    compute_bbox,
    get_layout_scale,
    get_search_region,
)

FAST = BBoxOptions(coarse_factor=1, fine_factor=4, safety_margin_user=5)


def _measure(
    target: EtreeElement | str,
    options: BBoxOptions = FAST,
    document: SvgDocument | None = None,
    backend: FakeBackend | None = None,
) -> BoundingBox | None:
    backend = backend or FakeBackend()
    return asyncio.run(
        compute_bbox(target, options, document=document, backend=backend)
    )


@pytest.fixture
def root() -> EtreeElement:
    root = new_svg_root(0, 0, 100, 100)
    _ = new_sub_element(root, "rect", id="r", x=10, y=20, width=30, height=40)
    return root


class TestComputeBBox:
    def test_rect(self, root: EtreeElement):
        assert _measure(root[0]) == BoundingBox(10, 20, 30, 40)

    def test_by_id(self, root: EtreeElement):
        document = SvgDocument(root)
        assert _measure("r", document=document) == BoundingBox(10, 20, 30, 40)

    def test_missing_id(self, root: EtreeElement):
        with pytest.raises(NotFoundError):
            _ = _measure("nope", document=SvgDocument(root))

    def test_two_passes(self, root: EtreeElement):
        """The coarse pass covers the viewBox. The fine pass covers the margin."""
        backend = FakeBackend()
        _ = _measure(root[0], backend=backend)
        assert backend.renders == [
            (100, 100, BoundingBox(0, 0, 100, 100)),
            (160, 200, BoundingBox(5, 15, 40, 50)),
        ]

    def test_deterministic(self, root: EtreeElement):
        assert _measure(root[0]) == _measure(root[0])

    def test_others_hidden(self, root: EtreeElement):
        _ = new_sub_element(root, "rect", x=0, y=0, width=100, height=100)
        assert _measure(root[0]) == BoundingBox(10, 20, 30, 40)

    def test_root_target(self, root: EtreeElement):
        _ = new_sub_element(root, "rect", x=50, y=50, width=10, height=10)
        assert _measure(root) == BoundingBox(10, 20, 50, 40)

    def test_temp_id_removed(self):
        root = new_svg_root(0, 0, 100, 100)
        rect = new_sub_element(root, "rect", x=10, y=20, width=30, height=40)
        _ = _measure(rect)
        assert rect.get("id") is None

    @pytest.mark.parametrize("attrib", [{"display": "none"}, {"fill_opacity": 0}])
    def test_invisible(self, root: EtreeElement, attrib: dict[str, str | int]):
        rect = new_sub_element(root, "rect", x=10, y=10, width=10, height=10, **attrib)
        assert _measure(rect) is None

    def test_hidden_ancestor(self, root: EtreeElement):
        group = new_sub_element(root, "g", display="none")
        rect = new_sub_element(group, "rect", x=10, y=10, width=10, height=10)
        assert _measure(rect) is None

    def test_clipped_and_unclipped(self):
        root = new_svg_root(0, 0, 100, 100)
        rect = new_sub_element(root, "rect", x=200, y=200, width=50, height=50)
        assert _measure(rect) is None
        unclipped = FAST.replace(mode="unclipped")
        assert _measure(rect, unclipped) == BoundingBox(200, 200, 50, 50)

    def test_partly_visible(self):
        root = new_svg_root(0, 0, 100, 100)
        rect = new_sub_element(root, "rect", x=80, y=80, width=40, height=40)
        assert _measure(rect, FAST.replace(safety_margin_user=0)) == BoundingBox(
            80, 80, 20, 20
        )

    def test_fine_pass_not_clipped(self):
        """Only the coarse pass is limited to the viewBox."""
        root = new_svg_root(0, 0, 100, 100)
        rect = new_sub_element(root, "rect", x=80, y=80, width=40, height=40)
        assert _measure(rect) == BoundingBox(80, 80, 25, 25)

    def test_nothing_drawn(self):
        root = new_svg_root()
        assert _measure(root, FAST.replace(mode="unclipped")) is None
        assert _measure(root) is None


class TestMargin:
    @pytest.fixture
    def bleeding(self) -> EtreeElement:
        """A rect that paints 30 units past its geometry on every side."""
        root = new_svg_root(-200, -200, 400, 400)
        return new_sub_element(
            root, "rect", x=40, y=40, width=20, height=20, data_bleed=30
        )

    def test_auto_margin_sufficient(self, bleeding: EtreeElement):
        """The coarse pass sees only geometry. The margin finds the rest."""
        options = BBoxOptions(mode="unclipped", coarse_factor=1, fine_factor=4)
        assert _measure(bleeding, options) == BoundingBox(10, 10, 80, 80)

    def test_small_margin_truncates(self, bleeding: EtreeElement):
        options = FAST.replace(mode="unclipped", safety_margin_user=10)
        assert _measure(bleeding, options) == BoundingBox(30, 30, 40, 40)

    def test_clipped_search_sees_bleed(self, bleeding: EtreeElement):
        assert _measure(bleeding) == BoundingBox(10, 10, 80, 80)


class TestResolution:
    def test_layout_scale(self):
        root = new_svg_root(0, 0, 100, 100, width=200, height=200)
        rect = new_sub_element(root, "rect", x=10, y=20, width=30, height=40)
        backend = FakeBackend()
        assert _measure(rect, backend=backend) == BoundingBox(10, 20, 30, 40)
        assert backend.renders[0][:2] == (200, 200)

    def test_no_layout_scale(self):
        root = new_svg_root(0, 0, 100, 100, width=200, height=200)
        rect = new_sub_element(root, "rect", x=10, y=20, width=30, height=40)
        backend = FakeBackend()
        _ = _measure(rect, FAST.replace(use_layout_scale=False), backend=backend)
        assert backend.renders[0][:2] == (100, 100)

    def test_fine_floor(self, root: EtreeElement):
        """The fine pass never drops below four pixels per unit."""
        backend = FakeBackend()
        options = FAST.replace(fine_factor=0.5)
        _ = _measure(root[0], options, backend=backend)
        assert backend.renders[1][:2] == (160, 200)

    def test_layout_scale_values(self, root: EtreeElement):
        document = SvgDocument(root, viewport=(300, 100))
        assert get_layout_scale(root, document, FAST) == 2
        assert get_layout_scale(root, SvgDocument(root), FAST) == 1


class TestFractionalGeometry:
    """Off-grid geometry is measured to within one fine pixel, never smaller."""

    @pytest.mark.parametrize("fine_factor", [4, 24])
    def test_within_one_fine_pixel(self, fine_factor: int):
        root = new_svg_root(0, 0, 100, 100)
        rect = new_sub_element(root, "rect", x=10.3, y=20.7, width=15.2, height=9.9)
        exact = BoundingBox(10.3, 20.7, 15.2, 9.9)
        bbox = _measure(rect, FAST.replace(fine_factor=fine_factor))
        assert bbox is not None
        pixel = 1 / fine_factor + 1e-9
        assert exact.x - pixel <= bbox.x <= exact.x + pixel
        assert exact.y - pixel <= bbox.y <= exact.y + pixel
        assert exact.x2 - pixel <= bbox.x2 <= exact.x2 + pixel
        assert exact.y2 - pixel <= bbox.y2 <= exact.y2 + pixel
        # every painted pixel is inside the box
        assert bbox.x <= exact.x + 1e-9
        assert bbox.y <= exact.y + 1e-9
        assert bbox.x2 >= exact.x2 - 1e-9
        assert bbox.y2 >= exact.y2 - 1e-9

    def test_finer_is_tighter(self):
        root = new_svg_root(0, 0, 100, 100)
        rect = new_sub_element(root, "rect", x=10.3, y=20.7, width=15.2, height=9.9)
        coarse = _measure(rect, FAST.replace(fine_factor=4))
        fine = _measure(rect, FAST.replace(fine_factor=24))
        assert coarse is not None
        assert fine is not None
        assert fine.width <= coarse.width
        assert fine.height <= coarse.height


def _search(
    root: EtreeElement, options: BBoxOptions = FAST, backend: FakeBackend | None = None
) -> BoundingBox | None:
    backend = backend or FakeBackend()
    return asyncio.run(get_search_region(root, SvgDocument(root), backend, options))


class _ThreadRecordingBackend(FakeBackend):
    """Record the thread geometry is computed in."""

    def __init__(self) -> None:
        super().__init__()
        self.geometry_threads: list[int] = []

    def geometric_bbox(self, svg_root: EtreeElement) -> BoundingBox | None:
        self.geometry_threads.append(threading.get_ident())
        return super().geometric_bbox(svg_root)


class TestSearchRegion:
    def test_view_box(self, root: EtreeElement):
        region = _search(root)
        assert region == BoundingBox(0, 0, 100, 100)

    def test_viewport_without_view_box(self):
        root = new_svg_root(width=60, height=30)
        region = _search(root)
        assert region == BoundingBox(0, 0, 60, 30)

    def test_geometry_without_viewport(self):
        root = new_svg_root()
        _ = new_sub_element(root, "rect", x=10, y=20, width=30, height=40)
        region = _search(root)
        assert region == BoundingBox(10, 20, 30, 40)

    def test_unclipped(self, root: EtreeElement):
        _ = new_sub_element(root, "rect", x=500, y=500, width=10, height=10)
        options = FAST.replace(mode="unclipped")
        region = _search(root, options)
        assert region == BoundingBox(10, 20, 500, 490)

    def test_geometry_off_the_event_loop(self, root: EtreeElement):
        """Geometry can block (svgelements parsing, an Inkscape query)."""
        backend = _ThreadRecordingBackend()
        _ = _search(root, FAST.replace(mode="unclipped"), backend)
        assert backend.geometry_threads
        assert threading.get_ident() not in backend.geometry_threads


class TestFonts:
    def test_fonts_awaited_once(self, root: EtreeElement):
        calls: list[str] = []

        async def fonts_ready() -> None:
            calls.append("ready")

        document = SvgDocument(root, fonts_ready=fonts_ready)
        _ = _measure("r", document=document)
        assert calls == ["ready"]
