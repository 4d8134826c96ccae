"""Bounding box class for visual extents.

:author: Shay Hill
:created: 2022-12-09

Every BoundingBox produced by this package is in the user coordinate system of a
root svg element (its viewBox units), whatever region and resolution produced it.
That makes boxes from different passes and different elements directly
comparable.
"""

from __future__ import annotations

import dataclasses
import math
from typing import TYPE_CHECKING

from svg_visual_bbox.string_conversion import get_view_box_str

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclasses.dataclass(frozen=True)
class BoundingBox:
    """Immutable axis-aligned box in root-svg user units.

    :param x: left x value
    :param y: top y value
    :param width: width of the bounding box
    :param height: height of the bounding box
    :raises ValueError: if any value is not finite

    A box with zero or negative width or height is *empty*. Empty boxes are legal
    values (a region of interest can collapse to one), but a region of interest
    that is empty is never rasterized.
    """

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        """Coerce values to float and reject nan and infinity."""
        for field in dataclasses.fields(self):
            value = float(getattr(self, field.name))
            if not math.isfinite(value):
                msg = f"BoundingBox {field.name} must be finite, not {value}"
                raise ValueError(msg)
            object.__setattr__(self, field.name, value)

    def __iter__(self) -> Iterator[float]:
        """Iterate over x, y, width, height."""
        return iter(self.values())

    def values(self) -> tuple[float, float, float, float]:
        """Get the values of the bounding box.

        :return: x, y, width, height of the bounding box
        """
        return self.x, self.y, self.width, self.height

    @property
    def x2(self) -> float:
        """Return x right value of bounding box."""
        return self.x + self.width

    @property
    def y2(self) -> float:
        """Return y bottom value of bounding box."""
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        """True if the box has no area."""
        return self.width <= 0 or self.height <= 0

    @property
    def view_box_str(self) -> str:
        """Space-delimited string for an svg viewBox attribute.

        Use with
        ``update_element(elem, viewBox=bbox.view_box_str)``
        """
        return get_view_box_str(*self.values())

    @classmethod
    def from_limits(cls, x: float, y: float, x2: float, y2: float) -> BoundingBox:
        """Create a bounding box from min and max coordinates.

        :param x: left x value
        :param y: top y value
        :param x2: right x value
        :param y2: bottom y value
        :return: a BoundingBox. Dimensions are clamped to non-negative.
        """
        return cls(x, y, max(0.0, x2 - x), max(0.0, y2 - y))

    def expand(
        self,
        left: float,
        top: float | None = None,
        right: float | None = None,
        bottom: float | None = None,
    ) -> BoundingBox:
        """Return a new bounding box grown outward on each side.

        :param left: padding on the left. If no other argument is given, this is
            applied to all four sides.
        :param top: padding on the top, defaults to ``left``
        :param right: padding on the right, defaults to ``left``
        :param bottom: padding on the bottom, defaults to ``top``
        :return: a new BoundingBox. Negative padding shrinks the box, but never
            below zero width or height.
        """
        top = left if top is None else top
        right = left if right is None else right
        bottom = top if bottom is None else bottom
        return BoundingBox.from_limits(
            self.x - left, self.y - top, self.x2 + right, self.y2 + bottom
        )

    @classmethod
    def union(cls, *bboxes: BoundingBox) -> BoundingBox:
        """Create a bounding box around all other bounding boxes.

        :param bboxes: one or more bounding boxes
        :return: a bounding box encompasing all bboxes args (min of mins, max of
            maxes)
        :raises ValueError: if no bboxes are given
        """
        if not bboxes:
            msg = "At least one bounding box is required"
            raise ValueError(msg)
        min_x = min(b.x for b in bboxes)
        min_y = min(b.y for b in bboxes)
        max_x = max(b.x2 for b in bboxes)
        max_y = max(b.y2 for b in bboxes)
        return cls(min_x, min_y, max_x - min_x, max_y - min_y)

