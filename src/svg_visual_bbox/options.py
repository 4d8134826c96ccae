"""Options for visual bounding-box measurement.

:author: Shay Hill
:created: 2025-10-19

Defaults are empirically tuned, not derived. In particular, the automatic safety
margin (25% of the coarse box's larger dimension plus 100 user units) is large
enough for typical blurs and drop shadows, but there is no bound it guarantees.
Pass ``safety_margin_user`` explicitly for artwork with very large filter extents.
"""

from __future__ import annotations

import dataclasses
import math
import warnings
from typing import Literal, TypeAlias

Mode: TypeAlias = Literal["clipped", "unclipped"]

_MODES: tuple[Mode, ...] = ("clipped", "unclipped")

DEFAULT_COARSE_FACTOR = 3.0
DEFAULT_FINE_FACTOR = 24.0
DEFAULT_FONT_TIMEOUT_MS = 8000.0

# resolution floors in pixels per user unit
MIN_COARSE_RESOLUTION = 1.0
MIN_FINE_RESOLUTION = 4.0

# automatic margin = MARGIN_FRACTION * size + MARGIN_CONSTANT
MARGIN_FRACTION = 0.25
MARGIN_CONSTANT = 100.0


@dataclasses.dataclass(frozen=True)
class BBoxOptions:
    """How to search for and refine a visual bounding box.

    :param mode: "clipped" searches the root viewBox (what is visible). "unclipped"
        searches the geometric extent of the whole drawing, ignoring the viewBox.
    :param coarse_factor: pixels per user unit (times the layout scale) for the
        first pass
    :param fine_factor: pixels per user unit (times the layout scale) for the
        second pass
    :param safety_margin_user: margin in user units around the coarse box for the
        fine pass. None or "auto" for the automatic margin.
    :param use_layout_scale: scale resolutions by the root's rendered css-pixel size
        over its viewBox size, so screen-relative effects (non-scaling strokes)
        measure in proportion.
    :param font_timeout_ms: how long to wait for document fonts before the first
        pass. Zero or negative waits without a limit.
    :raises ValueError: for an unknown mode or a non-positive or non-finite factor
    """

    mode: Mode = "clipped"
    coarse_factor: float = DEFAULT_COARSE_FACTOR
    fine_factor: float = DEFAULT_FINE_FACTOR
    safety_margin_user: float | Literal["auto"] | None = None
    use_layout_scale: bool = True
    font_timeout_ms: float = DEFAULT_FONT_TIMEOUT_MS

    def __post_init__(self) -> None:
        """Validate values."""
        if self.mode not in _MODES:
            msg = f"mode must be one of {_MODES}, not {self.mode!r}"
            raise ValueError(msg)
        for name in ("coarse_factor", "fine_factor"):
            value = getattr(self, name)
            if not (isinstance(value, (int, float)) and math.isfinite(value)):
                msg = f"{name} must be a finite number, not {value!r}"
                raise ValueError(msg)
            if value <= 0:
                msg = f"{name} must be > 0, not {value}"
                raise ValueError(msg)
        margin = self.safety_margin_user
        if margin is not None and margin != "auto":
            if isinstance(margin, bool) or not isinstance(margin, (int, float)):
                msg = f"safety_margin_user must be a number or 'auto', not {margin!r}"
                raise ValueError(msg)
            if margin < 0:
                msg = f"Negative safety_margin_user {margin} can truncate results"
                warnings.warn(msg, stacklevel=3)
        if isinstance(self.font_timeout_ms, bool) or not isinstance(
            self.font_timeout_ms, (int, float)
        ):
            msg = f"font_timeout_ms must be a number, not {self.font_timeout_ms!r}"
            raise ValueError(msg)

    def replace(self, **changes: object) -> BBoxOptions:
        """Create a copy with some fields changed.

        :param changes: field names and new values
        :return: a new, validated BBoxOptions instance
        """
        return dataclasses.replace(self, **changes)  # type: ignore[arg-type]

    def margin_for(self, size: float) -> float:
        """Get the fine-pass margin for a coarse box.

        :param size: the larger of the coarse box's width and height
        :return: the explicit margin if one was given and is finite, else
            ``max(size * MARGIN_FRACTION, 0) + MARGIN_CONSTANT``
        """
        margin = self.safety_margin_user
        if isinstance(margin, (int, float)) and math.isfinite(margin):
            return float(margin)
        return max(size * MARGIN_FRACTION, 0) + MARGIN_CONSTANT

    def resolutions(self, base_pixels_per_unit: float) -> tuple[float, float]:
        """Get coarse and fine resolutions in pixels per user unit.

        :param base_pixels_per_unit: the layout scale, 1 if not used
        :return: (coarse, fine), clamped to MIN_COARSE_RESOLUTION and
            MIN_FINE_RESOLUTION
        """
        coarse = max(MIN_COARSE_RESOLUTION, base_pixels_per_unit * self.coarse_factor)
        fine = max(MIN_FINE_RESOLUTION, base_pixels_per_unit * self.fine_factor)
        return coarse, fine
