r"""Render and query with an Inkscape executable.

Inkscape cli calls generally take the form

   inkscape input_filename.svg --export-type=png --export-filename=export.png

Markup is written to a temporary file, the Inkscape CLI called, and the result
read back. Requires Inkscape >= 1.0 (the ``--export-type`` interface).

Relative references in the markup resolve against the temporary directory, not
the document's ``base_url``. Use absolute references with this backend.

:author: Shay Hill
:created: 2023-02-14
"""

from __future__ import annotations

import asyncio
import copy
import logging
import os
import subprocess
import tempfile
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import TYPE_CHECKING

from svg_visual_bbox.bounding_boxes.type_bounding_box import BoundingBox
from svg_visual_bbox.constructors import update_element
from svg_visual_bbox.exceptions import RenderLoadError
from svg_visual_bbox.main import write_svg

if TYPE_CHECKING:
    from lxml.etree import (
        _Element as EtreeElement,  # pyright: ignore[reportPrivateUsage]
    )

_log = logging.getLogger(__name__)


def _split_bb_string(bb_string: str) -> tuple[str, BoundingBox]:
    """Split a bounding box string into id and BoundingBox instance.

    :param bb_string: "id,x,y,width,height"
    :return: (id, BoundingBox(x, y, width, height))
    """
    id_, *bounds = bb_string.split(",")
    x, y, width, height = (float(x) for x in bounds)
    return id_, BoundingBox(x, y, width, height)


class InkscapeBackend:
    r"""Render svg markup with an Inkscape subprocess.

    :param inkscape: path to an inkscape executable on your local file system
        IMPORTANT: path cannot end with ``.exe``.
        Use something like ``"C:\\Program Files\\Inkscape\\inkscape"``
    """

    def __init__(self, inkscape: str | os.PathLike[str] = "inkscape") -> None:
        """Initialize the backend."""
        inkscape = Path(inkscape)
        if inkscape.suffix.lower() == ".exe":
            inkscape = inkscape.with_suffix("")
        self.inkscape = inkscape

    async def render(
        self, markup: bytes, width: int, height: int, *, base_url: str | None = None
    ) -> bytes:
        """Export svg markup to png bytes of an exact size.

        :param markup: a complete svg document
        :param width: output width in pixels
        :param height: output height in pixels
        :param base_url: ignored. See module docstring.
        :return: png bytes
        :raises RenderLoadError: if Inkscape fails or writes no png
        """
        del base_url
        with tempfile.TemporaryDirectory() as temp_dir:
            svg = Path(temp_dir) / "render.svg"
            png = Path(temp_dir) / "render.png"
            _ = svg.write_bytes(markup)
            options = [
                str(svg),
                "--export-type=png",
                f"--export-filename={png}",
                "--export-area-page",
                "--export-background-opacity=0",
                f"--export-width={width}",
                f"--export-height={height}",
            ]
            _log.debug("inkscape render %dx%d", width, height)
            try:
                process = await asyncio.create_subprocess_exec(
                    str(self.inkscape),
                    *options,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            except OSError as e:
                msg = f"Cannot run inkscape {self.inkscape}: {e}"
                raise RenderLoadError(msg) from e
            _, stderr = await process.communicate()
            if process.returncode != 0 or not png.exists():
                msg = (
                    f"Failed rendering serialized svg with inkscape {self.inkscape} "
                    + f"(exit {process.returncode}): {stderr.decode(errors='replace')}"
                )
                raise RenderLoadError(msg)
            return png.read_bytes()

    def geometric_bbox(self, svg_root: EtreeElement) -> BoundingBox | None:
        """Query Inkscape for the bounding box of a whole drawing.

        :param svg_root: an svg element
        :return: bounding box in svg_root user units or None

        Bounding boxes from ``inkscape --query-all`` are relative to the page. A
        copy of the root with a "normalized" viewBox, ``viewBox=(0, 0, 1, 1)`` at a
        size of 1 x 1, puts page units and user units in a 1:1 relationship.

        The ``inkscape --query-all svg`` call will return lines like

        svg1,x,y,width,height
        elem1,x,y,width,height

        where the first line is the root element, i.e., the whole drawing.

        This blocks on the Inkscape subprocess. Measurement calls it in a worker
        thread.
        """
        normalized = update_element(
            copy.deepcopy(svg_root), viewBox="0 0 1 1", width="1", height="1"
        )
        with NamedTemporaryFile(mode="wb", delete=False, suffix=".svg") as svg_file:
            svg = write_svg(svg_file, normalized)
        try:
            result = subprocess.run(
                [str(self.inkscape), "--query-all", svg],
                capture_output=True,
                check=False,
            )
        finally:
            os.unlink(svg)
        lines = result.stdout.decode(errors="replace").splitlines()
        if result.returncode != 0 or not lines:
            _log.debug("inkscape query failed: %s", result.stderr)
            return None
        _, bbox = _split_bb_string(lines[0].strip())
        if bbox.is_empty:
            return None
        return bbox
