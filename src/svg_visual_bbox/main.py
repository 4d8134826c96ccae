r"""Parse and write svg files.

:author: Shay Hill
created: 10/7/2019

The measuring functions in this package work on lxml trees. These helpers read
and write svg files.
"""

from __future__ import annotations

from pathlib import Path
from typing import IO, TYPE_CHECKING, TypeGuard

from lxml import etree

from svg_visual_bbox.string_conversion import svg_tostring

if TYPE_CHECKING:
    import os

    from lxml.etree import (
        _Element as EtreeElement,  # pyright: ignore[reportPrivateUsage]
    )


def _is_io_bytes(obj: object) -> TypeGuard[IO[bytes]]:
    """Determine if an object is file-like.

    :param obj: object
    :return: True if object is file-like
    """
    return hasattr(obj, "read") and hasattr(obj, "write")


def parse_svg(svg: str | os.PathLike[str] | IO[bytes]) -> EtreeElement:
    """Parse an svg file into a root element.

    :param svg: path to an svg file or an open binary file object
    :return: the root element of the parsed tree
    """
    return etree.parse(svg).getroot()


def write_svg(
    svg: str | Path | IO[bytes],
    root: EtreeElement,
    **tostring_kwargs: str | bool,
) -> str:
    r"""Write an xml element as an svg file.

    :param svg: open binary file object or path to output file (include extension .svg)
    :param root: root node of your svg geometry
    :param tostring_kwargs: keyword arguments to etree.tostring.
    :return: svg filename
    :effects: creates svg file at ``svg``
    :raises TypeError: if ``svg`` is not a Path, str, or binary file object

    It's often useful to write a temporary svg file, so a tempfile.NamedTemporaryFile
    object (or any open binary file object can be passed instead of an svg filename).
    """
    tostring_kwargs["pretty_print"] = tostring_kwargs.get("pretty_print", True)
    svg_contents = svg_tostring(root, **tostring_kwargs)

    if _is_io_bytes(svg):
        _ = svg.write(svg_contents)
        return svg.name
    if isinstance(svg, (str, Path)):
        with Path(svg).open("wb") as svg_file:
            _ = svg_file.write(svg_contents)
        return str(svg)
    msg = f"svg must be a path-like object or a file-like object, not {type(svg)}"
    raise TypeError(msg)
