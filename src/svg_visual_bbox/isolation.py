"""Isolate one element of an svg document for rendering.

:author: Shay Hill
:created: 2025-10-19

To see what one element draws, render a copy of the whole root with everything
else switched off. Keep visible:

    * the target
    * its ancestors (their transforms, styles, and clips still apply)
    * its descendants
    * every ``<defs>``, and every definition outside one (gradients, filters,
      markers, clip paths, masks, patterns, and symbols). These never draw in place.
      Working out which definitions the target really references is not safe to do
      statically, so keep them all.
    * anything a ``<use>`` in the target points to. It moves into a ``<defs>``, so
      it draws only through the ``<use>``.

Everything else that does not contain the target gets ``display="none"``.
"""

from __future__ import annotations

import copy
import uuid
from typing import TYPE_CHECKING

from svg_visual_bbox.constructors import new_element
from svg_visual_bbox.exceptions import NotFoundError
from svg_visual_bbox.nsmap import XLINK_NAMESPACE, local_name

if TYPE_CHECKING:
    from collections.abc import Iterator

    from lxml.etree import (
        _Element as EtreeElement,  # pyright: ignore[reportPrivateUsage]
    )


_TEMP_ID_PREFIX = "svg_visual_bbox-temp_isolation-"

_DISPLAY_NONE = "display:none"

# never drawn in place, only through a reference, so never hidden
_NON_RENDERING = frozenset(
    {
        "defs",
        "symbol",
        "linearGradient",
        "radialGradient",
        "pattern",
        "clipPath",
        "mask",
        "marker",
        "filter",
        "style",
    }
)


def _find_by_id(root: EtreeElement, id_: str) -> EtreeElement | None:
    """Find the first element (root included) with an id."""
    for elem in root.iter():
        if elem.get("id") == id_:
            return elem
    return None


def _iter_child_elements(elem: EtreeElement) -> Iterator[EtreeElement]:
    """Yield children that are elements, skipping comments and instructions."""
    for child in elem:
        if isinstance(child.tag, str):
            yield child


def hide_element(elem: EtreeElement) -> None:
    """Switch off rendering of an element and its subtree.

    :param elem: element to hide
    :effects: sets ``display="none"``. Appends ``display:none`` to any inline
        style as well, because an inline ``display`` declaration would override
        the presentation attribute.
    """
    elem.set("display", "none")
    style = elem.get("style")
    if style is not None and "display" in style:
        elem.set("style", f"{style.rstrip().rstrip(';')};{_DISPLAY_NONE}")


def _find_used(clone: EtreeElement, use: EtreeElement) -> EtreeElement | None:
    """Find the element a ``<use>`` points to by fragment, if it is in clone."""
    href = use.get("href") or use.get(f"{{{XLINK_NAMESPACE}}}href") or ""
    if not href.startswith("#"):
        return None
    return _find_by_id(clone, href[1:])


def _iter_uses(elem: EtreeElement) -> Iterator[EtreeElement]:
    """Yield every ``<use>`` in an element's subtree, elem included."""
    return (x for x in elem.iter() if local_name(x) == "use")


def _find_irrelevant(
    node: EtreeElement, target: EtreeElement, keep: set[EtreeElement]
) -> Iterator[EtreeElement]:
    """Yield every subtree under node that is neither kept nor holds the target.

    :param node: an ancestor-or-self of target
    :param target: the isolated element. Its subtree is left alone.
    :param keep: target and its ancestors
    :yield: roots of subtrees to hide
    """
    if node is target:
        return
    for child in _iter_child_elements(node):
        if local_name(child) in _NON_RENDERING:
            continue
        if child in keep:
            yield from _find_irrelevant(child, target, keep)
        else:
            yield child


def _rescue_used(
    clone: EtreeElement, clone_target: EtreeElement, hidden: list[EtreeElement]
) -> None:
    """Move elements the target ``<use>``s out of hidden subtrees into a ``<defs>``.

    :param clone: the cloned root
    :param clone_target: the target in clone
    :param hidden: roots of subtrees about to be hidden. Rescued roots are removed.
    :effects: a ``<use>`` renders a copy of what it points to, so that element
        must not be hidden. It must not draw in place either, so it moves into a
        new ``<defs>`` at the top of clone. A ``<use>`` does not inherit the
        transforms of its referenced element's ancestors, so the move does not
        change what the ``<use>`` draws.
    """
    defs: EtreeElement | None = None
    pending = list(_iter_uses(clone_target))
    while pending:
        used = _find_used(clone, pending.pop())
        if used is None:
            continue
        if not any(x in hidden for x in (used, *used.iterancestors())):
            continue
        if used in hidden:
            hidden.remove(used)
        if defs is None:
            defs = new_element("defs")
            clone.insert(0, defs)
        defs.append(used)
        pending.extend(_iter_uses(used))


def isolate_target(
    target: EtreeElement, svg_root: EtreeElement
) -> tuple[EtreeElement, EtreeElement]:
    """Clone an svg root with only one element (and what it needs) visible.

    :param target: the element to isolate
    :param svg_root: the svg element that contains target (or is target)
    :return: (cloned root, the target's counterpart in the clone)
    :raises NotFoundError: if the target cannot be found in the clone. This would
        mean target is not inside svg_root.
    :effects: temporarily adds an id attribute to target if it has none. This is
        removed before returning, whether or not the clone is found.

    Existing, non-unique ids can confuse the lookup. The first element with the
    target's id is taken as the target.
    """
    target_id = target.get("id")
    temp_id: str | None = None
    if target_id is None:
        temp_id = target_id = f"{_TEMP_ID_PREFIX}{uuid.uuid4()}"
        target.set("id", temp_id)
    try:
        clone = copy.deepcopy(svg_root)
        clone_target = _find_by_id(clone, target_id)
    finally:
        if temp_id is not None:
            del target.attrib["id"]

    if clone_target is None:
        msg = f"cannot find target in cloned svg: {target.tag}"
        raise NotFoundError(msg)
    if temp_id is not None:
        del clone_target.attrib["id"]

    keep = {clone_target, *clone_target.iterancestors()}
    hidden = list(_find_irrelevant(clone, clone_target, keep))
    _rescue_used(clone, clone_target, hidden)
    for elem in hidden:
        hide_element(elem)
    return clone, clone_target
