"""Raise the level of the constructors module.

:author: Shay Hill
created: 12/22/2019.
"""

from svg_visual_bbox.constructors.new_element import (
    new_element,
    new_sub_element,
    update_element,
)

__all__ = ["new_element", "new_sub_element", "update_element"]
