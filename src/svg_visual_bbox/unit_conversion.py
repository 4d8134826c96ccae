"""Convert svg length attributes to user units (css pixels).

The layout scale of a root svg is its rendered size in css pixels divided by its
viewBox size. Root ``width`` and ``height`` attributes come in any absolute unit, so
convert them here.

I borrowed test values and and conventions from Inkscape's `inkek.units.py`.

:author: Shay Hill
:created: 2023-02-12
"""

from __future__ import annotations

import enum
import re
from typing import TypeAlias

# units per inch
_UPI = 96

# units per centimeter
_UPC = 96 / 2.54


class Unit(enum.Enum):
    """SVG Units of measurement.

    Value is (unit specifier, unit conversion)

    The unit specifier string are how various units are identified in SVG.
    e.g., "44in"
    """

    IN = "in", _UPI  # inches
    PT = "pt", 4 / 3  # points
    PX = "px", 1  # pixels
    MM = "mm", _UPC / 10  # millimeters
    CM = "cm", _UPC  # centimeters
    Q = "Q", _UPC / 40  # quarter-millimeters
    PC = "pc", _UPI / 6  # picas
    USER = "", 1  # "user units" without a unit specifier


_UNIT_SPECIFIER2UNIT = {x.value[0]: x for x in Unit}

_NUMBER = r"([-+]?[0-9]+(\.[0-9]*)?|[-+]?\.[0-9]+)([eE][-+]?[0-9]+)?"
_UNIT_SPECIFIERS = "|".join(x.value[0] for x in Unit)
_NUMBER_AND_UNIT = re.compile(
    rf"^\s*(?P<number>{_NUMBER})(?P<unit>{_UNIT_SPECIFIERS})\s*$"
)

MeasurementArg: TypeAlias = float | str


def _parse_unit(measurement_arg: str) -> tuple[float, Unit]:
    """Split the value and unit from a string.

    :param measurement_arg: The value to parse (e.g. "55.32px")
    :return: A tuple of the value and Unit
    :raise ValueError: If the value cannot be parsed

    | arg       | result             |
    | --------- | ------------------ |
    | "55.32px" | (55.32, Unit.PX)   |
    | "55.32"   | (55.32, Unit.USER) |
    | "2in"     | (2.0, Unit.IN)     |

    Relative lengths ("100%", "2em") and keywords ("auto") have no absolute
    value, so they cannot be parsed.
    """
    number_unit = _NUMBER_AND_UNIT.match(measurement_arg)
    if number_unit is None:
        msg = f"Cannot parse value and unit from {measurement_arg}"
        raise ValueError(msg)
    return float(number_unit["number"]), _UNIT_SPECIFIER2UNIT[number_unit["unit"]]


def to_user_units(measurement_arg: MeasurementArg) -> float:
    """Convert a measurement argument to user units.

    :param measurement_arg: a float (user units) or string with unit specifier
    :return: The measurement in user units
    :raise ValueError: if the string cannot be parsed
    """
    if isinstance(measurement_arg, (int, float)):
        return float(measurement_arg)
    value, unit = _parse_unit(measurement_arg)
    return value * unit.value[1]


def try_user_units(measurement_arg: MeasurementArg | None) -> float | None:
    """Convert a measurement to user units if it has an absolute value.

    :param measurement_arg: an attribute value, possibly None or relative
    :return: value in user units, or None if missing, relative, or unparseable
    """
    if measurement_arg is None:
        return None
    try:
        return to_user_units(measurement_arg)
    except ValueError:
        return None


def try_parse_unit(measurement_arg: str | None) -> tuple[float, Unit] | None:
    """Split the value and unit from a string if it has an absolute unit.

    :param measurement_arg: an attribute value, possibly None or relative
    :return: (value, Unit) or None if missing, relative, or unparseable
    """
    if measurement_arg is None:
        return None
    try:
        return _parse_unit(measurement_arg)
    except ValueError:
        return None
