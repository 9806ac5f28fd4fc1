"""
Unit and Quantity Parsing
=========================

Parses user input such as "m/s^2", "kg*m/s^2", "kg m s^-2" and "4 in".

Usage:
    >>> from dimensional.parse import parse_units, parse_quantity
    >>> parse_units("m/s^2") == CompoundUnit({'meter': 1, 'second': -2})
    True
    >>> parse_quantity("100.5 gal")
    Quantity(100.5, 'gallon')

Grammar (informal):
    expression := term (operator term)*
    term       := unit [("^" | "**") signed-integer]  |  "1"
    operator   := "*" | "·" | "/" | whitespace

A "/" puts the following terms in the denominator until the next "*"
(or whitespace), so the formatted form "meter/second^2" parses back.
"""

import re
from typing import Dict

from .errors import UnitSpecError
from .quantity import Quantity
from .units import CompoundUnit


_TERM = re.compile(r"(?P<unit>[^\s*/^·()]+)(?:\s*(?:\^|\*\*)\s*(?P<power>[+-]?\d+))?")
_OPERATOR = re.compile(r"\s*(?P<op>[*/·])\s*|\s+")

# Number (including scientific notation) + optional unit expression
_QUANTITY = re.compile(r"^(?P<number>[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)\s*(?P<units>.*)$")
_INTEGER = re.compile(r"^[+-]?\d+$")


def parse_units(text: str) -> CompoundUnit:
    """
    Parse a unit expression into a CompoundUnit.

    Raises:
        UnitSpecError: If the expression is empty or malformed
        UnknownUnitError: If a unit token does not resolve
    """
    if not isinstance(text, str) or not text.strip():
        raise UnitSpecError(f"Empty unit expression: {text!r}")
    text = text.strip()

    spec: Dict[str, int] = {}
    sign = 1
    pos = 0
    expect_term = True

    while pos < len(text):
        if expect_term:
            match = _TERM.match(text, pos)
            if not match:
                raise UnitSpecError(f"Expected a unit at position {pos} in '{text}'")
            unit = match.group('unit')
            power = int(match.group('power') or 1)
            if unit != '1':
                spec[unit] = spec.get(unit, 0) + sign * power
            expect_term = False
        else:
            match = _OPERATOR.match(text, pos)
            if not match:
                raise UnitSpecError(f"Expected an operator at position {pos} in '{text}'")
            sign = -1 if match.group('op') == '/' else 1
            expect_term = True
        pos = match.end()

    if expect_term:
        raise UnitSpecError(f"Unit expression ends with an operator: '{text}'")

    return CompoundUnit(spec)


def parse_quantity(text: str) -> Quantity:
    """
    Parse '4 in' or '100.5 gpm' style input into a Quantity.

    A bare number gives a dimensionless quantity.

    Raises:
        UnitSpecError: If the text does not start with a number
        UnknownUnitError: If a unit token does not resolve
    """
    if not isinstance(text, str):
        raise UnitSpecError(f"Cannot parse quantity from {type(text).__name__}")

    match = _QUANTITY.match(text.strip())
    if not match:
        raise UnitSpecError(f"Cannot parse quantity string: '{text}'")

    number = match.group('number')
    value = int(number) if _INTEGER.match(number) else float(number)

    units = match.group('units').strip()
    if not units:
        return Quantity(value)
    return Quantity(value, parse_units(units))


__all__ = ['parse_units', 'parse_quantity']
