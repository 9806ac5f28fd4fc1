"""
Quantity
========

A raw numeral paired with an optional CompoundUnit.

Usage:
    >>> from dimensional.quantity import Q
    >>> Q(3, 'meters') + Q(4, 'meters')
    Quantity(7, 'meter')
    >>> Q(12, 'meters') / Q(3, 'meters')        # units cancel -> bare numeral
    4.0
    >>> Q(100, 'cm').convert_to('inches')
    Quantity(39.3701, 'inch')
    >>> Q(0, 'meters') == 0                    # zero guards keep working
    True
    >>> Q(3, 'meters') * [1, 2]                # broadcast
    [Quantity(3, 'meter'), Quantity(6, 'meter')]

Rules:
    + / -   both sides dimensionless, or exactly one side with units (the
            bare side is taken to be in those units), or exactly equal
            units. Anything else raises IncompatibleUnitsError.
    * / //  units multiply / divide. Full cancellation returns a bare
            numeral. A zero dividend returns bare zero whatever the units.
    **      unit exponents scale with the power.
    compare returns None ("unordered") when both sides carry unequal units.
"""

from __future__ import annotations

import logging
import math
import operator
from dataclasses import dataclass
from fractions import Fraction
from numbers import Integral, Number, Rational, Real
from typing import Any, Callable, Optional

import numpy as np

from . import registry
from .errors import IncompatibleUnitsError, UnitSpecError, UnitsError
from .units import CompoundUnit

logger = logging.getLogger(__name__)


# Largest root taken when a unitful quantity is raised to a float power
MAX_ROOT_DENOMINATOR = 12

SEQUENCE_TYPES = (list, tuple, np.ndarray)


# =============================================================================
# BROADCAST HELPERS
# =============================================================================

def _is_sequence(value: Any) -> bool:
    return isinstance(value, SEQUENCE_TYPES)


def _broadcast(fn: Callable[[Any], Any], values):
    """Apply fn element-wise, returning the same kind of container."""
    def apply(item):
        result = fn(item)
        if result is NotImplemented:
            raise TypeError(f"Unsupported element for Quantity broadcast: {item!r}")
        return result

    if isinstance(values, np.ndarray):
        return np.frompyfunc(apply, 1, 1)(values)
    if isinstance(values, tuple):
        return tuple(apply(item) for item in values)
    return [apply(item) for item in values]


def _split(other):
    """(value, units) for a Quantity or bare numeral, else None."""
    if isinstance(other, Quantity):
        return other.value, other.units
    if isinstance(other, Number):
        return other, None
    return None


def _root_value(value, degree: int):
    if isinstance(value, Integral) and value >= 0:
        candidate = round(value ** (1.0 / degree))
        if candidate ** degree == value:
            return candidate
    if degree == 2:
        return math.sqrt(value)
    if value < 0 and degree % 2:
        return -((-value) ** (1.0 / degree))
    return value ** (1.0 / degree)


# =============================================================================
# QUANTITY
# =============================================================================

@dataclass(frozen=True, eq=False)
class Quantity:
    """
    Immutable numeral with optional units.

    Args:
        value: int, float, Fraction or any other numbers.Number
        units: None (dimensionless), a CompoundUnit, or anything
            CompoundUnit accepts: 'meter', ['meter', 'meter'], {'meter': 2}
    """
    value: Number
    units: Optional[CompoundUnit] = None

    # Let numpy defer to our reflected operators: ndarray * q -> q.__rmul__
    __array_ufunc__ = None

    def __post_init__(self):
        if isinstance(self.value, Quantity) or not isinstance(self.value, Number):
            raise TypeError(f"Quantity value must be a number, got {type(self.value).__name__}")
        if self.units is not None and not isinstance(self.units, CompoundUnit):
            object.__setattr__(self, 'units', CompoundUnit(self.units))

    @classmethod
    def parse(cls, text: str) -> Quantity:
        """Parse '4 in', '9.81 m/s^2' or a bare number"""
        from .parse import parse_quantity
        return parse_quantity(text)

    @property
    def dimensionless(self) -> bool:
        return self.units is None

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def _additive(self, other, op, reflected: bool = False):
        if _is_sequence(other):
            return _broadcast(lambda item: self._additive(item, op, reflected), other)

        split = _split(other)
        if split is None:
            return NotImplemented
        other_value, other_units = split

        if self.units is not None and other_units is not None and self.units != other_units:
            raise IncompatibleUnitsError(f"Incompatible units: {self.units} and {other_units}")

        left, right = (other_value, self.value) if reflected else (self.value, other_value)
        units = self.units if self.units is not None else other_units
        return Quantity(op(left, right), units)

    def _multiplicative(self, other, op, divide: bool, reflected: bool = False):
        if _is_sequence(other):
            return _broadcast(lambda item: self._multiplicative(item, op, divide, reflected), other)
        if isinstance(other, CompoundUnit):
            other = Quantity(1, other)

        split = _split(other)
        if split is None:
            return NotImplemented
        other_value, other_units = split

        if reflected:
            left_value, left_units, right_value, right_units = other_value, other_units, self.value, self.units
        else:
            left_value, left_units, right_value, right_units = self.value, self.units, other_value, other_units

        value = op(left_value, right_value)

        if divide and left_value == 0:
            return value
        if left_units is None and right_units is None:
            return Quantity(value)
        if right_units is None:
            return Quantity(value, left_units)
        if left_units is None:
            return Quantity(value, right_units ** -1 if divide else right_units)

        try:
            units = left_units / right_units if divide else left_units * right_units
        except UnitSpecError:
            logger.debug(f"Units cancelled: {left_units} {'/' if divide else '*'} {right_units}")
            return value
        return Quantity(value, units)

    def __add__(self, other):
        return self._additive(other, operator.add)

    def __radd__(self, other):
        return self._additive(other, operator.add, reflected=True)

    def __sub__(self, other):
        return self._additive(other, operator.sub)

    def __rsub__(self, other):
        return self._additive(other, operator.sub, reflected=True)

    def __mul__(self, other):
        return self._multiplicative(other, operator.mul, divide=False)

    def __rmul__(self, other):
        return self._multiplicative(other, operator.mul, divide=False, reflected=True)

    def __truediv__(self, other):
        return self._multiplicative(other, operator.truediv, divide=True)

    def __rtruediv__(self, other):
        return self._multiplicative(other, operator.truediv, divide=True, reflected=True)

    def __floordiv__(self, other):
        return self._multiplicative(other, operator.floordiv, divide=True)

    def __rfloordiv__(self, other):
        return self._multiplicative(other, operator.floordiv, divide=True, reflected=True)

    def __pow__(self, power):
        if isinstance(power, Quantity):
            if power.units is not None:
                raise UnitsError(f"Exponent must be dimensionless, got {power}")
            power = power.value
        if not isinstance(power, Real):
            return NotImplemented

        value = self.value ** power
        if self.units is None:
            return Quantity(value)

        if isinstance(power, Integral):
            if power == 0:
                return value
            return Quantity(value, self.units ** int(power))

        if isinstance(power, Rational):
            fraction = Fraction(power.numerator, power.denominator)
        else:
            fraction = Fraction(float(power)).limit_denominator(MAX_ROOT_DENOMINATOR)
        if fraction == 0:
            return value
        units = (self.units ** fraction.numerator).root(fraction.denominator)
        return Quantity(value, units)

    def __rpow__(self, base):
        if not isinstance(base, Number):
            return NotImplemented
        if self.units is not None:
            raise UnitsError(f"Exponent must be dimensionless, got {self}")
        return Quantity(base ** self.value)

    def root(self, degree: int) -> Quantity:
        """
        Take the degree-th root of value and units.

        Raises:
            UnitsError: If a unit exponent is not divisible by degree
        """
        units = self.units.root(degree) if self.units is not None else None
        return Quantity(_root_value(self.value, degree), units)

    def sqrt(self) -> Quantity:
        return self.root(2)

    def __neg__(self) -> Quantity:
        return Quantity(-self.value, self.units)

    def __pos__(self) -> Quantity:
        return Quantity(+self.value, self.units)

    def __abs__(self) -> Quantity:
        return Quantity(abs(self.value), self.units)

    def __round__(self, ndigits: Optional[int] = None) -> Quantity:
        return Quantity(round(self.value, ndigits), self.units)

    def __bool__(self) -> bool:
        return bool(self.value)

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def compare(self, other):
        """
        Three-way comparison: -1, 0, 1, or None when unordered.

        Sequences compare element-wise. A bare numeral compares against
        the raw value whatever this quantity's units are.
        """
        if _is_sequence(other):
            return _broadcast(self.compare, other)

        split = _split(other)
        if split is None:
            raise TypeError(f"Cannot compare Quantity with {type(other).__name__}")
        other_value, other_units = split

        if self.units is not None and other_units is not None and self.units != other_units:
            return None
        return int(self.value > other_value) - int(self.value < other_value)

    def _ordered(self, other, test: Callable[[int], bool]):
        if _is_sequence(other):
            return _broadcast(lambda item: self._ordered(item, test), other)
        if _split(other) is None:
            return NotImplemented
        result = self.compare(other)
        if result is None:
            return NotImplemented
        return test(result)

    def __lt__(self, other):
        return self._ordered(other, lambda c: c < 0)

    def __le__(self, other):
        return self._ordered(other, lambda c: c <= 0)

    def __gt__(self, other):
        return self._ordered(other, lambda c: c > 0)

    def __ge__(self, other):
        return self._ordered(other, lambda c: c >= 0)

    def __eq__(self, other):
        # Both values and units must match: 3 meters != 3 inches != 3.
        # Zero is the exception, 0 meters == 0, so divide-by-zero guards hold.
        if isinstance(other, Quantity):
            return self.units == other.units and bool(self.value == other.value)
        if isinstance(other, Number):
            if other == 0:
                return bool(self.value == 0)
            return self.units is None and bool(self.value == other)
        return NotImplemented

    def __hash__(self):
        if self.units is None or self.value == 0:
            return hash(self.value)
        return hash((self.value, self.units))

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    def convert_to(self, token: str) -> Quantity:
        """
        Return this quantity expressed in another unit of the same dimension.

        Raises:
            UnknownUnitError: If the token is not a unit
            IncompatibleUnitsError: If the dimensions differ, the units are
                compound, or this quantity is dimensionless
        """
        target = CompoundUnit(token)
        if self.units == target:
            return self
        if self.units is None:
            raise IncompatibleUnitsError(f"Cannot convert a dimensionless quantity to {target}")
        return Quantity(self.units.convert(self.value, token), target)

    def to(self, token: str):
        """Converted raw value in the target unit"""
        return self.convert_to(token).value

    def is_unit(self, token: str) -> bool:
        """
        Check whether this quantity has a term in the token's dimension.

        Raises:
            UnknownUnitError: If the token is not a unit
        """
        if self.units is None:
            registry.resolve(token)
            return False
        return self.units.is_a(token)

    # -------------------------------------------------------------------------
    # Formatting
    # -------------------------------------------------------------------------

    def format_plain(self) -> str:
        """Value only, never the unit"""
        return str(self.value)

    def format_abbreviated(self) -> str:
        if self.units is None:
            return str(self.value)
        return f"{self.value} {self.units.to_abbreviation()}"

    def __format__(self, spec: str) -> str:
        value = format(self.value, spec)
        if self.units is None:
            return value
        return f"{value} {self.units}"

    def __str__(self) -> str:
        if self.units is None:
            return str(self.value)
        return f"{self.value} {self.units}"

    def __repr__(self) -> str:
        if self.units is None:
            return f"Quantity({self.value!r})"
        if self.units.is_simple():
            return f"Quantity({self.value!r}, '{self.units}')"
        return f"Quantity({self.value!r}, {self.units.spec()!r})"


# Convenience alias
Q = Quantity


__all__ = ['Quantity', 'Q']
