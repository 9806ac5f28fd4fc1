"""
Compound Units
==============

Immutable product-of-powers of unit terms, e.g. meter^1 * second^-1.

A term is keyed by (dimension, scale): meter and millimeter are distinct
terms even though both are lengths. Exponents are nonzero integers and
the term set is never empty. A quantity without units carries no
CompoundUnit at all (None), never an empty one.

Usage:
    >>> from dimensional.units import CompoundUnit
    >>> m = CompoundUnit('meters')
    >>> (m * m) == CompoundUnit({'meter': 2})
    True
    >>> (m * m).square_root() == m
    True
    >>> m.valid_conversion('inch'), m.valid_conversion('hertz'), m.valid_conversion('foo')
    (True, None, False)
    >>> m.convert(10, 'inch')
    393.701
"""

from __future__ import annotations

import logging
from fractions import Fraction
from numbers import Integral, Number
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple, Union

from . import registry
from .errors import IncompatibleUnitsError, UnitSpecError, UnitsError, UnknownUnitError

logger = logging.getLogger(__name__)


TermKey = Tuple[str, Fraction]        # (dimension, scale)
Label = Tuple[str, Optional[str]]     # (name, abbreviation), display only

UnitSpec = Union[str, Iterable[str], Mapping[str, int], 'CompoundUnit']


def _exponent(value) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise UnitSpecError(f"Unit exponents must be integers, got {value!r}")
    return int(value)


def _scale_value(value, ratio: Fraction):
    """Multiply a numeral by an exact ratio, keeping exact inputs exact."""
    if isinstance(value, Fraction):
        return value * ratio
    if isinstance(value, Integral):
        result = int(value) * ratio
        return int(result) if result.denominator == 1 else float(result)
    return value * float(ratio)


class CompoundUnit:
    """
    Immutable mapping of term key -> nonzero integer exponent.

    Construct from a single token, a sequence of tokens (duplicates
    accumulate), a token -> exponent mapping, or another CompoundUnit.

    Raises:
        UnknownUnitError: If a token does not resolve
        UnitSpecError: If the spec is None, has non-integer exponents,
            or leaves no terms after dropping zero exponents
    """

    __slots__ = ('_terms', '_labels', '_hash')

    def __init__(self, spec: UnitSpec):
        if isinstance(spec, CompoundUnit):
            self._init_terms(dict(spec._terms), dict(spec._labels))
            return

        if spec is None:
            raise UnitSpecError("Units must be specified")

        if isinstance(spec, str):
            items = [(spec, 1)]
        elif isinstance(spec, Mapping):
            items = [(token, _exponent(power)) for token, power in spec.items()]
        else:
            try:
                items = [(token, 1) for token in spec]
            except TypeError:
                raise UnitSpecError(f"Cannot build units from {type(spec).__name__}: {spec!r}") from None

        terms: Dict[TermKey, int] = {}
        labels: Dict[TermKey, Label] = {}
        for token, power in items:
            resolved = registry.resolve(token)
            terms[resolved.key] = terms.get(resolved.key, 0) + power
            labels.setdefault(resolved.key, (resolved.name, resolved.abbreviation))

        self._init_terms(terms, labels)

    def _init_terms(self, terms: Dict[TermKey, int], labels: Dict[TermKey, Label]) -> None:
        terms = {key: power for key, power in terms.items() if power != 0}
        if not terms:
            raise UnitSpecError("Units must have at least one term with a nonzero exponent")

        self._terms = MappingProxyType(terms)
        self._labels = MappingProxyType({key: labels[key] for key in terms})
        self._hash = hash(frozenset(terms.items()))

    @classmethod
    def _from_terms(cls, terms: Dict[TermKey, int], labels: Dict[TermKey, Label]) -> CompoundUnit:
        unit = cls.__new__(cls)
        unit._init_terms(terms, labels)
        return unit

    @classmethod
    def parse(cls, text: str) -> CompoundUnit:
        """Parse a unit expression such as 'm/s^2' or 'kg*m/s^2'"""
        from .parse import parse_units
        return parse_units(text)

    def __setattr__(self, name, value):
        if hasattr(self, '_hash'):
            raise AttributeError(f"{type(self).__name__} is immutable")
        object.__setattr__(self, name, value)

    def __reduce__(self):
        return (self._from_terms, (dict(self._terms), dict(self._labels)))

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def terms(self) -> Mapping[TermKey, int]:
        """Read-only view of (dimension, scale) -> exponent"""
        return self._terms

    @property
    def dimensions(self) -> Dict[str, int]:
        """Net exponent per dimension, ignoring scale"""
        net: Dict[str, int] = {}
        for (dimension, _), power in self._terms.items():
            net[dimension] = net.get(dimension, 0) + power
        return {dimension: power for dimension, power in net.items() if power != 0}

    def is_simple(self) -> bool:
        """True for a single term with exponent 1, the only convertible shape"""
        return len(self._terms) == 1 and next(iter(self._terms.values())) == 1

    def is_a(self, token: str) -> bool:
        """
        Check whether any term shares the token's dimension.

        Scale and exponent sign are ignored: millimeters and meters^-1 are
        both "meters".

        Raises:
            UnknownUnitError: If the token is not a known unit
        """
        dimension = registry.resolve(token).dimension
        return any(key[0] == dimension for key in self._terms)

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    def valid_conversion(self, token: str) -> Optional[bool]:
        """
        Three-valued conversion check.

        Returns:
            False if the token is not a unit at all,
            None if it is a unit but this unit cannot convert to it,
            True if it names the same dimension as the sole term
        """
        target = registry.lookup(token)
        if target is None:
            return False
        if not self.is_simple():
            return None
        (dimension, _), = self._terms
        return True if dimension == target.dimension else None

    def convert(self, value, token: str):
        """
        Convert a raw value expressed in this unit into the token's unit.

        Computes value * (source.scale / target.scale).

        Raises:
            UnknownUnitError: If the token is not a unit
            IncompatibleUnitsError: If the dimensions differ or this unit
                is not a single term with exponent 1
        """
        validity = self.valid_conversion(token)
        if validity is False:
            raise UnknownUnitError(token)
        if validity is None:
            raise IncompatibleUnitsError(f"Cannot convert {self} to {token}")

        (_, source_scale), = self._terms
        target = registry.resolve(token)
        ratio = source_scale / target.scale
        logger.debug(f"Converting {self} -> {target.name} (ratio {ratio})")
        return _scale_value(value, ratio)

    # -------------------------------------------------------------------------
    # Algebra
    # -------------------------------------------------------------------------

    def _merge(self, other: CompoundUnit, sign: int) -> CompoundUnit:
        terms = dict(self._terms)
        labels = dict(self._labels)
        for key, power in other._terms.items():
            terms[key] = terms.get(key, 0) + sign * power
            labels.setdefault(key, other._labels[key])
        return self._from_terms(terms, labels)

    def __mul__(self, other):
        if other is None:
            return self
        if isinstance(other, CompoundUnit):
            return self._merge(other, 1)
        if isinstance(other, Number):
            from .quantity import Quantity
            return Quantity(other, self)
        return NotImplemented

    def __rmul__(self, other):
        # 3 * units.meter -> Quantity(3, meter)
        if isinstance(other, Number):
            from .quantity import Quantity
            return Quantity(other, self)
        return NotImplemented

    def __truediv__(self, other):
        if other is None:
            return self
        if isinstance(other, CompoundUnit):
            return self._merge(other, -1)
        return NotImplemented

    def __rtruediv__(self, other):
        # 1 / units.second -> Quantity(1, second^-1)
        if isinstance(other, Number):
            from .quantity import Quantity
            return Quantity(other, self ** -1)
        return NotImplemented

    def __pow__(self, power: int) -> CompoundUnit:
        power = _exponent(power)
        return self._from_terms(
            {key: exponent * power for key, exponent in self._terms.items()},
            dict(self._labels),
        )

    def root(self, degree: int) -> CompoundUnit:
        """
        Divide every exponent by degree.

        Raises:
            UnitsError: If any exponent is not evenly divisible
        """
        degree = _exponent(degree)
        if degree <= 0:
            raise UnitsError(f"Root degree must be positive, got {degree}")

        terms = {}
        for key, exponent in self._terms.items():
            if exponent % degree:
                raise UnitsError(f"Cannot take root {degree} of {self}: exponent {exponent} is not divisible")
            terms[key] = exponent // degree
        return self._from_terms(terms, dict(self._labels))

    def square_root(self) -> CompoundUnit:
        return self.root(2)

    # -------------------------------------------------------------------------
    # Equality
    # -------------------------------------------------------------------------

    def __eq__(self, other) -> bool:
        if isinstance(other, CompoundUnit):
            return self._terms == other._terms
        return NotImplemented

    def __hash__(self) -> int:
        return self._hash

    def compare(self, other) -> Optional[int]:
        """
        Three-way comparison: 0 when equal, None otherwise.

        Units have no ordering, so there is no -1 or 1. Anything
        CompoundUnit accepts may be passed as other.

        Raises:
            UnknownUnitError: If other names an unknown unit
        """
        if not isinstance(other, CompoundUnit):
            other = CompoundUnit(other)
        return 0 if self == other else None

    # -------------------------------------------------------------------------
    # Formatting
    # -------------------------------------------------------------------------

    def _render(self, abbreviate: bool) -> str:
        def label(key: TermKey) -> str:
            name, abbreviation = self._labels[key]
            return abbreviation if (abbreviate and abbreviation) else name

        def power(key: TermKey, exponent: int) -> str:
            return label(key) if exponent == 1 else f"{label(key)}^{exponent}"

        numerator = [power(k, e) for k, e in self._terms.items() if e > 0]
        denominator = [power(k, -e) for k, e in self._terms.items() if e < 0]

        text = '*'.join(numerator) if numerator else '1'
        if denominator:
            text += '/' + '/'.join(denominator)
        return text

    def to_abbreviation(self) -> str:
        """Abbreviated form, e.g. 'cm' or 'm/s^2'"""
        return self._render(abbreviate=True)

    def __str__(self) -> str:
        return self._render(abbreviate=False)

    def spec(self) -> Dict[str, int]:
        """Canonical name -> exponent; feeding it back in rebuilds this unit"""
        return {self._labels[key][0]: exponent for key, exponent in self._terms.items()}

    def __repr__(self) -> str:
        return f"CompoundUnit({self.spec()!r})"


__all__ = ['CompoundUnit', 'TermKey', 'UnitSpec']
