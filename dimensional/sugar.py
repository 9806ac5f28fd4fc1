"""
Unit Shortcuts
==============

Literal-style construction on top of CompoundUnit and Quantity.

    >>> from dimensional.sugar import units, quantity
    >>> 3 * units.meters
    Quantity(3, 'meter')
    >>> 100 * units.cm
    Quantity(100, 'centimeter')
    >>> quantity(9, 'meters', 2)
    Quantity(9, {'meter': 2})

The namespace is generated once from the registry's spellings. It holds
plain attributes, one per spelling; nothing is resolved on attribute
access, so a misspelled unit is an AttributeError.
"""

import keyword
from typing import Iterator, List

from . import registry
from .quantity import Quantity
from .units import CompoundUnit


def quantity(value, token: str, exponent: int = 1) -> Quantity:
    """Quantity(value, {token: exponent}), e.g. quantity(9, 'meters', 2)"""
    return Quantity(value, {token: exponent})


class UnitNamespace:
    """Read-only namespace of CompoundUnits keyed by registry spelling."""

    def __init__(self):
        for spelling in sorted(set(registry.TABLE.spellings())):
            if spelling.isidentifier() and not keyword.iskeyword(spelling):
                object.__setattr__(self, spelling, CompoundUnit(spelling))

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is read-only")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is read-only")

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(vars(self)))

    def __contains__(self, name: str) -> bool:
        return name in vars(self)

    def __len__(self) -> int:
        return len(vars(self))

    def __repr__(self) -> str:
        return f"UnitNamespace({len(self)} spellings)"


units = UnitNamespace()


def spellings() -> List[str]:
    """Every attribute available on `units`"""
    return list(units)


__all__ = ['units', 'quantity', 'spellings', 'UnitNamespace']
