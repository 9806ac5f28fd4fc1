"""
dimensional - Unit-Safe Quantities
==================================

Raw numerals paired with compound units, with arithmetic that refuses
to mix units and conversions that get the scale factors right.

    UNIT TABLE -> COMPOUND UNIT -> QUANTITY
    (read-only)   (immutable)      (immutable)

Architecture:
    - registry: unit/prefix table, token resolution (data/units.yaml)
    - units:    CompoundUnit algebra and conversion validity
    - quantity: Quantity arithmetic, comparison, conversion
    - parse:    "m/s^2" and "4 in" parsing
    - sugar:    3 * units.meters

Usage:
    from dimensional import Quantity, CompoundUnit
    Quantity(100, 'cm').convert_to('inches')
"""

__version__ = "1.0.0"

from .errors import IncompatibleUnitsError, UnitSpecError, UnitsError, UnknownUnitError
from .registry import UnitTable, abbreviation_of, canonical_name_of, resolve, valid_unit
from .units import CompoundUnit
from .quantity import Q, Quantity
from .parse import parse_quantity, parse_units
from .sugar import quantity, units

__all__ = [
    'Quantity', 'Q', 'CompoundUnit', 'UnitTable',
    'valid_unit', 'resolve', 'canonical_name_of', 'abbreviation_of',
    'parse_units', 'parse_quantity',
    'units', 'quantity',
    'UnitsError', 'UnitSpecError', 'UnknownUnitError', 'IncompatibleUnitsError',
    '__version__',
]
