"""
Unit Registry
=============

Static, read-only registry of canonical units, SI prefixes and
abbreviations. Resolves textual tokens to a canonical identity and a
scale relative to the dimension's reference unit.

Usage:
    >>> from dimensional.registry import valid_unit, resolve
    >>> valid_unit("centimeters")
    True
    >>> resolve("cm")
    ResolvedUnit(name='centimeter', abbreviation='cm', dimension='length', scale=Fraction(1, 100))

Resolution order for a token:
    1. exact match against unit names / aliases (case-insensitive)
       or abbreviations (case-sensitive)
    2. strip a plural "s" or "es" and retry names / aliases
    3. split off the longest prefix and retry 1-2 on the remainder,
       accepted only when the base unit is prefixable. Either prefix
       spelling combines with either unit spelling: "millimeters",
       "mm", "mmeters" and "millim" are all millimeters.
    4. strip a plural "s" from an abbreviation and retry 1-3 ("ins",
       "kms"). This runs last, so "ms" is a millisecond, not meters.

The process-wide TABLE is loaded once from data/units.yaml and never
mutated afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from fractions import Fraction
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, NamedTuple, Optional, Tuple, Union

import yaml

from .config.validator import validate_table
from .errors import UnknownUnitError

logger = logging.getLogger(__name__)


DEFAULT_TABLE_PATH = Path(__file__).parent / 'data' / 'units.yaml'

PLURAL_SUFFIXES = ('s', 'es')


# =============================================================================
# DESCRIPTORS
# =============================================================================

@dataclass(frozen=True)
class UnitDef:
    """Definition of a single base unit"""
    name: str                          # Canonical singular name (e.g., "meter")
    dimension: str                     # Dimension tag (e.g., "length")
    scale: Fraction                    # Reference units per one of this unit
    abbreviation: Optional[str] = None
    prefixable: bool = False           # Whether SI prefixes combine with it
    aliases: Tuple[str, ...] = ()      # Irregular spellings ("feet", "metre")


@dataclass(frozen=True)
class PrefixDef:
    """Definition of an SI prefix"""
    name: str
    abbreviation: str
    exponent: int

    @property
    def factor(self) -> Fraction:
        return Fraction(10) ** self.exponent


class ResolvedUnit(NamedTuple):
    """A token resolved to its canonical identity."""
    name: str
    abbreviation: Optional[str]
    dimension: str
    scale: Fraction

    @property
    def key(self) -> Tuple[str, Fraction]:
        """Term key used by CompoundUnit: (dimension, scale)"""
        return (self.dimension, self.scale)


def plural(name: str) -> str:
    """English plural of a unit name: inch -> inches, meter -> meters"""
    if name.endswith(('s', 'x', 'z', 'ch', 'sh')):
        return name + 'es'
    return name + 's'


def to_fraction(value: Union[int, float, str, Fraction]) -> Fraction:
    """Exact Fraction from a table value; floats go through their repr."""
    if isinstance(value, Fraction):
        return value
    if isinstance(value, int):
        return Fraction(value)
    if isinstance(value, float):
        return Fraction(repr(value))
    return Fraction(str(value).strip())


# =============================================================================
# TABLE
# =============================================================================

class UnitTable:
    """
    Immutable lookup structure over unit and prefix definitions.

    Built once; every lookup map is exposed as a MappingProxyType so the
    table can be shared between threads without locking.
    """

    def __init__(self, units: Iterable[UnitDef], prefixes: Iterable[PrefixDef]):
        units = tuple(units)
        prefixes = tuple(prefixes)

        names: Dict[str, UnitDef] = {}
        abbreviations: Dict[str, UnitDef] = {}
        for unit in units:
            names[unit.name.lower()] = unit
            for alias in unit.aliases:
                names[alias.lower()] = unit
            if unit.abbreviation:
                abbreviations[unit.abbreviation] = unit

        self._units = MappingProxyType({unit.name: unit for unit in units})
        self._names = MappingProxyType(names)
        self._abbreviations = MappingProxyType(abbreviations)
        self._prefixes_by_name = MappingProxyType({p.name.lower(): p for p in prefixes})
        self._prefixes_by_abbreviation = MappingProxyType({p.abbreviation: p for p in prefixes})

        # Longest first, so ambiguous splits take the longest prefix
        self._prefix_names = tuple(sorted(self._prefixes_by_name, key=len, reverse=True))
        self._prefix_abbreviations = tuple(sorted(self._prefixes_by_abbreviation, key=len, reverse=True))

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_config(cls, document: Dict[str, Any], config_path: Optional[Path] = None) -> UnitTable:
        """Build a table from a parsed unit table document (validated first)."""
        validate_table(document, config_path)

        prefixes = [
            PrefixDef(entry['name'], entry['abbreviation'], entry['exponent'])
            for entry in document['prefixes']
        ]

        units = []
        for entry in document['units']:
            if entry.get('scale') is not None:
                scale = to_fraction(entry['scale'])
            else:
                scale = 1 / to_fraction(entry['per_reference'])
            units.append(UnitDef(
                name=entry['name'],
                dimension=entry['dimension'],
                scale=scale,
                abbreviation=entry.get('abbreviation'),
                prefixable=bool(entry.get('prefixable', False)),
                aliases=tuple(entry.get('aliases', [])),
            ))

        table = cls(units, prefixes)
        logger.debug(
            f"Loaded unit table{f' from {config_path}' if config_path else ''}: "
            f"{len(units)} units, {len(prefixes)} prefixes, "
            f"{len(table.dimensions())} dimensions"
        )
        return table

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> UnitTable:
        """Load and validate a unit table YAML file."""
        config_path = Path(path)
        with open(config_path, 'r', encoding='utf-8') as f:
            document = yaml.safe_load(f)
        return cls.from_config(document, config_path)

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def _match_name(self, token: str) -> Optional[UnitDef]:
        lowered = token.lower()
        unit = self._names.get(lowered)
        if unit is not None:
            return unit

        for suffix in PLURAL_SUFFIXES:
            if lowered.endswith(suffix) and len(lowered) > len(suffix):
                unit = self._names.get(lowered[:-len(suffix)])
                if unit is not None:
                    return unit
        return None

    def _match(self, token: str) -> Optional[UnitDef]:
        unit = self._abbreviations.get(token)
        if unit is not None:
            return unit
        return self._match_name(token)

    def _match_prefixed(self, token: str) -> Optional[Tuple[PrefixDef, UnitDef]]:
        """Split token into (prefix, base unit) or None."""
        lowered = token.lower()
        for name in self._prefix_names:
            if lowered.startswith(name) and len(lowered) > len(name):
                unit = self._match(token[len(name):])
                if unit is not None and unit.prefixable:
                    return self._prefixes_by_name[name], unit

        for abbreviation in self._prefix_abbreviations:
            if token.startswith(abbreviation) and len(token) > len(abbreviation):
                unit = self._match(token[len(abbreviation):])
                if unit is not None and unit.prefixable:
                    return self._prefixes_by_abbreviation[abbreviation], unit

        return None

    def _lookup_exact(self, token: str) -> Optional[ResolvedUnit]:
        unit = self._match(token)
        if unit is not None:
            return ResolvedUnit(unit.name, unit.abbreviation, unit.dimension, unit.scale)

        split = self._match_prefixed(token)
        if split is None:
            return None

        prefix, unit = split
        abbreviation = prefix.abbreviation + unit.abbreviation if unit.abbreviation else None
        return ResolvedUnit(
            prefix.name + unit.name,
            abbreviation,
            unit.dimension,
            prefix.factor * unit.scale,
        )

    def lookup(self, token: Any) -> Optional[ResolvedUnit]:
        """Resolve a token, returning None when it is not a known unit."""
        if not isinstance(token, str) or not token:
            return None

        resolved = self._lookup_exact(token)
        if resolved is not None:
            return resolved

        # Abbreviation plurals ("ins", "kms") come last so "ms" stays a millisecond
        if token.endswith('s') and len(token) > 1:
            resolved = self._lookup_exact(token[:-1])
            if resolved is not None and resolved.abbreviation == token[:-1]:
                return resolved
        return None

    def valid_unit(self, token: Any) -> bool:
        return self.lookup(token) is not None

    def resolve(self, token: Any) -> ResolvedUnit:
        """
        Resolve a token to its canonical identity.

        Raises:
            UnknownUnitError: If the token is not a known unit
        """
        resolved = self.lookup(token)
        if resolved is None:
            raise UnknownUnitError(token)
        return resolved

    def canonical_name_of(self, token: Any) -> str:
        return self.resolve(token).name

    def abbreviation_of(self, token: Any) -> Optional[str]:
        """Abbreviation of a token, or None if the unit has none."""
        return self.resolve(token).abbreviation

    def dimension_of(self, token: Any) -> str:
        return self.resolve(token).dimension

    # -------------------------------------------------------------------------
    # Enumeration
    # -------------------------------------------------------------------------

    @property
    def units(self) -> MappingProxyType:
        """Base units by canonical name"""
        return self._units

    @property
    def prefixes(self) -> MappingProxyType:
        """Prefixes by name"""
        return self._prefixes_by_name

    @property
    def abbreviations(self) -> MappingProxyType:
        return self._abbreviations

    def dimensions(self) -> List[str]:
        return sorted({unit.dimension for unit in self._units.values()})

    def units_in(self, dimension: str) -> List[str]:
        """Canonical names of the base units in a dimension"""
        return [name for name, unit in self._units.items() if unit.dimension == dimension]

    def spellings(self) -> Iterator[str]:
        """
        Every canonical spelling the table accepts: names and their
        plurals, aliases, abbreviations, and prefixed names / abbreviations
        of prefixable units.
        """
        for unit in self._units.values():
            yield unit.name
            yield plural(unit.name)
            yield from unit.aliases
            if unit.abbreviation:
                yield unit.abbreviation
            if unit.prefixable:
                for prefix in self._prefixes_by_name.values():
                    yield prefix.name + unit.name
                    yield plural(prefix.name + unit.name)
                    if unit.abbreviation:
                        yield prefix.abbreviation + unit.abbreviation

    def __contains__(self, token: Any) -> bool:
        return self.valid_unit(token)

    def __repr__(self) -> str:
        return f"UnitTable({len(self._units)} units, {len(self._prefixes_by_name)} prefixes)"


# =============================================================================
# PROCESS-WIDE TABLE
# =============================================================================

TABLE = UnitTable.from_yaml(DEFAULT_TABLE_PATH)


def valid_unit(token: Any) -> bool:
    """Check whether a token names a known unit"""
    return TABLE.valid_unit(token)


def resolve(token: Any) -> ResolvedUnit:
    """Resolve a token against the process-wide table"""
    return TABLE.resolve(token)


def lookup(token: Any) -> Optional[ResolvedUnit]:
    return TABLE.lookup(token)


def canonical_name_of(token: Any) -> str:
    return TABLE.canonical_name_of(token)


def abbreviation_of(token: Any) -> Optional[str]:
    return TABLE.abbreviation_of(token)


__all__ = [
    'UnitDef', 'PrefixDef', 'ResolvedUnit', 'UnitTable',
    'TABLE', 'DEFAULT_TABLE_PATH',
    'valid_unit', 'resolve', 'lookup', 'canonical_name_of', 'abbreviation_of',
    'to_fraction', 'plural',
]
