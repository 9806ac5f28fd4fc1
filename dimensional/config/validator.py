"""
Unit Table Validator

ZERO DEFAULTS POLICY: every unit and prefix entry must spell out the
fields the registry needs. Nothing is guessed.

Usage:
    from dimensional.config.validator import ConfigurationError, validate_table

    # In UnitTable.from_yaml():
    validate_table(document, path)
"""

import logging
from numbers import Real
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """
    Raised when a unit table document is missing or inconsistent.

    The message names the file, the section and the offending entry so
    the table can be fixed without reading the loader.
    """
    pass


# Required fields per table section
REQUIRED_FIELDS = {
    'prefixes': [
        'name',
        'abbreviation',
        'exponent',
    ],
    'units': [
        'name',
        'dimension',
    ],
}

# Exactly one of these must be present on every unit entry
SCALE_FIELDS = ('scale', 'per_reference')

OPTIONAL_FIELDS = {
    'prefixes': [],
    'units': ['abbreviation', 'prefixable', 'aliases'],
}


def _frame(title: str, body: str, config_path: Optional[Path] = None) -> str:
    location = f"File: {config_path}\n" if config_path else ""
    return (
        f"\n{'='*60}\n"
        f"CONFIGURATION ERROR: {title}\n"
        f"{'='*60}\n"
        f"{location}"
        f"{body}"
        f"{'='*60}"
    )


def validate_required(
    entry: Dict[str, Any],
    required_keys: List[str],
    section: str,
    config_path: Optional[Path] = None,
) -> None:
    """
    Validate that all required keys of a table entry are present.

    Args:
        entry: One prefix or unit mapping from the table
        required_keys: Keys that must be present and not None
        section: Table section name (for error message)
        config_path: Path to the table file (for error message)

    Raises:
        ConfigurationError: If any required key is missing or None
    """
    missing = [key for key in required_keys if entry.get(key) is None]

    if missing:
        raise ConfigurationError(_frame(
            "Missing required fields",
            f"Section: {section}\n"
            f"Entry: {entry!r}\n\n"
            f"Missing fields:\n"
            f"{''.join(f'  - {k}' + chr(10) for k in missing)}\n",
            config_path,
        ))


def require_key(document: Dict[str, Any], key: str, config_path: Optional[Path] = None) -> Any:
    """
    Get a required top-level section.

    Unlike dict.get(), this NEVER returns a default value.

    Raises:
        ConfigurationError: If key is missing or None
    """
    if not isinstance(document, dict) or document.get(key) is None:
        raise ConfigurationError(_frame(
            f"{key} not set",
            f"The unit table must define a '{key}' section.\n\n"
            f"  {key}:\n"
            f"    - name: <value>\n\n",
            config_path,
        ))

    return document[key]


def _check_number(value: Any, field: str, entry: Dict[str, Any], config_path: Optional[Path]) -> None:
    if isinstance(value, bool):
        ok = False
    elif isinstance(value, Real):
        ok = value > 0
    elif isinstance(value, str):
        try:
            ok = float(value) > 0
        except ValueError:
            ok = False
    else:
        ok = False

    if not ok:
        raise ConfigurationError(_frame(
            f"Invalid {field}",
            f"Entry: {entry!r}\n\n"
            f"{field} must be a positive number, got {value!r}\n",
            config_path,
        ))


def _check_spelling(spelling: str, seen: Set[str], entry: Dict[str, Any],
                    config_path: Optional[Path], case_sensitive: bool) -> None:
    if not isinstance(spelling, str) or not spelling:
        raise ConfigurationError(_frame(
            "Invalid spelling",
            f"Entry: {entry!r}\n\nSpellings must be non-empty strings.\n",
            config_path,
        ))
    key = spelling if case_sensitive else spelling.lower()
    if key in seen:
        raise ConfigurationError(_frame(
            "Duplicate spelling",
            f"Entry: {entry!r}\n\n'{spelling}' is already defined.\n",
            config_path,
        ))
    seen.add(key)


def validate_prefix(entry: Dict[str, Any], config_path: Optional[Path] = None) -> None:
    """Validate one prefix entry."""
    validate_required(entry, REQUIRED_FIELDS['prefixes'], 'prefixes', config_path)

    exponent = entry['exponent']
    if isinstance(exponent, bool) or not isinstance(exponent, int):
        raise ConfigurationError(_frame(
            "Invalid exponent",
            f"Entry: {entry!r}\n\n"
            f"Prefix exponents are integer powers of ten, got {exponent!r}\n",
            config_path,
        ))


def validate_unit(entry: Dict[str, Any], config_path: Optional[Path] = None) -> None:
    """
    Validate one unit entry.

    A unit declares its size either as `scale` (reference units per one
    of this unit) or as `per_reference` (this unit per one reference
    unit). Exactly one must be given.
    """
    validate_required(entry, REQUIRED_FIELDS['units'], 'units', config_path)

    given = [f for f in SCALE_FIELDS if entry.get(f) is not None]
    if len(given) != 1:
        raise ConfigurationError(_frame(
            "Ambiguous scale",
            f"Entry: {entry!r}\n\n"
            f"Set exactly one of: {', '.join(SCALE_FIELDS)}\n",
            config_path,
        ))
    _check_number(entry[given[0]], given[0], entry, config_path)

    unknown = set(entry) - set(REQUIRED_FIELDS['units']) - set(SCALE_FIELDS) - set(OPTIONAL_FIELDS['units'])
    if unknown:
        raise ConfigurationError(_frame(
            "Unknown fields",
            f"Entry: {entry!r}\n\n"
            f"Unknown fields: {', '.join(sorted(unknown))}\n",
            config_path,
        ))

    aliases = entry.get('aliases', [])
    if not isinstance(aliases, list):
        raise ConfigurationError(_frame(
            "Invalid aliases",
            f"Entry: {entry!r}\n\naliases must be a list of strings.\n",
            config_path,
        ))


def validate_table(document: Dict[str, Any], config_path: Optional[Path] = None) -> None:
    """
    Validate a complete unit table document.

    Args:
        document: Parsed YAML document with 'prefixes' and 'units' sections
        config_path: Path to the table file (for error message)

    Raises:
        ConfigurationError: On any missing, malformed or duplicated entry
    """
    prefixes = require_key(document, 'prefixes', config_path)
    units = require_key(document, 'units', config_path)

    unknown = set(document) - set(REQUIRED_FIELDS)
    if unknown:
        raise ConfigurationError(_frame(
            "Unknown sections",
            f"Unknown sections: {', '.join(sorted(unknown))}\n"
            f"Allowed: {', '.join(REQUIRED_FIELDS)}\n",
            config_path,
        ))

    names: Set[str] = set()
    abbreviations: Set[str] = set()

    prefix_names: Set[str] = set()
    prefix_abbreviations: Set[str] = set()
    for entry in prefixes:
        validate_prefix(entry, config_path)
        _check_spelling(entry['name'], prefix_names, entry, config_path, case_sensitive=False)
        _check_spelling(entry['abbreviation'], prefix_abbreviations, entry, config_path, case_sensitive=True)

    for entry in units:
        validate_unit(entry, config_path)
        _check_spelling(entry['name'], names, entry, config_path, case_sensitive=False)
        for alias in entry.get('aliases', []):
            _check_spelling(alias, names, entry, config_path, case_sensitive=False)
        if entry.get('abbreviation') is not None:
            _check_spelling(entry['abbreviation'], abbreviations, entry, config_path, case_sensitive=True)

    logger.debug(f"Validated unit table: {len(units)} units, {len(prefixes)} prefixes")
