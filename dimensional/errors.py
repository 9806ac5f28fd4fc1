"""
Dimensional Errors
==================

Two tiers:

    UnitSpecError   structural: the request itself is malformed
                    (no units given, empty or all-zero exponents)
    UnitsError      domain: the request is well formed but violates
                    unit semantics (unknown unit, mismatched units,
                    impossible conversion, non-divisible root)

Both derive from ValueError so callers that only care about "bad input"
can catch one thing.
"""

from typing import Optional


class UnitSpecError(ValueError):
    """Raised when a unit specification is absent, empty or malformed."""
    pass


class UnitsError(ValueError):
    """Raised when an operation violates unit semantics."""
    pass


class UnknownUnitError(UnitsError):
    """Raised when a token does not resolve to any registered unit."""

    def __init__(self, token, message: Optional[str] = None):
        self.token = token
        super().__init__(message or f"Unknown unit: '{token}'")


class IncompatibleUnitsError(UnitsError):
    """Raised when two units cannot be combined or converted."""
    pass


__all__ = [
    'UnitSpecError',
    'UnitsError',
    'UnknownUnitError',
    'IncompatibleUnitsError',
]
