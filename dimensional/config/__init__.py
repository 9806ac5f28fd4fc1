"""
Unit table configuration: validation of the YAML unit table.
"""

from .validator import ConfigurationError, validate_table, validate_required, require_key

__all__ = ['ConfigurationError', 'validate_table', 'validate_required', 'require_key']
