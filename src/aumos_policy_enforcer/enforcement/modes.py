"""Enforcement mode enumerations.

``EnforcementMode`` controls how strictly a request is evaluated, either
globally or per protected path. ``ScopeEnforcementMode`` controls how the
scopes required by a method are compared with the scopes a permission grants.
"""
from __future__ import annotations

from enum import Enum


class EnforcementMode(str, Enum):
    """Policy strictness level for the enforcer or a single path."""

    DISABLED = "DISABLED"
    ENFORCING = "ENFORCING"
    PERMISSIVE = "PERMISSIVE"

    @classmethod
    def parse(cls, value: str | EnforcementMode) -> EnforcementMode:
        """Return the mode for *value*, accepting any letter case.

        Raises
        ------
        ValueError
            If *value* does not name a known mode.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(
                f"Unknown enforcement mode {value!r}. "
                f"Valid: {[m.value for m in cls]}."
            ) from None


class ScopeEnforcementMode(str, Enum):
    """How required scopes are compared against granted scopes."""

    ALL = "ALL"
    ANY = "ANY"

    @classmethod
    def parse(cls, value: str | ScopeEnforcementMode) -> ScopeEnforcementMode:
        """Return the scope mode for *value*, accepting any letter case."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(
                f"Unknown scope enforcement mode {value!r}. "
                f"Valid: {[m.value for m in cls]}."
            ) from None
