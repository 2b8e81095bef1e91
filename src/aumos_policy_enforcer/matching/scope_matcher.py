"""Scope satisfaction check.

Example
-------
>>> from aumos_policy_enforcer.enforcement.modes import ScopeEnforcementMode
>>> satisfies(["view", "edit"], {"view"}, ScopeEnforcementMode.ANY)
True
>>> satisfies(["view", "edit"], {"view"}, ScopeEnforcementMode.ALL)
False
"""
from __future__ import annotations

from collections.abc import Sequence, Set

from aumos_policy_enforcer.enforcement.modes import ScopeEnforcementMode


def satisfies(
    required: Sequence[str],
    granted: Set[str],
    mode: ScopeEnforcementMode | None,
) -> bool:
    """Return True if *granted* scopes satisfy *required* under *mode*.

    An empty *granted* set is an unrestricted grant and always satisfies.
    With no recognised *mode* only an empty requirement is satisfied.
    """
    if not granted:
        return True

    if mode == ScopeEnforcementMode.ALL:
        return all(scope in granted for scope in required)

    if mode == ScopeEnforcementMode.ANY:
        if any(scope in granted for scope in required):
            return True

    return not required
