"""Scope and resource matching primitives used by the permission evaluator."""
from __future__ import annotations

from aumos_policy_enforcer.matching.resource_matcher import matches, matches_exactly
from aumos_policy_enforcer.matching.scope_matcher import satisfies

__all__ = [
    "matches",
    "matches_exactly",
    "satisfies",
]
