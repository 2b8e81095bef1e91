"""Path registry and matcher for protected path configurations."""
from __future__ import annotations

from aumos_policy_enforcer.registry.path_matcher import (
    PathMatcher,
    PathMatcherProtocol,
    is_template,
    normalize_path,
)
from aumos_policy_enforcer.registry.path_registry import PathRegistry

__all__ = [
    "PathMatcher",
    "PathMatcherProtocol",
    "PathRegistry",
    "is_template",
    "normalize_path",
]
