"""Enforcement package: path configuration, evaluation and the enforcer.

Exports the decision flow used by HTTP adapters and the CLI.
"""
from __future__ import annotations

from aumos_policy_enforcer.enforcement.decision import AuthorizationDecision
from aumos_policy_enforcer.enforcement.enforcer import InstanceResolver, PolicyEnforcer
from aumos_policy_enforcer.enforcement.evaluator import PermissionEvaluator
from aumos_policy_enforcer.enforcement.modes import EnforcementMode, ScopeEnforcementMode
from aumos_policy_enforcer.enforcement.path_config import (
    MethodConfig,
    PathConfig,
    resolve_method_config,
)

__all__ = [
    "AuthorizationDecision",
    "EnforcementMode",
    "InstanceResolver",
    "MethodConfig",
    "PathConfig",
    "PermissionEvaluator",
    "PolicyEnforcer",
    "ScopeEnforcementMode",
    "resolve_method_config",
]
