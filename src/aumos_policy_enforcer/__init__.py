"""aumos-policy-enforcer: request-time policy enforcement point.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import aumos_policy_enforcer as pep
>>> pep.__version__
'0.1.0'
>>> enforcer = pep.build_enforcer({"enforcement_mode": "DISABLED"})
>>> enforcer.authorize(pep.HttpFacade(pep.HttpRequest("GET", "/any"))).granted
True
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ---------------------------------------------------------------------------
# Enforcement
# ---------------------------------------------------------------------------
from aumos_policy_enforcer.enforcement.modes import EnforcementMode, ScopeEnforcementMode
from aumos_policy_enforcer.enforcement.path_config import (
    MethodConfig,
    PathConfig,
    resolve_method_config,
)
from aumos_policy_enforcer.enforcement.decision import AuthorizationDecision
from aumos_policy_enforcer.enforcement.evaluator import PermissionEvaluator
from aumos_policy_enforcer.enforcement.enforcer import InstanceResolver, PolicyEnforcer

# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------
from aumos_policy_enforcer.tokens.access_token import (
    AccessToken,
    Authorization,
    Permission,
    SecurityContext,
)

# ---------------------------------------------------------------------------
# Matching and registry
# ---------------------------------------------------------------------------
from aumos_policy_enforcer.matching.resource_matcher import matches, matches_exactly
from aumos_policy_enforcer.matching.scope_matcher import satisfies
from aumos_policy_enforcer.registry.path_matcher import PathMatcher
from aumos_policy_enforcer.registry.path_registry import PathRegistry

# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------
from aumos_policy_enforcer.http.facade import (
    BearerChallenge,
    HttpFacade,
    HttpRequest,
    HttpResponse,
)

# ---------------------------------------------------------------------------
# Config, audit, errors
# ---------------------------------------------------------------------------
from aumos_policy_enforcer.config.loader import ConfigLoader
from aumos_policy_enforcer.config.schema import EnforcerSettings
from aumos_policy_enforcer.audit.logger import DecisionAuditLogger
from aumos_policy_enforcer.errors import (
    AuthorizationContextError,
    EnforcerConfigError,
    PolicyEnforcerError,
)
from aumos_policy_enforcer.convenience import build_enforcer

__all__ = [
    "__version__",
    "build_enforcer",
    # Enforcement
    "AuthorizationDecision",
    "EnforcementMode",
    "InstanceResolver",
    "MethodConfig",
    "PathConfig",
    "PermissionEvaluator",
    "PolicyEnforcer",
    "ScopeEnforcementMode",
    "resolve_method_config",
    # Tokens
    "AccessToken",
    "Authorization",
    "Permission",
    "SecurityContext",
    # Matching and registry
    "PathMatcher",
    "PathRegistry",
    "matches",
    "matches_exactly",
    "satisfies",
    # HTTP
    "BearerChallenge",
    "HttpFacade",
    "HttpRequest",
    "HttpResponse",
    # Config, audit, errors
    "AuthorizationContextError",
    "ConfigLoader",
    "DecisionAuditLogger",
    "EnforcerConfigError",
    "EnforcerSettings",
    "PolicyEnforcerError",
]
