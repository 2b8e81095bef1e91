"""Configuration schema and YAML loader."""
from __future__ import annotations

from aumos_policy_enforcer.config.loader import ConfigLoader
from aumos_policy_enforcer.config.schema import (
    AuditSettings,
    EnforcerSettings,
    MethodSettings,
    PathSettings,
)

__all__ = [
    "AuditSettings",
    "ConfigLoader",
    "EnforcerSettings",
    "MethodSettings",
    "PathSettings",
]
