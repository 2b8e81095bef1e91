"""Access token model consumed by the enforcer."""
from __future__ import annotations

from aumos_policy_enforcer.tokens.access_token import (
    AccessToken,
    Authorization,
    Permission,
    SecurityContext,
)

__all__ = [
    "AccessToken",
    "Authorization",
    "Permission",
    "SecurityContext",
]
