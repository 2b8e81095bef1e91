"""Resource-level matching between permissions and path configurations.

Two checks are provided:

- :func:`matches` is the broad test. An instance configuration also matches
  permissions granted on its parent collection.
- :func:`matches_exactly` compares against the configuration's own
  identifier only.

Both return ``False`` for resource-agnostic permissions; callers handle those
separately.
"""
from __future__ import annotations

from aumos_policy_enforcer.enforcement.path_config import PathConfig
from aumos_policy_enforcer.tokens.access_token import Permission


def matches_exactly(path_config: PathConfig, permission: Permission) -> bool:
    """Return True if *permission* names the resource of *path_config*."""
    if permission.resource_id is None:
        return False
    return permission.resource_id == path_config.id


def matches(path_config: PathConfig, permission: Permission) -> bool:
    """Return True if *permission* applies to *path_config* or its parent."""
    if matches_exactly(path_config, permission):
        return True

    if path_config.is_instance and permission.resource_id is not None:
        return permission.resource_id == path_config.parent_id

    return False
