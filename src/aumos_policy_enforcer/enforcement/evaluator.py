"""Permission evaluation for a single protected path.

The evaluator walks a token's permissions in order and grants on the first
one that both applies to the path's resource and satisfies the method's
scope requirement:

1. Resource-bound permissions that do not match the path (or, for an
   instance, its parent) are skipped.
2. On an instance path, a permission that matches only the parent is
   skipped as well.
3. A matching permission whose scopes satisfy the method grants. A granted
   ``DELETE`` on an instance path prunes the instance from the registry.
4. A resource-agnostic permission whose scopes satisfy the method grants
   immediately.
5. Otherwise the request is denied unless the path's effective enforcement
   mode is ``PERMISSIVE``.

Requests for the configured access-denied landing path always pass.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence

from aumos_policy_enforcer.enforcement.modes import EnforcementMode
from aumos_policy_enforcer.enforcement.path_config import MethodConfig, PathConfig
from aumos_policy_enforcer.matching.resource_matcher import matches, matches_exactly
from aumos_policy_enforcer.matching.scope_matcher import satisfies
from aumos_policy_enforcer.registry.path_matcher import normalize_path
from aumos_policy_enforcer.registry.path_registry import PathRegistry
from aumos_policy_enforcer.tokens.access_token import Permission

logger = logging.getLogger(__name__)


class PermissionEvaluator:
    """Evaluates granted permissions against one path configuration.

    Parameters
    ----------
    registry:
        Registry instance configurations are pruned from.
    enforcement_mode:
        Global mode, used when the path has no override.
    on_deny_redirect_to:
        Access-denied landing path. Requests to it are always granted.
    """

    def __init__(
        self,
        registry: PathRegistry,
        enforcement_mode: EnforcementMode = EnforcementMode.ENFORCING,
        on_deny_redirect_to: str | None = None,
    ) -> None:
        self._registry = registry
        self._enforcement_mode = enforcement_mode
        self._on_deny_redirect_to = on_deny_redirect_to

    def evaluate(
        self,
        path_config: PathConfig,
        method_config: MethodConfig,
        permissions: Sequence[Permission] | None,
        request_method: str,
        request_path: str | None = None,
    ) -> bool:
        """Return True if *permissions* authorize the request.

        Parameters
        ----------
        path_config:
            Configuration matched for the request path.
        method_config:
            Scope requirements for the request method.
        permissions:
            The token's permissions in grant order. ``None`` (a token with
            no authorization payload) is evaluated as an empty list.
        request_method:
            HTTP method of the request.
        request_path:
            Request path, compared against the access-denied landing path.
        """
        if self.is_access_denied_landing(request_path):
            return True

        if permissions is None:
            logger.debug(
                "Token carries no authorization for path [%s]; evaluating with no permissions.",
                path_config.path,
            )
            permissions = ()

        resource_permission_found = False

        for permission in permissions:
            if permission.resource_id is not None:
                if not matches(path_config, permission):
                    continue
                if path_config.is_instance and not matches_exactly(path_config, permission):
                    continue

                resource_permission_found = True

                if self._scopes_satisfied(method_config, permission):
                    logger.debug(
                        "Authorization GRANTED for path [%s]. Permission [%s].",
                        path_config.path,
                        permission,
                    )
                    if request_method.upper() == "DELETE" and path_config.is_instance:
                        self._prune(path_config)
                    return True
            elif self._scopes_satisfied(method_config, permission):
                logger.debug(
                    "Authorization GRANTED for path [%s] by resource-agnostic permission [%s].",
                    path_config.path,
                    permission,
                )
                return True

        mode = path_config.effective_enforcement_mode(self._enforcement_mode)
        if mode == EnforcementMode.PERMISSIVE:
            logger.debug(
                "Authorization PERMITTED for path [%s] in permissive mode "
                "(resource permission found=%s).",
                path_config.path,
                resource_permission_found,
            )
            return True

        if resource_permission_found:
            logger.debug(
                "Authorization FAILED for path [%s]. Not enough scopes for %s %s.",
                path_config.path,
                method_config.method,
                list(method_config.scopes),
            )
        else:
            logger.debug(
                "Authorization FAILED for path [%s]. No permission for resource [%s].",
                path_config.path,
                path_config.id,
            )
        return False

    def is_access_denied_landing(self, request_path: str | None) -> bool:
        """True if *request_path* is the configured access-denied landing path."""
        if not self._on_deny_redirect_to or request_path is None:
            return False
        return normalize_path(request_path) == normalize_path(self._on_deny_redirect_to)

    def _scopes_satisfied(self, method_config: MethodConfig, permission: Permission) -> bool:
        return satisfies(
            method_config.scopes,
            permission.scopes,
            method_config.scopes_enforcement_mode,
        )

    def _prune(self, path_config: PathConfig) -> None:
        if self._registry.remove(path_config):
            logger.debug("Pruned deleted instance path [%s].", path_config.path)
