"""Authorization decision returned by :meth:`PolicyEnforcer.authorize`.

A decision is an immutable value created once per request. Two factories
cover every outcome:

- :meth:`AuthorizationDecision.empty`: a fixed grant flag with no
  permissions; every query answers with that flag.
- :meth:`AuthorizationDecision.from_token`: a granted decision bound to the
  token's permissions and the matched path configuration; queries inspect
  the permissions.

Example
-------
::

    decision = AuthorizationDecision.from_token(token, path_config)
    if decision.has_permission("orders", "view"):
        ...
"""
from __future__ import annotations

from dataclasses import dataclass, field

from aumos_policy_enforcer.enforcement.path_config import PathConfig
from aumos_policy_enforcer.tokens.access_token import AccessToken, Permission

# Machine-readable reasons carried by decisions.
REASON_ENFORCEMENT_DISABLED = "enforcement-disabled"
REASON_PATH_ENFORCEMENT_DISABLED = "path-enforcement-disabled"
REASON_GRANTED = "granted"
REASON_PERMISSIVE_NO_PATH = "permissive-no-path"
REASON_ACCESS_DENIED_LANDING = "access-denied-landing"
REASON_UNAUTHENTICATED = "unauthenticated"
REASON_NO_TOKEN = "no-token"
REASON_NO_PATH = "no-path"
REASON_INSUFFICIENT_PERMISSIONS = "insufficient-permissions"


@dataclass(frozen=True)
class AuthorizationDecision:
    """Outcome of one enforcement call.

    Attributes
    ----------
    granted:
        Whether the request may proceed.
    permissions:
        Permissions considered for the decision. Always empty for empty
        decisions.
    path_config:
        The configuration the decision is bound to, if any.
    reason:
        Short machine-readable explanation (see the ``REASON_*`` constants).
    """

    granted: bool
    permissions: tuple[Permission, ...] = ()
    path_config: PathConfig | None = field(default=None, compare=False)
    reason: str = ""
    _bound: bool = field(default=False, repr=False)

    @classmethod
    def empty(cls, granted: bool, reason: str = "") -> AuthorizationDecision:
        """Decision with a fixed grant flag and no permissions."""
        return cls(granted=granted, reason=reason)

    @classmethod
    def from_token(
        cls,
        token: AccessToken,
        path_config: PathConfig | None,
        reason: str = REASON_GRANTED,
    ) -> AuthorizationDecision:
        """Granted decision bound to *token*'s permissions and *path_config*."""
        return cls(
            granted=True,
            permissions=tuple(token.permissions),
            path_config=path_config,
            reason=reason,
            _bound=True,
        )

    def is_granted(self) -> bool:
        return self.granted

    def __bool__(self) -> bool:
        return self.granted

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def has_permission(self, resource: str, scope: str) -> bool:
        """True if a permission for *resource* grants *scope*.

        *resource* matches a permission's name or identifier, ignoring case.
        A permission with no scopes grants every scope.
        """
        if not self._bound:
            return self.granted
        if not self.granted:
            return False
        return any(
            _names_resource(p, resource) and _grants_scope(p, scope) for p in self.permissions
        )

    def has_resource_permission(self, resource: str) -> bool:
        """True if any permission names *resource*."""
        if not self._bound:
            return self.granted
        if not self.granted:
            return False
        return any(_names_resource(p, resource) for p in self.permissions)

    def has_scope_permission(self, scope: str) -> bool:
        """True if any permission grants *scope*."""
        if not self._bound:
            return self.granted
        if not self.granted:
            return False
        return any(_grants_scope(p, scope) for p in self.permissions)


def _names_resource(permission: Permission, resource: str) -> bool:
    wanted = resource.lower()
    return any(
        value is not None and value.lower() == wanted
        for value in (permission.resource_name, permission.resource_id)
    )


def _grants_scope(permission: Permission, scope: str) -> bool:
    # An empty scope set is an unrestricted grant.
    return not permission.scopes or scope in permission.scopes
