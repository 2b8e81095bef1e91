"""Request-time policy enforcement point.

:class:`PolicyEnforcer` is invoked once per inbound request. It resolves the
protected path, checks authentication, evaluates the token's permissions and
returns an :class:`AuthorizationDecision`. Challenges and denials are
delegated to the configured handlers.

Example
-------
::

    registry = PathRegistry([
        PathConfig(path="/orders/{id}", resource_id="orders", scopes=("view",)),
    ])
    enforcer = PolicyEnforcer(registry)
    facade = HttpFacade(
        HttpRequest("GET", "/orders/42"),
        SecurityContext(AccessToken.from_claims(claims)),
    )
    decision = enforcer.authorize(facade)
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from aumos_policy_enforcer.enforcement.decision import (
    REASON_ACCESS_DENIED_LANDING,
    REASON_ENFORCEMENT_DISABLED,
    REASON_INSUFFICIENT_PERMISSIONS,
    REASON_NO_PATH,
    REASON_NO_TOKEN,
    REASON_PATH_ENFORCEMENT_DISABLED,
    REASON_PERMISSIVE_NO_PATH,
    REASON_UNAUTHENTICATED,
    AuthorizationDecision,
)
from aumos_policy_enforcer.enforcement.evaluator import PermissionEvaluator
from aumos_policy_enforcer.enforcement.modes import EnforcementMode
from aumos_policy_enforcer.enforcement.path_config import (
    MethodConfig,
    PathConfig,
    resolve_method_config,
)
from aumos_policy_enforcer.errors import AuthorizationContextError
from aumos_policy_enforcer.http.facade import (
    AccessDeniedHandler,
    ChallengeHandler,
    HttpFacade,
    no_challenge,
    send_forbidden,
)
from aumos_policy_enforcer.registry.path_matcher import is_template, normalize_path
from aumos_policy_enforcer.registry.path_registry import PathRegistry
from aumos_policy_enforcer.tokens.access_token import AccessToken

if TYPE_CHECKING:
    from aumos_policy_enforcer.audit.logger import DecisionAuditLogger
    from aumos_policy_enforcer.config.schema import EnforcerSettings

logger = logging.getLogger(__name__)

# Resolves a concrete request path under a templated parent to the identifier
# of the matching resource instance, or None when no such resource exists.
InstanceResolver = Callable[[str, PathConfig], str | None]


class PolicyEnforcer:
    """Decides whether each request may proceed.

    Parameters
    ----------
    registry:
        Protected path configurations.
    enforcement_mode:
        Global enforcement mode.
    on_deny_redirect_to:
        Access-denied landing path; never denied to authenticated callers.
    challenge_handler:
        Called to challenge the client. Returns whether a challenge was sent.
    access_denied_handler:
        Called to issue a terminal denial. Defaults to HTTP 403.
    instance_resolver:
        Optional callable registering per-resource instance configurations
        for requests that hit a templated path.
    audit_logger:
        Optional audit trail receiving one record per decision.
    """

    def __init__(
        self,
        registry: PathRegistry,
        enforcement_mode: EnforcementMode = EnforcementMode.ENFORCING,
        on_deny_redirect_to: str | None = None,
        challenge_handler: ChallengeHandler | None = None,
        access_denied_handler: AccessDeniedHandler | None = None,
        instance_resolver: InstanceResolver | None = None,
        audit_logger: "DecisionAuditLogger | None" = None,
    ) -> None:
        self._registry = registry
        self._enforcement_mode = EnforcementMode.parse(enforcement_mode)
        self._on_deny_redirect_to = on_deny_redirect_to
        self._challenge_handler: ChallengeHandler = challenge_handler or no_challenge
        self._access_denied_handler: AccessDeniedHandler = (
            access_denied_handler or send_forbidden
        )
        self._instance_resolver = instance_resolver
        self._audit_logger = audit_logger
        self._evaluator = PermissionEvaluator(
            registry,
            enforcement_mode=self._enforcement_mode,
            on_deny_redirect_to=on_deny_redirect_to,
        )

    @classmethod
    def from_settings(
        cls,
        settings: "EnforcerSettings",
        **kwargs: object,
    ) -> PolicyEnforcer:
        """Build an enforcer from validated settings.

        Keyword arguments are passed through to the constructor (handlers,
        resolver). An audit logger is created when auditing is enabled and
        none was supplied.
        """
        if settings.audit.enabled and kwargs.get("audit_logger") is None:
            from aumos_policy_enforcer.audit.logger import DecisionAuditLogger

            kwargs["audit_logger"] = DecisionAuditLogger(settings.audit.log_path)
        return cls(
            settings.build_registry(),
            enforcement_mode=settings.enforcement_mode,
            on_deny_redirect_to=settings.on_deny_redirect_to,
            **kwargs,  # type: ignore[arg-type]
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def authorize(self, facade: HttpFacade) -> AuthorizationDecision:
        """Return the authorization decision for the request in *facade*.

        Raises
        ------
        AuthorizationContextError
            If the decision for a granted request cannot be constructed.
        """
        decision = self._decide(facade)
        if self._audit_logger is not None:
            self._audit_logger.record_decision(facade.request, decision)
        return decision

    @property
    def registry(self) -> PathRegistry:
        return self._registry

    @property
    def enforcement_mode(self) -> EnforcementMode:
        return self._enforcement_mode

    @property
    def on_deny_redirect_to(self) -> str | None:
        return self._on_deny_redirect_to

    # ------------------------------------------------------------------
    # Decision flow
    # ------------------------------------------------------------------

    def _decide(self, facade: HttpFacade) -> AuthorizationDecision:
        if self._enforcement_mode == EnforcementMode.DISABLED:
            return AuthorizationDecision.empty(True, REASON_ENFORCEMENT_DISABLED)

        request = facade.request
        path_config = self._resolve_path_config(request.path)
        security_context = facade.security_context

        if security_context is None:
            if path_config is not None:
                self._challenge(
                    path_config,
                    resolve_method_config(path_config, request.method),
                    facade,
                )
            return AuthorizationDecision.empty(False, REASON_UNAUTHENTICATED)

        token = security_context.token
        if token is None:
            logger.debug("Security context without token for path [%s].", request.path)
            return AuthorizationDecision.empty(False, REASON_NO_TOKEN)

        logger.debug(
            "Checking permissions for path [%s] with config [%s].",
            request.uri,
            path_config,
        )

        if path_config is None:
            if self._enforcement_mode == EnforcementMode.PERMISSIVE:
                return self._bound_decision(token, None, REASON_PERMISSIVE_NO_PATH)

            logger.debug("Could not find a configuration for path [%s]", request.path)

            if self._evaluator.is_access_denied_landing(request.path):
                return self._bound_decision(token, None, REASON_ACCESS_DENIED_LANDING)

            self._handle_access_denied(facade)
            return AuthorizationDecision.empty(False, REASON_NO_PATH)

        if (
            path_config.effective_enforcement_mode(self._enforcement_mode)
            == EnforcementMode.DISABLED
        ):
            return AuthorizationDecision.empty(True, REASON_PATH_ENFORCEMENT_DISABLED)

        method_config = resolve_method_config(path_config, request.method)

        if self._evaluator.evaluate(
            path_config,
            method_config,
            token.authorization.permissions if token.authorization is not None else None,
            request.method,
            request_path=request.path,
        ):
            return self._bound_decision(token, path_config)

        logger.debug("Sending challenge to the client. Path [%s]", path_config.path)

        if not self._challenge(path_config, method_config, facade):
            logger.debug(
                "Challenge not sent, sending default forbidden response. Path [%s]",
                path_config.path,
            )
            self._handle_access_denied(facade)

        return AuthorizationDecision.empty(False, REASON_INSUFFICIENT_PERMISSIONS)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _resolve_path_config(self, path: str) -> PathConfig | None:
        """Look up *path*, registering an instance for templated matches."""
        config = self._registry.lookup(path)
        if (
            config is None
            or self._instance_resolver is None
            or config.is_instance
            or not is_template(config.path)
        ):
            return config

        concrete = normalize_path(path)
        if concrete == normalize_path(config.path):
            return config

        resource_id = self._instance_resolver(concrete, config)
        if resource_id is None:
            return config
        return self._registry.register_instance(config, concrete, resource_id=resource_id)

    def _bound_decision(
        self,
        token: AccessToken,
        path_config: PathConfig | None,
        reason: str | None = None,
    ) -> AuthorizationDecision:
        try:
            if reason is None:
                return AuthorizationDecision.from_token(token, path_config)
            return AuthorizationDecision.from_token(token, path_config, reason=reason)
        except Exception as exc:
            path = path_config.path if path_config is not None else None
            raise AuthorizationContextError(path) from exc

    def _challenge(
        self,
        path_config: PathConfig,
        method_config: MethodConfig,
        facade: HttpFacade,
    ) -> bool:
        try:
            return bool(self._challenge_handler(path_config, method_config, facade))
        except Exception:
            logger.exception(
                "Challenge handler failed for path [%s]; treating as not sent.",
                path_config.path,
            )
            return False

    def _handle_access_denied(self, facade: HttpFacade) -> None:
        self._access_denied_handler(facade)
