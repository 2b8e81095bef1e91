"""Minimal HTTP abstraction consumed by the enforcer.

The enforcer never talks to a web framework directly. Adapters wrap the
framework request in an :class:`HttpFacade`, attach the security context
produced by upstream token validation, and translate the recorded
:class:`HttpResponse` back into a framework response.

Challenge and access-denied behaviour are plain callables:

- ``ChallengeHandler(path_config, method_config, facade) -> bool`` returns
  whether a challenge was actually issued.
- ``AccessDeniedHandler(facade) -> None`` issues the terminal denial.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from aumos_policy_enforcer.enforcement.path_config import MethodConfig, PathConfig
from aumos_policy_enforcer.tokens.access_token import SecurityContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpRequest:
    """The parts of an inbound request the enforcer reads.

    Attributes
    ----------
    method:
        HTTP method, normalised to upper case.
    path:
        Path relative to the application root, used for path matching.
    uri:
        Full request URI. Defaults to ``path``.
    headers:
        Request headers.
    """

    method: str
    path: str
    uri: str = ""
    headers: Mapping[str, str] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())
        if not self.uri:
            object.__setattr__(self, "uri", self.path)


@dataclass
class HttpResponse:
    """Response state recorded by challenge and denial handlers."""

    status: int | None = None
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None

    def send_error(self, status: int, message: str | None = None) -> None:
        self.status = status
        self.body = message

    def set_header(self, name: str, value: str) -> None:
        self.headers[name] = value

    @property
    def committed(self) -> bool:
        """True once a status has been set."""
        return self.status is not None


class HttpFacade:
    """Request, response and security context for one enforcement call.

    Parameters
    ----------
    request:
        The inbound request.
    security_context:
        Validated token context, or ``None`` for anonymous requests.
    """

    def __init__(
        self,
        request: HttpRequest,
        security_context: SecurityContext | None = None,
    ) -> None:
        self._request = request
        self._security_context = security_context
        self._response = HttpResponse()

    @property
    def request(self) -> HttpRequest:
        return self._request

    @property
    def response(self) -> HttpResponse:
        return self._response

    @property
    def security_context(self) -> SecurityContext | None:
        return self._security_context

    def __repr__(self) -> str:
        return (
            f"HttpFacade(method={self._request.method!r}, path={self._request.path!r}, "
            f"authenticated={self._security_context is not None})"
        )


ChallengeHandler = Callable[[PathConfig, MethodConfig, HttpFacade], bool]
AccessDeniedHandler = Callable[[HttpFacade], None]


def send_forbidden(facade: HttpFacade) -> None:
    """Default access-denied handler: respond with HTTP 403."""
    facade.response.send_error(403)


def no_challenge(
    path_config: PathConfig, method_config: MethodConfig, facade: HttpFacade
) -> bool:
    """Default challenge handler: never issues a challenge."""
    return False


class BearerChallenge:
    """Challenge handler issuing ``WWW-Authenticate: Bearer`` responses.

    Anonymous requests receive ``401``. Authenticated requests that lack the
    required scopes receive ``403`` with ``error="insufficient_scope"`` and the
    scopes the method requires.

    Parameters
    ----------
    realm:
        Realm advertised in the challenge header.
    """

    def __init__(self, realm: str) -> None:
        self._realm = realm

    def __call__(
        self,
        path_config: PathConfig,
        method_config: MethodConfig,
        facade: HttpFacade,
    ) -> bool:
        if facade.security_context is None:
            facade.response.set_header(
                "WWW-Authenticate", f'Bearer realm="{self._realm}"'
            )
            facade.response.send_error(401)
        else:
            parts = [f'Bearer realm="{self._realm}"', 'error="insufficient_scope"']
            if method_config.scopes:
                parts.append(f'scope="{" ".join(method_config.scopes)}"')
            facade.response.set_header("WWW-Authenticate", ", ".join(parts))
            facade.response.send_error(403)
        logger.debug(
            "Bearer challenge sent for path [%s] status=%s",
            path_config.path,
            facade.response.status,
        )
        return True
