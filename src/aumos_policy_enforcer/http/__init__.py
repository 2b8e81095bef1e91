"""HTTP-facing types: request facade and challenge / denial callbacks."""
from __future__ import annotations

from aumos_policy_enforcer.http.facade import (
    AccessDeniedHandler,
    BearerChallenge,
    ChallengeHandler,
    HttpFacade,
    HttpRequest,
    HttpResponse,
    no_challenge,
    send_forbidden,
)

__all__ = [
    "AccessDeniedHandler",
    "BearerChallenge",
    "ChallengeHandler",
    "HttpFacade",
    "HttpRequest",
    "HttpResponse",
    "no_challenge",
    "send_forbidden",
]
