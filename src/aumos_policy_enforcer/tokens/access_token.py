"""Validated access tokens and their embedded authorization grants.

Tokens arrive at the enforcer already validated (signature, expiry) and
parsed into a claims mapping. This module turns the ``authorization`` claim
into immutable :class:`Permission` values.

Claims layout
-------------
::

    {
        "sub": "alice",
        "authorization": {
            "permissions": [
                {"rsid": "orders", "rsname": "Orders", "scopes": ["view"]},
                {"scopes": ["admin"]}
            ]
        }
    }

A permission without ``rsid`` is a resource-agnostic grant. A token with no
``authorization`` claim parses to ``authorization=None``.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Permission:
    """A grant of scopes, optionally bound to one resource.

    Attributes
    ----------
    resource_id:
        Identifier of the resource the grant applies to, or ``None`` for a
        resource-agnostic grant.
    resource_name:
        Human-readable resource name, when the authorization server sent one.
    scopes:
        Granted scope names. An empty set is an unrestricted grant.
    """

    resource_id: str | None = None
    resource_name: str | None = None
    scopes: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not isinstance(self.scopes, frozenset):
            object.__setattr__(self, "scopes", frozenset(self.scopes))

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Permission:
        """Build a Permission from a claim entry.

        Both the compact claim keys (``rsid``, ``rsname``) and the long form
        (``resource_id``, ``resource_name``) are accepted.

        Raises
        ------
        ValueError
            If ``scopes`` is present but is not a list of strings.
        """
        resource_id = data.get("rsid", data.get("resource_id"))
        resource_name = data.get("rsname", data.get("resource_name"))
        raw_scopes = data.get("scopes") or []
        if isinstance(raw_scopes, str) or not isinstance(raw_scopes, Iterable):
            raise ValueError(
                f"Permission scopes must be a list of strings; got {raw_scopes!r}."
            )
        return cls(
            resource_id=str(resource_id) if resource_id is not None else None,
            resource_name=str(resource_name) if resource_name is not None else None,
            scopes=frozenset(str(s) for s in raw_scopes),
        )

    @property
    def is_resource_agnostic(self) -> bool:
        """True when the grant is not bound to a resource."""
        return self.resource_id is None


@dataclass(frozen=True)
class Authorization:
    """Ordered permissions embedded in a token."""

    permissions: tuple[Permission, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Authorization:
        """Build the ordered permissions from an ``authorization`` claim.

        Raises
        ------
        ValueError
            If ``permissions`` is not a list of mappings, or an entry is
            malformed.
        """
        raw_permissions = data.get("permissions") or []
        if not isinstance(raw_permissions, list):
            raise ValueError(
                f"authorization.permissions must be a list; got {raw_permissions!r}."
            )
        for entry in raw_permissions:
            if not isinstance(entry, Mapping):
                raise ValueError(f"Permission entries must be mappings; got {entry!r}.")
        return cls(permissions=tuple(Permission.from_dict(p) for p in raw_permissions))


@dataclass(frozen=True)
class AccessToken:
    """An already-validated access token.

    Attributes
    ----------
    subject:
        The ``sub`` claim, if present.
    authorization:
        Parsed authorization payload, or ``None`` when the token carries none.
    claims:
        The raw claims mapping.
    """

    subject: str | None = None
    authorization: Authorization | None = None
    claims: Mapping[str, object] = field(default_factory=dict, compare=False, hash=False)

    @classmethod
    def from_claims(cls, claims: Mapping[str, object]) -> AccessToken:
        """Parse a claims mapping into an AccessToken.

        A missing or ``null`` ``authorization`` claim yields
        ``authorization=None``. A malformed one is logged and also yields
        ``authorization=None``, so the token is evaluated as holding no
        permissions.
        """
        raw_authorization = claims.get("authorization")
        authorization: Authorization | None = None
        if isinstance(raw_authorization, Mapping):
            try:
                authorization = Authorization.from_dict(raw_authorization)
            except (ValueError, TypeError, AttributeError) as exc:
                logger.warning("Ignoring malformed authorization claim: %s", exc)
        elif raw_authorization is not None:
            logger.warning(
                "Ignoring malformed authorization claim of type %s",
                type(raw_authorization).__name__,
            )
        subject = claims.get("sub")
        return cls(
            subject=str(subject) if subject is not None else None,
            authorization=authorization,
            claims=dict(claims),
        )

    @property
    def permissions(self) -> tuple[Permission, ...]:
        """Granted permissions; empty when there is no authorization payload."""
        if self.authorization is None:
            return ()
        return self.authorization.permissions


@dataclass(frozen=True)
class SecurityContext:
    """Authentication state attached to a request by upstream validation."""

    token: AccessToken | None
    token_string: str | None = field(default=None, repr=False)
