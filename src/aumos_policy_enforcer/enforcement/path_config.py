"""Protected path and method configuration.

A :class:`PathConfig` describes one protected resource pattern: the path
template it guards, the resource identifier it maps to on the authorization
server, default scopes, per-method requirements and an optional enforcement
mode override.

Instance configurations describe one concrete resource derived from a
templated parent path (``/orders/{id}`` -> ``/orders/42``). An instance does
not hold its parent: it records the parent's path key and identifier, and
the parent itself is resolved through :meth:`PathRegistry.parent_of`. Parent
and instance are peers in the registry, related by identifier rather than by
ownership.

Example
-------
::

    orders = PathConfig(
        path="/orders/{id}",
        resource_id="orders",
        scopes=("view",),
        methods={"DELETE": MethodConfig("DELETE", ("delete",))},
    )
    order_42 = PathConfig.instance_of(orders, "/orders/42", resource_id="order-42")
    assert order_42.is_instance
    assert order_42.parent_path == "/orders/{id}"
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from aumos_policy_enforcer.enforcement.modes import (
    EnforcementMode,
    ScopeEnforcementMode,
)


@dataclass(frozen=True)
class MethodConfig:
    """Scope requirements for one HTTP method of a protected path.

    Attributes
    ----------
    method:
        Upper-case HTTP method name.
    scopes:
        Scopes required to perform the method.
    scopes_enforcement_mode:
        Whether all (``ALL``) or at least one (``ANY``) of ``scopes`` must
        be granted.
    """

    method: str
    scopes: tuple[str, ...] = ()
    scopes_enforcement_mode: ScopeEnforcementMode = ScopeEnforcementMode.ALL

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "scopes", tuple(self.scopes))


@dataclass(eq=False)
class PathConfig:
    """A protected resource pattern and its access rules.

    Configurations compare by identity so that the registry can remove the
    exact object it handed out.

    Attributes
    ----------
    path:
        Path template (``/orders``, ``/orders/{id}``, ``/static/*``) or, for
        instances, the concrete path.
    resource_id:
        Identifier of the resource on the authorization server. ``None`` is
        only meaningful for instances, which then inherit the parent's
        identifier.
    name:
        Human-readable resource name.
    type:
        Optional resource type (informational).
    scopes:
        Default scopes required by methods without an explicit entry.
    methods:
        Mapping of upper-case HTTP method name to :class:`MethodConfig`.
    enforcement_mode:
        Per-path override. ``None`` falls back to the global mode.
    parent_path:
        For instances, the path key of the parent configuration.
    parent_id:
        For instances, the parent's resource identifier, captured when the
        instance was built.
    """

    path: str
    resource_id: str | None = None
    name: str | None = None
    type: str | None = None
    scopes: tuple[str, ...] = ()
    methods: Mapping[str, MethodConfig] = field(default_factory=dict)
    enforcement_mode: EnforcementMode | None = None
    parent_path: str | None = None
    parent_id: str | None = None

    def __post_init__(self) -> None:
        self.scopes = tuple(self.scopes)
        self.methods = {name.upper(): cfg for name, cfg in dict(self.methods).items()}
        if self.parent_path is None:
            if self.parent_id is not None:
                raise ValueError(f"parent_id given without parent_path for {self.path!r}")
            if self.resource_id is None:
                self.resource_id = self.name or self.path
        elif self.parent_id is None:
            raise ValueError(f"Instance {self.path!r} needs its parent's identifier")

    @classmethod
    def instance_of(
        cls,
        parent: PathConfig,
        path: str,
        resource_id: str | None = None,
        name: str | None = None,
    ) -> PathConfig:
        """Build an instance configuration for a concrete path under *parent*.

        Methods, default scopes, type and enforcement mode are inherited from
        the parent. When *resource_id* is ``None`` the instance keeps the
        parent's identity for permission matching.
        """
        return cls(
            path=path,
            resource_id=resource_id,
            name=name or resource_id or parent.name,
            type=parent.type,
            scopes=parent.scopes,
            methods=dict(parent.methods),
            enforcement_mode=parent.enforcement_mode,
            parent_path=parent.path,
            parent_id=parent.id,
        )

    @property
    def is_instance(self) -> bool:
        """True when this configuration was derived from a parent path."""
        return self.parent_path is not None

    @property
    def id(self) -> str | None:
        """Effective resource identifier used for permission matching."""
        if self.resource_id is not None:
            return self.resource_id
        return self.parent_id

    def effective_enforcement_mode(self, default: EnforcementMode) -> EnforcementMode:
        """Return the path's own mode, or *default* when it has none."""
        return self.enforcement_mode if self.enforcement_mode is not None else default

    def __repr__(self) -> str:
        return (
            f"PathConfig(path={self.path!r}, id={self.id!r}, "
            f"instance={self.is_instance}, "
            f"enforcement_mode={self.enforcement_mode.value if self.enforcement_mode else None})"
        )


def resolve_method_config(path_config: PathConfig, method: str) -> MethodConfig:
    """Return the method requirements for *method* on *path_config*.

    An explicit entry wins. Otherwise a configuration is synthesized from the
    path's default scopes with ``ANY`` semantics.
    """
    method = method.upper()
    explicit = path_config.methods.get(method)
    if explicit is not None:
        return explicit
    return MethodConfig(
        method=method,
        scopes=path_config.scopes,
        scopes_enforcement_mode=ScopeEnforcementMode.ANY,
    )
