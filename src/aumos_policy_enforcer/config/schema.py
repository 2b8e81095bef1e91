"""Enforcer configuration schema with Pydantic v2 validation.

Unknown keys are allowed to support future schema additions without
breakage. Mode strings are accepted in any letter case.

Example
-------
>>> settings = EnforcerSettings.model_validate({
...     "enforcement_mode": "enforcing",
...     "paths": [{"path": "/orders", "id": "orders", "scopes": ["view"]}],
... })
>>> settings.paths[0].to_path_config().id
'orders'
"""
from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from aumos_policy_enforcer.enforcement.modes import (
    EnforcementMode,
    ScopeEnforcementMode,
)
from aumos_policy_enforcer.enforcement.path_config import MethodConfig, PathConfig
from aumos_policy_enforcer.registry.path_matcher import normalize_path
from aumos_policy_enforcer.registry.path_registry import PathRegistry


class MethodSettings(BaseModel):
    """Scope requirements for one HTTP method."""

    model_config = {"extra": "allow"}

    method: str
    scopes: list[str] = Field(default_factory=list)
    scopes_enforcement_mode: ScopeEnforcementMode = Field(default=ScopeEnforcementMode.ALL)

    @field_validator("method")
    @classmethod
    def normalize_method(cls, value: str) -> str:
        value = value.strip().upper()
        if not value:
            raise ValueError("method must not be empty")
        return value

    @field_validator("scopes_enforcement_mode", mode="before")
    @classmethod
    def parse_scope_mode(cls, value: object) -> ScopeEnforcementMode:
        return ScopeEnforcementMode.parse(value)  # type: ignore[arg-type]

    def to_method_config(self) -> MethodConfig:
        return MethodConfig(
            method=self.method,
            scopes=tuple(self.scopes),
            scopes_enforcement_mode=self.scopes_enforcement_mode,
        )


class PathSettings(BaseModel):
    """One protected path."""

    model_config = {"extra": "allow"}

    path: str
    name: str | None = Field(default=None)
    id: str | None = Field(default=None)
    type: str | None = Field(default=None)
    scopes: list[str] = Field(default_factory=list)
    methods: list[MethodSettings] = Field(default_factory=list)
    enforcement_mode: EnforcementMode | None = Field(default=None)

    @field_validator("path")
    @classmethod
    def validate_path(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("path must not be empty")
        return value.strip()

    @field_validator("enforcement_mode", mode="before")
    @classmethod
    def parse_mode(cls, value: object) -> EnforcementMode | None:
        if value is None:
            return None
        return EnforcementMode.parse(value)  # type: ignore[arg-type]

    @field_validator("methods")
    @classmethod
    def unique_methods(cls, values: list[MethodSettings]) -> list[MethodSettings]:
        seen: set[str] = set()
        for entry in values:
            if entry.method in seen:
                raise ValueError(f"Duplicate method '{entry.method}'")
            seen.add(entry.method)
        return values

    def to_path_config(self) -> PathConfig:
        """Build the runtime configuration.

        The resource identifier defaults to the name, then to the path.
        """
        return PathConfig(
            path=self.path,
            resource_id=self.id or self.name or self.path,
            name=self.name or self.id or self.path,
            type=self.type,
            scopes=tuple(self.scopes),
            methods={m.method: m.to_method_config() for m in self.methods},
            enforcement_mode=self.enforcement_mode,
        )


class AuditSettings(BaseModel):
    """Configuration for the decision audit trail."""

    model_config = {"extra": "allow"}

    enabled: bool = Field(default=False)
    log_path: Path = Field(default=Path("./enforcer_audit.jsonl"))


class EnforcerSettings(BaseModel):
    """Top-level enforcer configuration schema.

    All sections are optional and fall back to sensible defaults.
    """

    model_config = {"extra": "allow"}

    version: str = Field(default="1")
    enforcement_mode: EnforcementMode = Field(default=EnforcementMode.ENFORCING)
    on_deny_redirect_to: str | None = Field(default=None)
    paths: list[PathSettings] = Field(default_factory=list)
    audit: AuditSettings = Field(default_factory=AuditSettings)

    @field_validator("version", mode="before")
    @classmethod
    def coerce_version(cls, value: object) -> str:
        return str(value)

    @field_validator("enforcement_mode", mode="before")
    @classmethod
    def parse_mode(cls, value: object) -> EnforcementMode:
        return EnforcementMode.parse(value)  # type: ignore[arg-type]

    @field_validator("paths")
    @classmethod
    def unique_paths(cls, values: list[PathSettings]) -> list[PathSettings]:
        seen: set[str] = set()
        for entry in values:
            key = normalize_path(entry.path)
            if key in seen:
                raise ValueError(f"Duplicate path '{key}'")
            seen.add(key)
        return values

    def build_registry(self) -> PathRegistry:
        """Return a fresh registry holding every configured path."""
        return PathRegistry(p.to_path_config() for p in self.paths)
