"""YAML configuration loader for the policy enforcer.

Schema
------
::

    version: "1"
    enforcement_mode: ENFORCING
    on_deny_redirect_to: /access-denied
    paths:
      - name: orders
        path: /orders/{id}
        id: orders
        scopes: [view]
        methods:
          - method: DELETE
            scopes: [delete]
            scopes_enforcement_mode: ALL
    audit:
      enabled: true
      log_path: ./enforcer_audit.jsonl

Example
-------
::

    loader = ConfigLoader()
    settings = loader.load("enforcer.yaml")
    enforcer = PolicyEnforcer.from_settings(settings)
"""
from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from aumos_policy_enforcer.config.schema import EnforcerSettings
from aumos_policy_enforcer.errors import EnforcerConfigError

logger = logging.getLogger(__name__)

_SUPPORTED_VERSIONS: frozenset[str] = frozenset(["1", "1.0"])


class ConfigLoader:
    """Loads and validates enforcer configuration from YAML or dicts."""

    def load(self, config_path: str | Path) -> EnforcerSettings:
        """Load and validate an enforcer YAML file.

        Raises
        ------
        FileNotFoundError
            When the config file does not exist.
        EnforcerConfigError
            When the file cannot be parsed or fails validation.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Enforcer config not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise EnforcerConfigError(
                f"Failed to parse YAML: {exc}", str(config_path)
            ) from exc

        return self._build(raw, config_path=str(config_path))

    def load_string(
        self,
        yaml_content: str,
        config_path: str | None = None,
    ) -> EnforcerSettings:
        """Load and validate a YAML string directly."""
        try:
            raw = yaml.safe_load(yaml_content) or {}
        except yaml.YAMLError as exc:
            raise EnforcerConfigError(
                f"Failed to parse YAML string: {exc}", config_path
            ) from exc
        return self._build(raw, config_path=config_path)

    def load_from_dict(
        self,
        config: dict[str, object],
        config_path: str | None = None,
    ) -> EnforcerSettings:
        """Validate an already-parsed configuration dictionary."""
        return self._build(config, config_path=config_path)

    def defaults(self) -> EnforcerSettings:
        """Return a configuration with all defaults applied."""
        return EnforcerSettings()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build(
        self,
        raw: object,
        config_path: str | None = None,
    ) -> EnforcerSettings:
        if not isinstance(raw, dict):
            raise EnforcerConfigError(
                "Enforcer config must be a YAML mapping (dict).", config_path
            )

        version = str(raw.get("version", "1"))
        if version not in _SUPPORTED_VERSIONS:
            raise EnforcerConfigError(
                f"Unsupported config version {version!r}. "
                f"Supported: {sorted(_SUPPORTED_VERSIONS)}.",
                config_path,
            )

        try:
            settings = EnforcerSettings.model_validate(raw)
        except ValidationError as exc:
            raise EnforcerConfigError(str(exc), config_path) from exc

        logger.info(
            "Loaded %d protected paths from %s (enforcement_mode=%s)",
            len(settings.paths),
            config_path or "<dict>",
            settings.enforcement_mode.value,
        )
        return settings
