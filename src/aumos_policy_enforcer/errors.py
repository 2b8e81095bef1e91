"""Exception types raised by aumos-policy-enforcer."""
from __future__ import annotations


class PolicyEnforcerError(Exception):
    """Base class for all enforcer errors."""


class EnforcerConfigError(PolicyEnforcerError, ValueError):
    """Raised when an enforcer configuration is malformed or invalid.

    Attributes
    ----------
    config_path:
        The path to the config file that caused the error, if known.
    """

    def __init__(self, message: str, config_path: str | None = None) -> None:
        self.config_path = config_path
        prefix = f"[{config_path}] " if config_path else ""
        super().__init__(f"{prefix}{message}")


class AuthorizationContextError(PolicyEnforcerError, RuntimeError):
    """Raised when a granted request's decision cannot be constructed.

    Callers must map this to a denial response; the enforcer neither grants
    nor denies on its own when it occurs.

    Attributes
    ----------
    path:
        Path template of the configuration being processed.
    """

    def __init__(self, path: str | None) -> None:
        self.path = path
        super().__init__(f"Error processing path [{path}].")
