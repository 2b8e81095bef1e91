"""Convenience API for aumos-policy-enforcer: 3-line quickstart.

Example
-------
::

    from aumos_policy_enforcer import build_enforcer, HttpFacade, HttpRequest
    enforcer = build_enforcer({"paths": [{"path": "/orders", "scopes": ["view"]}]})
    decision = enforcer.authorize(HttpFacade(HttpRequest("GET", "/orders"), context))

"""
from __future__ import annotations

from pathlib import Path
from typing import Any

from aumos_policy_enforcer.config.loader import ConfigLoader
from aumos_policy_enforcer.enforcement.enforcer import PolicyEnforcer


def build_enforcer(
    config: dict[str, Any] | None = None,
    config_path: str | Path | None = None,
    **kwargs: Any,
) -> PolicyEnforcer:
    """Return a ready :class:`PolicyEnforcer`.

    Parameters
    ----------
    config:
        Configuration dictionary. Ignored when *config_path* is given.
    config_path:
        Path to an enforcer YAML file.
    **kwargs:
        Passed to the enforcer (``challenge_handler``,
        ``access_denied_handler``, ``instance_resolver``, ``audit_logger``).

    With neither *config* nor *config_path* an enforcing enforcer with no
    protected paths is returned: authenticated requests are denied and
    anonymous ones are rejected without a challenge.
    """
    loader = ConfigLoader()
    if config_path is not None:
        settings = loader.load(config_path)
    elif config is not None:
        settings = loader.load_from_dict(config)
    else:
        settings = loader.defaults()
    return PolicyEnforcer.from_settings(settings, **kwargs)
