"""Test that the 3-line quickstart API works for aumos-policy-enforcer."""
from __future__ import annotations

from pathlib import Path


def _claims() -> dict[str, object]:
    return {"sub": "alice", "authorization": {"permissions": [{"rsid": "orders", "scopes": ["view"]}]}}


def test_quickstart_import() -> None:
    from aumos_policy_enforcer import build_enforcer

    enforcer = build_enforcer()
    assert enforcer is not None


def test_quickstart_authorize() -> None:
    from aumos_policy_enforcer import (
        AccessToken,
        HttpFacade,
        HttpRequest,
        SecurityContext,
        build_enforcer,
    )

    enforcer = build_enforcer({"paths": [{"path": "/orders", "id": "orders", "scopes": ["view"]}]})
    context = SecurityContext(AccessToken.from_claims(_claims()))
    decision = enforcer.authorize(HttpFacade(HttpRequest("GET", "/orders"), context))
    assert decision.granted is True
    assert decision.has_permission("orders", "view") is True


def test_quickstart_default_enforcer_denies() -> None:
    from aumos_policy_enforcer import (
        AccessToken,
        HttpFacade,
        HttpRequest,
        SecurityContext,
        build_enforcer,
    )

    enforcer = build_enforcer()
    facade = HttpFacade(HttpRequest("GET", "/anything"), SecurityContext(AccessToken.from_claims(_claims())))
    assert enforcer.authorize(facade).granted is False
    assert facade.response.status == 403


def test_quickstart_from_yaml_with_audit(tmp_path: Path) -> None:
    from aumos_policy_enforcer import HttpFacade, HttpRequest, build_enforcer

    audit_path = tmp_path / "audit.jsonl"
    config_path = tmp_path / "enforcer.yaml"
    config_path.write_text(
        "enforcement_mode: permissive\n"
        "audit:\n"
        "  enabled: true\n"
        f"  log_path: {audit_path}\n",
        encoding="utf-8",
    )
    enforcer = build_enforcer(config_path=config_path)
    enforcer.authorize(HttpFacade(HttpRequest("GET", "/open"), None))
    assert audit_path.exists()


def test_quickstart_version() -> None:
    import aumos_policy_enforcer

    assert aumos_policy_enforcer.__version__ == "0.1.0"
