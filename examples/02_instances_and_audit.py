#!/usr/bin/env python3
"""Example: Resource instances and the decision audit trail

Loads the enforcer from YAML, registers per-order instance paths through
an instance resolver, and prunes them again when the order is deleted.

Usage:
    python examples/02_instances_and_audit.py

Requirements:
    pip install aumos-policy-enforcer
"""
from __future__ import annotations

import tempfile
from pathlib import Path

import aumos_policy_enforcer as pep

_CONFIG = """\
version: "1"
enforcement_mode: ENFORCING
paths:
  - name: orders
    path: /orders/{id}
    scopes: [view, delete]
audit:
  enabled: true
  log_path: {log_path}
"""


def resolve_order(path: str, parent: pep.PathConfig) -> str | None:
    """Map /orders/<n> to the identifier of order <n>."""
    order_id = path.rsplit("/", 1)[-1]
    return f"order-{order_id}" if order_id.isdigit() else None


def main() -> None:
    workdir = Path(tempfile.mkdtemp())
    config_path = workdir / "enforcer.yaml"
    config_path.write_text(
        _CONFIG.replace("{log_path}", str(workdir / "audit.jsonl")), encoding="utf-8"
    )

    enforcer = pep.build_enforcer(config_path=config_path, instance_resolver=resolve_order)

    token = pep.AccessToken.from_claims({
        "sub": "bob",
        "authorization": {"permissions": [{"rsid": "order-7", "scopes": ["view", "delete"]}]},
    })
    context = pep.SecurityContext(token)

    for method, path in [("GET", "/orders/7"), ("GET", "/orders/8"), ("DELETE", "/orders/7")]:
        decision = enforcer.authorize(pep.HttpFacade(pep.HttpRequest(method, path), context))
        print(f"{method:6} {path:12} granted={decision.granted}")
        print(f"       registered paths: {[c.path for c in enforcer.registry]}")

    audit = pep.DecisionAuditLogger(workdir / "audit.jsonl")
    print(f"\nAudit log: {audit.count()} decisions")
    for record in audit.read_all():
        print(f"  {record['method']} {record['path']} -> {record['reason']}")


if __name__ == "__main__":
    main()
