#!/usr/bin/env python3
"""Example: Quickstart for aumos-policy-enforcer

Minimal working example: protect a path, authorize requests carrying
token permissions, and inspect the decisions.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install aumos-policy-enforcer
"""
from __future__ import annotations

import aumos_policy_enforcer as pep


def main() -> None:
    print(f"aumos-policy-enforcer version: {pep.__version__}")

    # Step 1: Build an enforcer for one protected path
    enforcer = pep.build_enforcer({
        "on_deny_redirect_to": "/access-denied",
        "paths": [
            {
                "name": "orders",
                "path": "/orders/{id}",
                "scopes": ["view"],
                "methods": [{"method": "DELETE", "scopes": ["delete"]}],
            }
        ],
    })
    print(f"Enforcer ready: {len(enforcer.registry)} protected paths")

    # Step 2: A validated token granting "view" on orders
    token = pep.AccessToken.from_claims({
        "sub": "alice",
        "authorization": {"permissions": [{"rsid": "orders", "scopes": ["view"]}]},
    })
    context = pep.SecurityContext(token)

    # Step 3: Authorize requests
    requests = [
        ("GET", "/orders/42", context),
        ("DELETE", "/orders/42", context),
        ("GET", "/orders/42", None),
        ("GET", "/access-denied", context),
    ]

    print("\nDecisions:")
    for method, path, ctx in requests:
        facade = pep.HttpFacade(pep.HttpRequest(method, path), ctx)
        decision = enforcer.authorize(facade)
        icon = "GRANT" if decision.granted else "DENY"
        who = "anonymous" if ctx is None else "alice"
        print(f"  [{icon}] {method} {path} as {who} ({decision.reason})")
        if facade.response.committed:
            print(f"    Response status: {facade.response.status}")

    # Step 4: Query a granted decision
    decision = enforcer.authorize(pep.HttpFacade(pep.HttpRequest("GET", "/orders/1"), context))
    print(f"\nCan view orders: {decision.has_permission('orders', 'view')}")
    print(f"Can delete orders: {decision.has_permission('orders', 'delete')}")


if __name__ == "__main__":
    main()
