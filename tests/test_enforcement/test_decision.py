"""Tests for AuthorizationDecision."""
from __future__ import annotations

import pytest

from aumos_policy_enforcer.enforcement.decision import AuthorizationDecision
from aumos_policy_enforcer.enforcement.path_config import PathConfig
from aumos_policy_enforcer.tokens.access_token import AccessToken


@pytest.fixture()
def token() -> AccessToken:
    return AccessToken.from_claims(
        {
            "sub": "alice",
            "authorization": {
                "permissions": [
                    {"rsid": "orders-id", "rsname": "Orders", "scopes": ["view", "edit"]},
                    {"scopes": ["admin"]},
                ]
            },
        }
    )


class TestEmptyDecision:
    @pytest.mark.parametrize("granted", [True, False])
    def test_queries_return_fixed_flag(self, granted: bool) -> None:
        decision = AuthorizationDecision.empty(granted)
        assert decision.is_granted() is granted
        assert decision.has_permission("anything", "any") is granted
        assert decision.has_resource_permission("anything") is granted
        assert decision.has_scope_permission("any") is granted
        assert decision.permissions == ()

    def test_bool_reflects_grant(self) -> None:
        assert bool(AuthorizationDecision.empty(True)) is True
        assert bool(AuthorizationDecision.empty(False)) is False

    def test_immutable(self) -> None:
        decision = AuthorizationDecision.empty(False)
        with pytest.raises((AttributeError, TypeError)):
            decision.granted = True  # type: ignore[misc]


class TestBoundDecision:
    def test_bound_to_path_and_permissions(self, token: AccessToken) -> None:
        path = PathConfig(path="/orders", resource_id="orders-id")
        decision = AuthorizationDecision.from_token(token, path)
        assert decision.granted is True
        assert decision.path_config is path
        assert len(decision.permissions) == 2

    def test_has_permission_by_name_or_id(self, token: AccessToken) -> None:
        decision = AuthorizationDecision.from_token(token, None)
        assert decision.has_permission("orders", "view") is True
        assert decision.has_permission("ORDERS-ID", "edit") is True
        assert decision.has_permission("orders", "delete") is False
        assert decision.has_permission("invoices", "view") is False

    def test_has_resource_permission(self, token: AccessToken) -> None:
        decision = AuthorizationDecision.from_token(token, None)
        assert decision.has_resource_permission("Orders") is True
        assert decision.has_resource_permission("invoices") is False

    def test_has_scope_permission_includes_agnostic_grants(self, token: AccessToken) -> None:
        decision = AuthorizationDecision.from_token(token, None)
        assert decision.has_scope_permission("admin") is True
        assert decision.has_scope_permission("view") is True
        assert decision.has_scope_permission("delete") is False

    def test_token_without_authorization_has_no_permissions(self) -> None:
        decision = AuthorizationDecision.from_token(AccessToken.from_claims({"sub": "bob"}), None)
        assert decision.granted is True
        assert decision.permissions == ()
        assert decision.has_scope_permission("view") is False

    def test_unscoped_permission_grants_every_scope(self) -> None:
        token = AccessToken.from_claims(
            {"authorization": {"permissions": [{"rsid": "orders", "scopes": []}]}}
        )
        decision = AuthorizationDecision.from_token(token, None)
        assert decision.has_permission("orders", "view") is True
        assert decision.has_permission("invoices", "view") is False
        assert decision.has_scope_permission("view") is True

    def test_unscoped_permission_on_denied_bound_decision(self) -> None:
        token = AccessToken.from_claims({"authorization": {"permissions": [{"rsid": "orders"}]}})
        decision = AuthorizationDecision(
            granted=False, permissions=token.permissions, _bound=True
        )
        assert decision.has_permission("orders", "view") is False
        assert decision.has_scope_permission("view") is False
