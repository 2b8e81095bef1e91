"""Tests for PermissionEvaluator."""
from __future__ import annotations

import pytest

from aumos_policy_enforcer.enforcement.evaluator import PermissionEvaluator
from aumos_policy_enforcer.enforcement.modes import EnforcementMode, ScopeEnforcementMode
from aumos_policy_enforcer.enforcement.path_config import MethodConfig, PathConfig
from aumos_policy_enforcer.registry.path_registry import PathRegistry
from aumos_policy_enforcer.tokens.access_token import Permission

VIEW_ANY = MethodConfig("GET", ("view",), ScopeEnforcementMode.ANY)
DELETE_ALL = MethodConfig("DELETE", ("delete",), ScopeEnforcementMode.ALL)


def _perm(resource_id: str | None, *scopes: str) -> Permission:
    return Permission(resource_id=resource_id, scopes=frozenset(scopes))


@pytest.fixture()
def orders() -> PathConfig:
    return PathConfig(path="/orders/{id}", resource_id="orders")


@pytest.fixture()
def registry(orders: PathConfig) -> PathRegistry:
    return PathRegistry([orders])


@pytest.fixture()
def instance(registry: PathRegistry, orders: PathConfig) -> PathConfig:
    return registry.register_instance(orders, "/orders/42", resource_id="order-42")


@pytest.fixture()
def evaluator(registry: PathRegistry) -> PermissionEvaluator:
    return PermissionEvaluator(registry, on_deny_redirect_to="/access-denied")


# ---------------------------------------------------------------------------
# Resource-bound permissions
# ---------------------------------------------------------------------------


class TestResourcePermissions:
    def test_matching_resource_and_scope_grants(
        self, evaluator: PermissionEvaluator, orders: PathConfig
    ) -> None:
        assert evaluator.evaluate(orders, VIEW_ANY, [_perm("orders", "view")], "GET") is True

    def test_matching_resource_missing_scope_denies(
        self, evaluator: PermissionEvaluator, orders: PathConfig
    ) -> None:
        assert evaluator.evaluate(orders, DELETE_ALL, [_perm("orders", "view")], "DELETE") is False

    def test_other_resource_denies(self, evaluator: PermissionEvaluator, orders: PathConfig) -> None:
        assert evaluator.evaluate(orders, VIEW_ANY, [_perm("invoices", "view")], "GET") is False

    def test_unscoped_resource_permission_grants(
        self, evaluator: PermissionEvaluator, orders: PathConfig
    ) -> None:
        assert evaluator.evaluate(orders, DELETE_ALL, [_perm("orders")], "DELETE") is True

    def test_later_permission_can_grant(
        self, evaluator: PermissionEvaluator, orders: PathConfig
    ) -> None:
        permissions = [_perm("orders", "view"), _perm("orders", "delete")]
        assert evaluator.evaluate(orders, DELETE_ALL, permissions, "DELETE") is True


# ---------------------------------------------------------------------------
# Instances
# ---------------------------------------------------------------------------


class TestInstancePermissions:
    def test_parent_only_permission_is_skipped_for_instance(
        self, evaluator: PermissionEvaluator, instance: PathConfig
    ) -> None:
        assert evaluator.evaluate(instance, VIEW_ANY, [_perm("orders", "view")], "GET") is False

    def test_exact_instance_permission_grants(
        self, evaluator: PermissionEvaluator, instance: PathConfig
    ) -> None:
        assert evaluator.evaluate(instance, VIEW_ANY, [_perm("order-42", "view")], "GET") is True

    def test_instance_inheriting_parent_identity_accepts_parent_permission(
        self, evaluator: PermissionEvaluator, registry: PathRegistry, orders: PathConfig
    ) -> None:
        inherited = registry.register_instance(orders, "/orders/7")
        assert evaluator.evaluate(inherited, VIEW_ANY, [_perm("orders", "view")], "GET") is True


# ---------------------------------------------------------------------------
# DELETE pruning
# ---------------------------------------------------------------------------


class TestDeletePruning:
    def test_granted_delete_prunes_instance_once(
        self,
        evaluator: PermissionEvaluator,
        registry: PathRegistry,
        instance: PathConfig,
        orders: PathConfig,
    ) -> None:
        permissions = [_perm("order-42", "delete")]
        assert evaluator.evaluate(instance, DELETE_ALL, permissions, "DELETE") is True
        assert instance not in registry
        assert registry.lookup("/orders/42") is orders
        # A second grant on the stale object does not disturb the registry.
        assert evaluator.evaluate(instance, DELETE_ALL, permissions, "delete") is True
        assert len(registry) == 1

    def test_denied_delete_keeps_instance(
        self, evaluator: PermissionEvaluator, registry: PathRegistry, instance: PathConfig
    ) -> None:
        assert evaluator.evaluate(instance, DELETE_ALL, [_perm("order-42", "view")], "DELETE") is False
        assert instance in registry

    def test_granted_get_keeps_instance(
        self, evaluator: PermissionEvaluator, registry: PathRegistry, instance: PathConfig
    ) -> None:
        assert evaluator.evaluate(instance, VIEW_ANY, [_perm("order-42", "view")], "GET") is True
        assert instance in registry

    def test_delete_on_non_instance_never_prunes(
        self, evaluator: PermissionEvaluator, registry: PathRegistry, orders: PathConfig
    ) -> None:
        assert evaluator.evaluate(orders, DELETE_ALL, [_perm("orders", "delete")], "DELETE") is True
        assert orders in registry

    def test_resource_agnostic_grant_does_not_prune(
        self, evaluator: PermissionEvaluator, registry: PathRegistry, instance: PathConfig
    ) -> None:
        assert evaluator.evaluate(instance, DELETE_ALL, [_perm(None, "delete")], "DELETE") is True
        assert instance in registry


# ---------------------------------------------------------------------------
# Resource-agnostic permissions
# ---------------------------------------------------------------------------


class TestResourceAgnosticPermissions:
    def test_global_scope_grant_short_circuits(
        self, evaluator: PermissionEvaluator, orders: PathConfig
    ) -> None:
        permissions = [_perm(None, "delete"), _perm("orders", "view")]
        assert evaluator.evaluate(orders, DELETE_ALL, permissions, "DELETE") is True

    def test_global_grant_without_scope_denies(
        self, evaluator: PermissionEvaluator, orders: PathConfig
    ) -> None:
        assert evaluator.evaluate(orders, DELETE_ALL, [_perm(None, "view")], "DELETE") is False


# ---------------------------------------------------------------------------
# Enforcement mode leniency
# ---------------------------------------------------------------------------


class TestPermissiveFallback:
    def test_permissive_path_grants_on_insufficient_scope(self, registry: PathRegistry) -> None:
        lenient = PathConfig(path="/lenient", resource_id="lenient", enforcement_mode=EnforcementMode.PERMISSIVE)
        evaluator = PermissionEvaluator(registry)
        assert evaluator.evaluate(lenient, DELETE_ALL, [_perm("lenient", "view")], "DELETE") is True

    def test_permissive_path_grants_without_any_permission(self, registry: PathRegistry) -> None:
        lenient = PathConfig(path="/lenient", resource_id="lenient", enforcement_mode=EnforcementMode.PERMISSIVE)
        evaluator = PermissionEvaluator(registry)
        assert evaluator.evaluate(lenient, DELETE_ALL, [], "DELETE") is True

    def test_global_permissive_applies_without_override(
        self, registry: PathRegistry, orders: PathConfig
    ) -> None:
        evaluator = PermissionEvaluator(registry, enforcement_mode=EnforcementMode.PERMISSIVE)
        assert evaluator.evaluate(orders, DELETE_ALL, [], "DELETE") is True

    def test_path_enforcing_override_beats_global_permissive(self, registry: PathRegistry) -> None:
        strict = PathConfig(path="/strict", resource_id="strict", enforcement_mode=EnforcementMode.ENFORCING)
        evaluator = PermissionEvaluator(registry, enforcement_mode=EnforcementMode.PERMISSIVE)
        assert evaluator.evaluate(strict, DELETE_ALL, [], "DELETE") is False


# ---------------------------------------------------------------------------
# Malformed authorization and landing path
# ---------------------------------------------------------------------------


class TestEdgeCases:
    def test_missing_authorization_evaluates_as_empty(
        self, evaluator: PermissionEvaluator, orders: PathConfig
    ) -> None:
        assert evaluator.evaluate(orders, VIEW_ANY, None, "GET") is False

    def test_missing_authorization_permissive_grants(self, registry: PathRegistry, orders: PathConfig) -> None:
        evaluator = PermissionEvaluator(registry, enforcement_mode=EnforcementMode.PERMISSIVE)
        assert evaluator.evaluate(orders, VIEW_ANY, None, "GET") is True

    def test_access_denied_landing_always_granted(
        self, evaluator: PermissionEvaluator, orders: PathConfig
    ) -> None:
        assert evaluator.evaluate(orders, VIEW_ANY, [], "GET", request_path="/access-denied/") is True

    def test_landing_check_requires_configuration(self, registry: PathRegistry, orders: PathConfig) -> None:
        evaluator = PermissionEvaluator(registry)
        assert evaluator.is_access_denied_landing("/access-denied") is False
        assert evaluator.evaluate(orders, VIEW_ANY, [], "GET", request_path="/access-denied") is False
