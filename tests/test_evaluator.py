"""
Tests for permission evaluation.
"""

from itertools import product
from uuid import uuid4

import pytest

from rbac_api.core.auth import (
    OPERATION_REQUIREMENTS,
    PermissionAction,
    PermissionGrant,
    PermissionRequirement,
    Principal,
    RoleGrant,
    evaluate,
    requirements_for,
)

A = PermissionAction


def grant(resource: str, action: PermissionAction, **kwargs) -> PermissionGrant:
    return PermissionGrant(name=f"{action.value}:{resource}", resource=resource, action=action, **kwargs)


def principal(*roles: RoleGrant, is_active: bool = True) -> Principal:
    return Principal(
        id=uuid4(),
        email="someone@example.com",
        username="someone",
        is_active=is_active,
        roles=roles,
    )


def req(resource: str, action: PermissionAction) -> PermissionRequirement:
    return PermissionRequirement(resource, action)


def test_editor_can_read_but_not_delete_articles():
    """A role with read and update on articles does not get delete."""
    editor = principal(RoleGrant("editor", permissions=(grant("articles", A.READ), grant("articles", A.UPDATE))))

    assert evaluate(editor, [req("articles", A.READ)]).allowed
    assert evaluate(editor, [req("articles", A.READ), req("articles", A.UPDATE)]).allowed

    decision = evaluate(editor, [req("articles", A.DELETE)])
    assert not decision.allowed
    assert decision.metadata["missing"] == ["articles:delete"]


@pytest.mark.parametrize("held,wanted", list(product(A, A)))
def test_single_grant_against_every_action(held, wanted):
    """A grant satisfies its own action, and manage satisfies every action."""
    p = principal(RoleGrant("r", permissions=(grant("users", held),)))

    expected = held == wanted or held == A.MANAGE
    assert evaluate(p, [req("users", wanted)]).allowed is expected


@pytest.mark.parametrize("action", list(A))
def test_manage_does_not_cross_resources(action):
    p = principal(RoleGrant("r", permissions=(grant("users", A.MANAGE),)))

    assert not evaluate(p, [req("roles", action)]).allowed


def test_all_requirements_must_hold():
    p = principal(RoleGrant("r", permissions=(grant("users", A.UPDATE),)))

    decision = evaluate(p, [req("users", A.UPDATE), req("roles", A.READ)])

    assert not decision.allowed
    assert decision.metadata["missing"] == ["roles:read"]


def test_grants_combine_across_roles():
    p = principal(
        RoleGrant("a", permissions=(grant("users", A.UPDATE),)),
        RoleGrant("b", permissions=(grant("roles", A.READ),)),
    )

    assert evaluate(p, [req("users", A.UPDATE), req("roles", A.READ)]).allowed


def test_empty_requirements_allow_active_principal_without_roles():
    assert evaluate(principal(), []).allowed


def test_no_roles_denies_any_requirement():
    decision = evaluate(principal(), [req("users", A.READ)])

    assert not decision.allowed
    assert "no active roles" in decision.reason


def test_inactive_principal_is_denied_even_without_requirements():
    p = principal(RoleGrant("r", permissions=(grant("users", A.MANAGE),)), is_active=False)

    assert not evaluate(p, []).allowed
    assert not evaluate(p, [req("users", A.READ)]).allowed


def test_inactive_role_grants_nothing():
    p = principal(
        RoleGrant("old", is_active=False, permissions=(grant("users", A.MANAGE),)),
        RoleGrant("current", permissions=(grant("roles", A.READ),)),
    )

    assert evaluate(p, [req("roles", A.READ)]).allowed
    assert not evaluate(p, [req("users", A.READ)]).allowed


@pytest.mark.parametrize("resource,action", list(product(("users", "roles", "articles"), A)))
def test_role_without_permissions_denies_everything(resource, action):
    p = principal(RoleGrant("empty"))

    decision = evaluate(p, [req(resource, action)])

    assert not decision.allowed
    assert decision.metadata["missing"] == [f"{resource}:{action.value}"]


def test_only_inactive_roles_count_as_no_roles():
    p = principal(RoleGrant("old", is_active=False, permissions=(grant("users", A.READ),)))

    decision = evaluate(p, [req("users", A.READ)])

    assert not decision.allowed
    assert "no active roles" in decision.reason


def test_inactive_permission_grants_nothing():
    p = principal(RoleGrant("r", permissions=(grant("users", A.READ, is_active=False),)))

    assert not evaluate(p, [req("users", A.READ)]).allowed


def test_permission_on_inactive_resource_grants_nothing():
    p = principal(RoleGrant("r", permissions=(grant("users", A.MANAGE, resource_active=False),)))

    assert not evaluate(p, [req("users", A.READ)]).allowed


def test_has_role_ignores_inactive_roles():
    p = principal(RoleGrant("admin", is_active=False), RoleGrant("user"))

    assert p.role_names == ["admin", "user"]
    assert p.has_role("user")
    assert not p.has_role("admin")


def test_every_operation_requirement_is_well_formed():
    for operation_id, required in OPERATION_REQUIREMENTS.items():
        assert requirements_for(operation_id) == required
        for requirement in required:
            assert isinstance(requirement.action, PermissionAction)
            assert requirement.resource


def test_unknown_operation_is_rejected():
    with pytest.raises(LookupError):
        requirements_for("users.frobnicate")
