"""
Tests for user endpoints.
"""

import pytest
from httpx import AsyncClient

from rbac_api.core.auth import PermissionAction
from rbac_api.core.hooks import hooks
from rbac_api.models import User

from .conftest import auth_headers_for


@pytest.mark.asyncio
async def test_list_users_as_admin(client: AsyncClient, admin_user: User, test_user: User, admin_headers: dict):
    """Test admin can list all users."""
    response = await client.get("/api/users", headers=admin_headers)

    assert response.status_code == 200
    ids = {u["id"] for u in response.json()}
    assert ids == {str(admin_user.id), str(test_user.id)}


@pytest.mark.asyncio
async def test_list_users_filters_inactive(client: AsyncClient, admin_headers: dict, user_factory):
    inactive = await user_factory.create(is_active=False)

    response = await client.get("/api/users", headers=admin_headers, params={"is_active": False})

    assert [u["id"] for u in response.json()] == [str(inactive.id)]


@pytest.mark.asyncio
async def test_read_only_role_can_list_but_not_update(client: AsyncClient, rbac_factory, user_factory, tokens):
    await rbac_factory.role("viewer", [("users", PermissionAction.READ)])
    viewer = await user_factory.create(roles=["viewer"])
    headers = auth_headers_for(tokens, viewer)

    assert (await client.get("/api/users", headers=headers)).status_code == 200
    response = await client.patch(f"/api/users/{viewer.id}", headers=headers, json={"username": "renamed"})
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_update_user(client: AsyncClient, test_user: User, admin_headers: dict):
    response = await client.patch(
        f"/api/users/{test_user.id}",
        headers=admin_headers,
        json={"username": "renamed", "email": "Renamed@Example.com"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["username"] == "renamed"
    assert data["email"] == "renamed@example.com"


@pytest.mark.asyncio
async def test_update_user_to_taken_email(client: AsyncClient, admin_user: User, test_user: User, admin_headers: dict):
    response = await client.patch(
        f"/api/users/{test_user.id}",
        headers=admin_headers,
        json={"email": admin_user.email},
    )

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_get_missing_user(client: AsyncClient, admin_headers: dict):
    response = await client.get("/api/users/00000000-0000-0000-0000-000000000000", headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_soft_delete_user(client: AsyncClient, test_user: User, user_headers: dict, admin_headers: dict):
    """A deleted user vanishes from the API and can no longer authenticate."""
    deleted = []

    async def on_deleted(user_id, **payload):
        deleted.append(user_id)

    hooks.register("user.deleted", on_deleted)
    try:
        response = await client.delete(f"/api/users/{test_user.id}", headers=admin_headers)
    finally:
        hooks.unregister("user.deleted", on_deleted)

    assert response.status_code == 204
    assert deleted == [test_user.id]
    assert (await client.get(f"/api/users/{test_user.id}", headers=admin_headers)).status_code == 404
    assert (await client.get("/api/auth/me", headers=user_headers)).status_code == 401


@pytest.mark.asyncio
async def test_purge_user(client: AsyncClient, test_user: User, admin_headers: dict):
    response = await client.delete(f"/api/users/{test_user.id}/purge", headers=admin_headers)

    assert response.status_code == 204
    response = await client.delete(f"/api/users/{test_user.id}/purge", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_assign_and_revoke_roles(client: AsyncClient, test_user: User, admin_headers: dict, rbac_factory):
    editor = await rbac_factory.role("editor")
    await rbac_factory.role("reviewer")

    response = await client.post(
        f"/api/users/{test_user.id}/roles",
        headers=admin_headers,
        json={"role_ids": [str(editor.id)], "role_names": ["reviewer"]},
    )
    assert response.status_code == 200
    assert sorted(response.json()["roles"]) == ["editor", "reviewer"]

    # Assigning a held role again is a no-op
    response = await client.post(
        f"/api/users/{test_user.id}/roles",
        headers=admin_headers,
        json={"role_names": ["editor"]},
    )
    assert sorted(response.json()["roles"]) == ["editor", "reviewer"]

    response = await client.delete(f"/api/users/{test_user.id}/roles/{editor.id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["roles"] == ["reviewer"]

    response = await client.delete(f"/api/users/{test_user.id}/roles/{editor.id}", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_assign_unknown_role(client: AsyncClient, test_user: User, admin_headers: dict):
    response = await client.post(
        f"/api/users/{test_user.id}/roles",
        headers=admin_headers,
        json={"role_names": ["ghost"]},
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_assign_roles_requires_a_role(client: AsyncClient, test_user: User, admin_headers: dict):
    response = await client.post(f"/api/users/{test_user.id}/roles", headers=admin_headers, json={})

    assert response.status_code == 400
