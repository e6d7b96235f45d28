"""
Tests for role, permission and resource endpoints.
"""

import pytest
from httpx import AsyncClient

from rbac_api.core.auth import PermissionAction

from .conftest import auth_headers_for

A = PermissionAction


@pytest.mark.asyncio
async def test_rbac_routes_require_authentication(client: AsyncClient):
    for path in ("/api/roles", "/api/permissions", "/api/resources", "/api/users"):
        response = await client.get(path)
        assert response.status_code == 401


@pytest.mark.asyncio
async def test_rbac_routes_forbid_users_without_roles(client: AsyncClient, user_headers: dict):
    for path in ("/api/roles", "/api/permissions", "/api/resources", "/api/users"):
        response = await client.get(path, headers=user_headers)
        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"


@pytest.mark.asyncio
async def test_resource_crud(client: AsyncClient, admin_headers: dict):
    """Test create, read, update and delete of a resource."""
    response = await client.post(
        "/api/resources",
        headers=admin_headers,
        json={"name": "articles", "description": "Blog articles"},
    )
    assert response.status_code == 201
    resource_id = response.json()["id"]

    response = await client.get(f"/api/resources/{resource_id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["name"] == "articles"

    response = await client.patch(
        f"/api/resources/{resource_id}",
        headers=admin_headers,
        json={"is_active": False},
    )
    assert response.status_code == 200
    assert response.json()["is_active"] is False

    response = await client.get("/api/resources", headers=admin_headers, params={"is_active": False})
    assert [r["name"] for r in response.json()] == ["articles"]

    response = await client.delete(f"/api/resources/{resource_id}", headers=admin_headers)
    assert response.status_code == 204

    response = await client.get(f"/api/resources/{resource_id}", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_duplicate_resource_is_conflict(client: AsyncClient, admin_headers: dict):
    await client.post("/api/resources", headers=admin_headers, json={"name": "articles"})

    response = await client.post("/api/resources", headers=admin_headers, json={"name": "articles"})

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_permission_crud(client: AsyncClient, admin_headers: dict, rbac_factory):
    await rbac_factory.resource("articles")

    response = await client.post(
        "/api/permissions",
        headers=admin_headers,
        json={"name": "update:articles", "resource_name": "articles", "action": "update"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["action"] == "update"
    assert data["resource"]["name"] == "articles"

    response = await client.get(
        "/api/permissions",
        headers=admin_headers,
        params={"resource_name": "articles"},
    )
    assert [p["name"] for p in response.json()] == ["update:articles"]

    response = await client.patch(
        f"/api/permissions/{data['id']}",
        headers=admin_headers,
        json={"action": "manage"},
    )
    assert response.status_code == 200
    assert response.json()["action"] == "manage"

    response = await client.delete(f"/api/permissions/{data['id']}", headers=admin_headers)
    assert response.status_code == 204


@pytest.mark.asyncio
async def test_permission_with_invalid_action(client: AsyncClient, admin_headers: dict, rbac_factory):
    await rbac_factory.resource("articles")

    response = await client.post(
        "/api/permissions",
        headers=admin_headers,
        json={"name": "x:articles", "resource_name": "articles", "action": "publish"},
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_role_crud(client: AsyncClient, admin_headers: dict, rbac_factory):
    await rbac_factory.permission("articles", A.READ)
    await rbac_factory.permission("articles", A.UPDATE)

    response = await client.post(
        "/api/roles",
        headers=admin_headers,
        json={"name": "editor", "permissions": ["read:articles", "update:articles"]},
    )
    assert response.status_code == 201
    role = response.json()
    assert sorted(p["name"] for p in role["permissions"]) == ["read:articles", "update:articles"]

    response = await client.patch(
        f"/api/roles/{role['id']}",
        headers=admin_headers,
        json={"description": "Edits articles", "permissions": ["read:articles"]},
    )
    assert response.status_code == 200
    assert response.json()["description"] == "Edits articles"
    assert [p["name"] for p in response.json()["permissions"]] == ["read:articles"]

    response = await client.get(f"/api/roles/{role['id']}", headers=admin_headers)
    assert response.status_code == 200

    response = await client.delete(f"/api/roles/{role['id']}", headers=admin_headers)
    assert response.status_code == 204

    response = await client.get(f"/api/roles/{role['id']}", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_patch_role_permission(client: AsyncClient, admin_headers: dict, rbac_factory):
    """PATCH /roles/permissions grants and revokes a single permission."""
    role = await rbac_factory.role("editor")
    permission = await rbac_factory.permission("articles", A.DELETE)
    body = {"id": str(permission.id), "role_id": str(role.id)}

    response = await client.patch("/api/roles/permissions", headers=admin_headers, json={**body, "is_active": True})
    assert response.status_code == 200
    assert [p["name"] for p in response.json()["permissions"]] == ["delete:articles"]

    response = await client.patch("/api/roles/permissions", headers=admin_headers, json={**body, "is_active": True})
    assert response.status_code == 409

    response = await client.patch("/api/roles/permissions", headers=admin_headers, json={**body, "is_active": False})
    assert response.status_code == 200
    assert response.json()["permissions"] == []


@pytest.mark.asyncio
async def test_role_create_needs_permissions_read(client: AsyncClient, rbac_factory, user_factory, tokens):
    """roles:create alone is not enough; permission names must be readable too."""
    await rbac_factory.role("role-maker", [("roles", A.CREATE)])
    user = await user_factory.create(roles=["role-maker"])
    headers = auth_headers_for(tokens, user)

    response = await client.post("/api/roles", headers=headers, json={"name": "editor"})
    assert response.status_code == 403

    await rbac_factory.role("perm-reader", [("permissions", A.READ)])
    async with rbac_factory.store.transaction() as tx:
        held = await tx.users.require(user.id)
        await tx.users.assign_roles(held, await tx.roles.get_many_by_names(["perm-reader"]))

    response = await client.post("/api/roles", headers=headers, json={"name": "editor"})
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_permissions_revoked_mid_session_take_effect(client: AsyncClient, rbac_factory, user_factory, tokens):
    """Grants are re-read on every request, not baked into the token."""
    role = await rbac_factory.role("reader", [("resources", A.READ)])
    user = await user_factory.create(roles=["reader"])
    headers = auth_headers_for(tokens, user)

    assert (await client.get("/api/resources", headers=headers)).status_code == 200

    async with rbac_factory.store.transaction() as tx:
        held = await tx.roles.require(role.id)
        await tx.roles.update(held, is_active=False)

    assert (await client.get("/api/resources", headers=headers)).status_code == 403


@pytest.mark.asyncio
async def test_role_without_permissions_is_forbidden(client: AsyncClient, rbac_factory, user_factory, tokens):
    """Holding an active role grants nothing until the role has permissions."""
    await rbac_factory.role("empty")
    user = await user_factory.create(roles=["empty"])
    headers = auth_headers_for(tokens, user)

    for path in ("/api/roles", "/api/permissions", "/api/resources", "/api/users"):
        response = await client.get(path, headers=headers)
        assert response.status_code == 403

    response = await client.get("/api/auth/me", headers=headers)
    assert response.json()["roles"] == ["empty"]
