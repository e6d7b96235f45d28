"""
Role, permission and resource schemas.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from rbac_api.core.auth.interfaces import PermissionAction


# ============================================================
# RESOURCES
# ============================================================

class ResourceCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100, examples=["articles"])
    description: str | None = None
    is_active: bool = True


class ResourceUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    is_active: bool | None = None


class ResourceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


# ============================================================
# PERMISSIONS
# ============================================================

class PermissionCreate(BaseModel):
    name: str = Field(min_length=1, max_length=150, examples=["update:articles"])
    resource_name: str = Field(min_length=1, max_length=100)
    action: PermissionAction = PermissionAction.READ
    description: str | None = None
    is_active: bool = True


class PermissionUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=150)
    resource_name: str | None = Field(None, min_length=1, max_length=100)
    action: PermissionAction | None = None
    description: str | None = None
    is_active: bool | None = None


class PermissionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None = None
    action: PermissionAction
    is_active: bool
    resource: ResourceResponse
    created_at: datetime
    updated_at: datetime


# ============================================================
# ROLES
# ============================================================

class RoleCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100, examples=["editor"])
    description: str | None = None
    permissions: list[str] = Field(default_factory=list, examples=[["read:users", "create:users"]])
    is_active: bool = True


class RoleUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    # Replaces the role's permission set when given
    permissions: list[str] | None = None
    is_active: bool | None = None


class RolePermissionUpdate(BaseModel):
    """Add (is_active=true) or remove (is_active=false) one permission on a role."""
    id: UUID = Field(description="Permission ID")
    role_id: UUID
    is_active: bool


class RoleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None = None
    is_active: bool
    permissions: list[PermissionResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


# ============================================================
# SEEDING
# ============================================================

class SeedAdminResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    message: str
    admin_email: str
    admin_role: str
    permissions_count: int


class SeedTestDataResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    message: str
    created_users: list[str]
    skipped_users: list[str]
