"""
User schemas.

The password hash and verification token never appear in a response model.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class UserResponse(BaseModel):
    """Public user profile."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    email: EmailStr
    is_active: bool
    email_verified: bool
    roles: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @field_validator("roles", mode="before")
    @classmethod
    def role_names(cls, v: Any) -> list[str]:
        return [role if isinstance(role, str) else role.name for role in v or []]


class UserUpdate(BaseModel):
    """User update schema."""
    username: str | None = Field(None, min_length=1, max_length=100)
    email: EmailStr | None = None
    is_active: bool | None = None


class AssignRolesRequest(BaseModel):
    role_ids: list[UUID] = Field(default_factory=list)
    role_names: list[str] = Field(default_factory=list)
