"""
Authentication schemas.
"""

from pydantic import BaseModel, EmailStr, Field

from .user import UserResponse


class SignupRequest(BaseModel):
    """User registration request."""
    username: str = Field(min_length=1, max_length=100, examples=["john_doe"])
    email: EmailStr = Field(examples=["john.doe@example.com"])
    password: str = Field(min_length=1, max_length=128)
    is_active: bool = True


class Credentials(BaseModel):
    """Sign-in request."""
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class ResendVerificationRequest(BaseModel):
    email: EmailStr


class SignUpResponse(BaseModel):
    """Registration response with user and token."""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
    verification_sent: bool


class SignInResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class ResendVerificationResponse(BaseModel):
    success: bool
    message: str
