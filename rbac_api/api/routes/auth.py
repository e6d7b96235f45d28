"""
Authentication routes.
"""

from urllib.parse import quote

from fastapi import APIRouter, Query, status
from fastapi.responses import RedirectResponse

from rbac_api.api.dependencies.auth import require_permissions
from rbac_api.api.dependencies.services import AuthServiceDep, Store
from rbac_api.core.auth import Principal
from rbac_api.core.config import settings
from rbac_api.core.errors import AppError, UnauthorizedError, ValidationError
from rbac_api.schemas.auth import (
    Credentials,
    ResendVerificationRequest,
    ResendVerificationResponse,
    SignInResponse,
    SignupRequest,
    SignUpResponse,
)
from rbac_api.schemas.user import UserResponse

router = APIRouter()


@router.post("/signup", response_model=SignUpResponse, status_code=status.HTTP_201_CREATED)
async def signup(data: SignupRequest, auth_service: AuthServiceDep):
    """Register a new user and send a verification email."""
    result = await auth_service.sign_up(
        username=data.username,
        email=data.email,
        password=data.password,
        is_active=data.is_active,
    )
    return SignUpResponse(
        access_token=result.access_token,
        user=UserResponse.model_validate(result.user),
        verification_sent=result.verification_sent,
    )


@router.post("/signin", response_model=SignInResponse)
async def signin(data: Credentials, auth_service: AuthServiceDep):
    """Sign in with email and password."""
    result = await auth_service.sign_in(email=data.email, password=data.password)
    return SignInResponse(
        access_token=result.access_token,
        user=UserResponse.model_validate(result.user),
    )


@router.post("/login", response_model=SignInResponse)
async def login(data: Credentials, auth_service: AuthServiceDep):
    """Alias of /signin."""
    return await signin(data, auth_service)


@router.get("/verify-email", status_code=status.HTTP_302_FOUND, response_class=RedirectResponse)
async def verify_email(auth_service: AuthServiceDep, token: str | None = Query(None)):
    """Consume a verification token and redirect to the frontend."""
    if not token:
        raise ValidationError("Token is required", errors={"token": "required"})

    try:
        url = await auth_service.verify_email(token)
    except AppError as e:
        url = (
            f"{auth_service.frontend_url}/auth/verification-failure?reason="
            + quote(e.message, safe="")
        )
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


@router.post("/resend-verification", response_model=ResendVerificationResponse)
async def resend_verification(data: ResendVerificationRequest, auth_service: AuthServiceDep):
    result = await auth_service.resend_verification(data.email)
    return ResendVerificationResponse(
        success=result.sent,
        message="Verification email sent" if result.sent else "Verification email could not be sent",
    )


@router.get("/me", response_model=UserResponse)
async def me(store: Store, principal: Principal = require_permissions("auth.me")):
    """Current user profile."""
    user = await store.get_user(principal.id)
    if user is None:
        raise UnauthorizedError("User not found")
    return UserResponse.model_validate(user)
