"""
FastAPI dependencies for authentication and authorization.

Usage:
    from rbac_api.api.dependencies.auth import CurrentPrincipal, require_permissions

    @router.get("/me")
    async def me(principal: CurrentPrincipal):
        ...

    @router.delete("/{user_id}")
    async def delete_user(user_id: UUID, principal: Principal = require_permissions("users.delete")):
        ...
"""

from typing import Annotated, Any

import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from rbac_api.core.auth import Principal, evaluate, requirements_for
from rbac_api.core.errors import ForbiddenError, UnauthorizedError

from .services import Store, Tokens

logger = structlog.get_logger()

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_principal(
    store: Store,
    tokens: Tokens,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal:
    """
    Resolve the bearer token to a principal with its roles loaded.

    Raises:
        UnauthorizedError: No token, invalid or expired token, unknown,
            tombstoned or inactive user
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Not authenticated")

    claims = tokens.verify(credentials.credentials)
    principal = await store.load_principal(claims.sub)

    if principal is None:
        raise UnauthorizedError("User not found")
    if not principal.is_active:
        raise UnauthorizedError("User is inactive")

    return principal


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


def authorize(principal: Principal, operation_id: str) -> Principal:
    """Raise ForbiddenError unless principal satisfies the operation's requirements."""
    decision = evaluate(principal, requirements_for(operation_id))
    if not decision.allowed:
        logger.info(
            "authz.denied",
            operation=operation_id,
            user_id=str(principal.id),
            reason=decision.reason,
        )
        raise ForbiddenError()
    return principal


def require_permissions(operation_id: str) -> Any:
    """
    Dependency that enforces the operation's declared requirements.

    The lookup happens when the route is defined, so an undeclared operation
    id fails at import time rather than on the first request.
    """
    requirements_for(operation_id)

    async def check_permissions(principal: CurrentPrincipal) -> Principal:
        return authorize(principal, operation_id)

    return Depends(check_permissions)
