"""
Seeding routes.

POST /admin is open until an admin has been seeded once, so a fresh deployment
can bootstrap itself; afterwards it needs the same permission as /test-data,
even if the seeded account has since been deleted or renamed.
"""

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials

from rbac_api.api.dependencies.auth import (
    authorize,
    bearer_scheme,
    get_current_principal,
    require_permissions,
)
from rbac_api.api.dependencies.services import SeedServiceDep, Store, Tokens
from rbac_api.core.auth import Principal
from rbac_api.schemas.rbac import SeedAdminResponse, SeedTestDataResponse

router = APIRouter()


async def authorize_admin_seed(
    seed_service: SeedServiceDep,
    store: Store,
    tokens: Tokens,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal | None:
    if not await seed_service.admin_exists():
        return None
    principal = await get_current_principal(store, tokens, credentials)
    return authorize(principal, "seed.admin")


@router.post("/admin", response_model=SeedAdminResponse, status_code=status.HTTP_201_CREATED)
async def seed_admin(
    seed_service: SeedServiceDep,
    principal: Principal | None = Depends(authorize_admin_seed),
):
    """Create the admin user with full RBAC permissions."""
    return await seed_service.seed_admin()


@router.post("/test-data", response_model=SeedTestDataResponse, status_code=status.HTTP_201_CREATED)
async def seed_test_data(
    seed_service: SeedServiceDep,
    principal: Principal = require_permissions("seed.test_data"),
):
    """Create development roles and users."""
    return await seed_service.seed_test_data()
