"""
Service dependencies.

Overriding get_identity_store, get_notification_gateway or get_password_hasher
in app.dependency_overrides reaches every service below.
"""

from typing import Annotated

from fastapi import Depends

from rbac_api.core.auth.passwords import PasswordHasher, get_password_hasher
from rbac_api.core.auth.tokens import TokenIssuer, get_token_issuer
from rbac_api.notifications import NotificationGateway, get_notification_gateway
from rbac_api.repositories import IdentityStore
from rbac_api.services import AuthService, RBACService, SeedService, UserService

from .database import get_identity_store

Store = Annotated[IdentityStore, Depends(get_identity_store)]
Tokens = Annotated[TokenIssuer, Depends(get_token_issuer)]
Hasher = Annotated[PasswordHasher, Depends(get_password_hasher)]
Gateway = Annotated[NotificationGateway, Depends(get_notification_gateway)]


def get_auth_service(store: Store, tokens: Tokens, hasher: Hasher, gateway: Gateway) -> AuthService:
    return AuthService(store=store, tokens=tokens, hasher=hasher, gateway=gateway)


def get_user_service(store: Store) -> UserService:
    return UserService(store)


def get_rbac_service(store: Store) -> RBACService:
    return RBACService(store)


def get_seed_service(store: Store, hasher: Hasher) -> SeedService:
    return SeedService(store, hasher)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
RBACServiceDep = Annotated[RBACService, Depends(get_rbac_service)]
SeedServiceDep = Annotated[SeedService, Depends(get_seed_service)]
