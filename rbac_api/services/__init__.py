"""
Business services.
"""

from .auth import AuthService, ResendResult, SignInResult, SignUpResult
from .rbac import RBACService
from .seeding import SeedAdminResult, SeedService, SeedTestDataResult
from .users import UserService

__all__ = [
    "AuthService",
    "RBACService",
    "ResendResult",
    "SeedAdminResult",
    "SeedService",
    "SeedTestDataResult",
    "SignInResult",
    "SignUpResult",
    "UserService",
]
