"""
Password hashing.

bcrypt is CPU-bound, so the async helpers run it in the threadpool to keep
the event loop free.
"""

import secrets
from functools import lru_cache

from passlib.context import CryptContext
from starlette.concurrency import run_in_threadpool

from rbac_api.core.config import settings


class PasswordHasher:
    def __init__(self, rounds: int = 12):
        self.context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        return self.context.hash(password)

    def verify(self, plain: str, hashed: str | None) -> bool:
        """Verify password against hash; a missing hash never matches."""
        if not hashed:
            # Spend the same time as a real check
            self.context.dummy_verify()
            return False
        return self.context.verify(plain, hashed)

    async def hash_async(self, password: str) -> str:
        return await run_in_threadpool(self.hash, password)

    async def verify_async(self, plain: str, hashed: str | None) -> bool:
        return await run_in_threadpool(self.verify, plain, hashed)


def generate_verification_token(nbytes: int | None = None) -> str:
    """Random hex token for email verification links."""
    return secrets.token_hex(nbytes or settings.auth.verification_token_bytes)


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=settings.auth.bcrypt_rounds)
