"""
Bearer token issuing and validation.

Tokens are HS256 JWTs carrying {sub, email, username, exp}. The issuer is
stateless: nothing is stored server-side, so a token stays valid until it
expires.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from uuid import UUID

from jose import ExpiredSignatureError, JWTError, jwt

from rbac_api.core.config import settings
from rbac_api.core.errors import TokenExpiredError, TokenInvalidError

REQUIRED_CLAIMS = ("sub", "email", "username", "exp")


@dataclass(frozen=True)
class TokenClaims:
    """Decoded and validated bearer token claims."""
    sub: UUID
    email: str
    username: str
    exp: datetime


class TokenIssuer:
    """Creates and validates signed bearer tokens."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expire_minutes: int = 60 * 24,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(
        self,
        principal_id: UUID,
        email: str,
        username: str,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a token bound to the principal's identity."""
        expire = datetime.now(timezone.utc) + (
            expires_delta if expires_delta is not None else timedelta(minutes=self.expire_minutes)
        )
        payload = {
            "sub": str(principal_id),
            "email": email,
            "username": username,
            "exp": expire,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Validate signature and expiry, then the claim set.

        Raises:
            TokenExpiredError: Signature is valid but exp is in the past
            TokenInvalidError: Malformed token, bad signature or missing claims
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise TokenExpiredError() from None
        except JWTError:
            raise TokenInvalidError() from None

        missing = [claim for claim in REQUIRED_CLAIMS if not payload.get(claim)]
        if missing:
            raise TokenInvalidError(f"Token is missing claims: {', '.join(missing)}")

        try:
            sub = UUID(str(payload["sub"]))
        except ValueError:
            raise TokenInvalidError("Token subject is not a valid identifier") from None

        return TokenClaims(
            sub=sub,
            email=payload["email"],
            username=payload["username"],
            exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )


@lru_cache
def get_token_issuer() -> TokenIssuer:
    """Get the issuer configured from AUTH_ settings."""
    return TokenIssuer(
        secret_key=settings.auth.secret_key,
        algorithm=settings.auth.algorithm,
        expire_minutes=settings.auth.access_token_expire_minutes,
    )
