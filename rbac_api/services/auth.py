"""
Authentication workflows.

Each workflow runs as one transaction against the IdentityStore: everything
it writes commits together or not at all. Verification emails go out only
after the commit, so a slow or failing mail server never holds a transaction
open and never undoes a signup.
"""

from dataclasses import dataclass

import structlog

from rbac_api.core.auth.passwords import PasswordHasher, generate_verification_token
from rbac_api.core.auth.tokens import TokenIssuer
from rbac_api.core.config import settings
from rbac_api.core.errors import (
    AppError,
    ConflictError,
    InternalError,
    UnauthorizedError,
    ValidationError,
)
from rbac_api.core.hooks import hooks
from rbac_api.models import User
from rbac_api.notifications import NotificationGateway, NotificationRequest, TemplateKind
from rbac_api.repositories import IdentityStore, normalize_email

logger = structlog.get_logger()


@dataclass
class SignUpResult:
    access_token: str
    user: User
    verification_sent: bool


@dataclass
class SignInResult:
    access_token: str
    user: User


@dataclass
class ResendResult:
    sent: bool


class AuthService:
    """Signup, signin, email verification and verification resend."""

    def __init__(
        self,
        store: IdentityStore,
        tokens: TokenIssuer,
        hasher: PasswordHasher,
        gateway: NotificationGateway,
        frontend_url: str | None = None,
    ):
        self.store = store
        self.tokens = tokens
        self.hasher = hasher
        self.gateway = gateway
        self.frontend_url = (frontend_url or settings.email.frontend_url).rstrip("/")

    # ============================================================
    # SIGN UP
    # ============================================================

    async def sign_up(
        self,
        username: str,
        email: str,
        password: str,
        is_active: bool = True,
    ) -> SignUpResult:
        """
        Register a user and send the verification email.

        Raises:
            ValidationError: Blank username or password too short
            ConflictError: Email or username already taken
            InternalError: Any unexpected failure (nothing is persisted)
        """
        username = username.strip()
        if not username:
            raise ValidationError("Username is required", errors={"username": "required"})
        if len(password) < settings.auth.password_min_length:
            raise ValidationError(
                f"Password must be at least {settings.auth.password_min_length} characters",
                errors={"password": "too short"},
            )
        email = normalize_email(email)

        try:
            async with self.store.transaction() as tx:
                if await tx.users.exists_with_email(email):
                    raise ConflictError("User with this email already exists")

                password_hash = await self.hasher.hash_async(password)
                user = await tx.users.create_user(
                    username=username,
                    email=email,
                    password_hash=password_hash,
                    is_active=is_active,
                    email_verified=False,
                    verification_token=generate_verification_token(),
                )
                access_token = self.tokens.issue(user.id, user.email, user.username)
        except AppError:
            raise
        except Exception as e:
            logger.exception("auth.signup.failed", email=email)
            raise InternalError("Authentication process failed") from e

        logger.info("auth.signup.completed", user_id=str(user.id))
        await hooks.trigger("auth.signup", user_id=user.id, email=user.email)

        verification_sent = await self._send_verification(user.email, user.username, user.verification_token)
        return SignUpResult(
            access_token=access_token,
            user=user,
            verification_sent=verification_sent,
        )

    # ============================================================
    # SIGN IN
    # ============================================================

    async def sign_in(self, email: str, password: str) -> SignInResult:
        """
        Authenticate with email and password.

        Unknown email, missing password hash, wrong password and inactive
        accounts are indistinguishable to the caller.
        """
        user = await self.store.find_user_by_email(email)
        # Always run a hash check so response time does not reveal unknown emails
        valid = await self.hasher.verify_async(password, user.password_hash if user else None)

        if user is None or not valid or not user.is_active:
            logger.info("auth.signin.rejected")
            await hooks.trigger("auth.failed", email=normalize_email(email))
            raise UnauthorizedError("Invalid credentials")

        access_token = self.tokens.issue(user.id, user.email, user.username)
        logger.info("auth.signin.completed", user_id=str(user.id))
        await hooks.trigger("auth.login", user_id=user.id)
        return SignInResult(access_token=access_token, user=user)

    # ============================================================
    # EMAIL VERIFICATION
    # ============================================================

    async def verify_email(self, token: str) -> str:
        """Consume a verification token. Returns the frontend redirect target."""
        if not token:
            raise ValidationError("Token is required", errors={"token": "required"})

        try:
            async with self.store.transaction() as tx:
                user = await tx.users.find_by_verification_token(token)
                if user is None:
                    raise UnauthorizedError("Invalid verification token")
                await tx.users.mark_verified(user)
        except AppError:
            raise
        except Exception as e:
            logger.exception("auth.verify_email.failed")
            raise InternalError("Email verification failed") from e

        logger.info("auth.email_verified", user_id=str(user.id))
        await hooks.trigger("auth.email_verified", user_id=user.id)
        return f"{self.frontend_url}/auth/verification-success"

    async def resend_verification(self, email: str) -> ResendResult:
        """
        Re-send the verification email, minting a token if none is pending.

        Raises:
            UnauthorizedError: No such user
            ConflictError: Email already verified (nothing is sent)
        """
        try:
            async with self.store.transaction() as tx:
                user = await tx.users.find_by_email(email)
                if user is None:
                    raise UnauthorizedError("User not found")
                if user.email_verified:
                    raise ConflictError("Email already verified")
                if not user.verification_token:
                    await tx.users.apply(user, {"verification_token": generate_verification_token()})
        except AppError:
            raise
        except Exception as e:
            logger.exception("auth.resend_verification.failed", email=normalize_email(email))
            raise InternalError("Failed to resend verification email") from e

        await hooks.trigger("auth.verification_resent", user_id=user.id)
        sent = await self._send_verification(user.email, user.username, user.verification_token)
        return ResendResult(sent=sent)

    # ============================================================
    # HELPERS
    # ============================================================

    def verification_url(self, token: str) -> str:
        return f"{self.frontend_url}/auth/verify-email?token={token}"

    async def _send_verification(self, email: str, username: str, token: str | None) -> bool:
        """Best-effort delivery; failures are logged and reported as False."""
        request = NotificationRequest(
            to=email,
            template_kind=TemplateKind.VERIFICATION,
            context={"username": username, "verification_url": self.verification_url(token or "")},
        )
        try:
            await self.gateway.send(request)
        except AppError as e:
            logger.warning("auth.verification_email.failed", email=email, error=e.message)
            return False
        except Exception:
            logger.exception("auth.verification_email.failed", email=email)
            return False
        return True
