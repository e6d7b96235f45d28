"""
Notification gateway protocol.
Implementations: ConsoleNotificationGateway, SMTPNotificationGateway
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol


class TemplateKind(str, Enum):
    OTP = "otp"
    VERIFICATION = "verification"
    PASSWORD_RESET = "password_reset"


@dataclass
class EmailAddress:
    """Email address with optional name."""
    email: str
    name: str | None = None

    def __str__(self) -> str:
        if self.name:
            return f"{self.name} <{self.email}>"
        return self.email


@dataclass
class NotificationRequest:
    """
    A typed send request.

    Context keys per template kind:
    - otp: otp
    - verification: username, verification_url
    - password_reset: username, reset_url
    """
    to: str
    template_kind: TemplateKind
    context: dict[str, Any] = field(default_factory=dict)


@dataclass
class RenderedMessage:
    subject: str
    text: str
    html: str


class NotificationGateway(Protocol):
    """
    Delivers notifications.

    send() either returns normally or raises DeliveryError; callers decide
    whether a failure matters.
    """

    async def send(self, request: NotificationRequest) -> None:
        ...
