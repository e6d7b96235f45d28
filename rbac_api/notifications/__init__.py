"""
Notification gateway boundary.

Usage:
    from rbac_api.notifications import get_notification_gateway

    gateway = get_notification_gateway()
    await gateway.send(NotificationRequest(to=..., template_kind=TemplateKind.VERIFICATION, context={...}))
"""

from functools import lru_cache

from rbac_api.core.config import settings

from .gateways import ConsoleNotificationGateway, SMTPNotificationGateway
from .interfaces import (
    EmailAddress,
    NotificationGateway,
    NotificationRequest,
    RenderedMessage,
    TemplateKind,
)
from .templates import render


@lru_cache
def get_notification_gateway() -> NotificationGateway:
    """Gateway selected by EMAIL_BACKEND."""
    if settings.email.backend == "smtp":
        return SMTPNotificationGateway(settings.email)
    return ConsoleNotificationGateway()


__all__ = [
    "ConsoleNotificationGateway",
    "EmailAddress",
    "NotificationGateway",
    "NotificationRequest",
    "RenderedMessage",
    "SMTPNotificationGateway",
    "TemplateKind",
    "get_notification_gateway",
    "render",
]
