"""
Notification gateway implementations.
"""

from __future__ import annotations

import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import structlog
from starlette.concurrency import run_in_threadpool

from rbac_api.core.config import EmailSettings
from rbac_api.core.errors import DeliveryError

from .interfaces import EmailAddress, NotificationRequest, RenderedMessage
from .templates import render

logger = structlog.get_logger()


class ConsoleNotificationGateway:
    """Prints messages to stdout instead of sending them (development default)."""

    async def send(self, request: NotificationRequest) -> None:
        message = render(request)
        print(f"Sending email to {request.to}: {message.subject}\n{message.text}")
        logger.info("notification.sent", template=request.template_kind.value, backend="console")


class SMTPNotificationGateway:
    """
    Sends mail over SMTP.

    smtplib blocks, so delivery runs in the threadpool. Any failure is raised
    as DeliveryError.
    """

    def __init__(self, config: EmailSettings):
        self.config = config
        self.sender = EmailAddress(email=config.from_address, name=config.from_name)

    def _build(self, to: str, message: RenderedMessage) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = message.subject
        msg["From"] = str(self.sender)
        msg["To"] = to
        msg.attach(MIMEText(message.text, "plain", "utf-8"))
        msg.attach(MIMEText(message.html, "html", "utf-8"))
        return msg

    def _deliver(self, to: str, msg: MIMEMultipart) -> None:
        with smtplib.SMTP(
            self.config.smtp_host,
            self.config.smtp_port,
            timeout=self.config.smtp_timeout,
        ) as server:
            if self.config.smtp_tls:
                server.starttls()
            if self.config.smtp_user:
                server.login(self.config.smtp_user, self.config.smtp_password)
            server.sendmail(self.sender.email, [to], msg.as_string())

    async def send(self, request: NotificationRequest) -> None:
        msg = self._build(request.to, render(request))
        try:
            await run_in_threadpool(self._deliver, request.to, msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.warning(
                "notification.smtp_failed",
                template=request.template_kind.value,
                error=str(e),
            )
            raise DeliveryError(f"SMTP delivery failed: {e}") from e
        logger.info("notification.sent", template=request.template_kind.value)
