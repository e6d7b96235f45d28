"""
Tests for notification templates and gateways.
"""

import smtplib

import pytest

from rbac_api.core.config import EmailSettings
from rbac_api.core.errors import DeliveryError
from rbac_api.notifications import (
    ConsoleNotificationGateway,
    NotificationRequest,
    SMTPNotificationGateway,
    TemplateKind,
    render,
)


def verification_request(**context) -> NotificationRequest:
    return NotificationRequest(
        to="alice@example.com",
        template_kind=TemplateKind.VERIFICATION,
        context={"username": "alice", "verification_url": "http://app.test/verify?token=abc", **context},
    )


def test_render_verification():
    message = render(verification_request())

    assert message.subject == "Verify Your Email"
    assert "http://app.test/verify?token=abc" in message.text
    assert "http://app.test/verify?token=abc" in message.html


def test_render_escapes_html():
    message = render(verification_request(username="<script>"))

    assert "<script>" not in message.html
    assert "&lt;script&gt;" in message.html


def test_render_otp_and_password_reset():
    otp = render(NotificationRequest(to="a@example.com", template_kind=TemplateKind.OTP, context={"otp": 123456}))
    reset = render(
        NotificationRequest(
            to="a@example.com",
            template_kind=TemplateKind.PASSWORD_RESET,
            context={"username": "a", "reset_url": "http://app.test/reset"},
        )
    )

    assert "123456" in otp.text
    assert "http://app.test/reset" in reset.text


@pytest.mark.asyncio
async def test_console_gateway_prints(capsys):
    await ConsoleNotificationGateway().send(verification_request())

    out = capsys.readouterr().out
    assert "Sending email to alice@example.com" in out


@pytest.mark.asyncio
async def test_smtp_gateway_delivers(monkeypatch):
    sent = []

    class FakeSMTP:
        def __init__(self, host, port, timeout=None):
            self.host = host

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def starttls(self):
            pass

        def login(self, user, password):
            pass

        def sendmail(self, sender, recipients, body):
            sent.append((sender, recipients, body))

    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    gateway = SMTPNotificationGateway(EmailSettings(from_address="noreply@app.test"))

    await gateway.send(verification_request())

    assert len(sent) == 1
    sender, recipients, body = sent[0]
    assert sender == "noreply@app.test"
    assert recipients == ["alice@example.com"]
    assert "Verify Your Email" in body


@pytest.mark.asyncio
async def test_smtp_gateway_failure_is_delivery_error(monkeypatch):
    def refuse(*args, **kwargs):
        raise ConnectionRefusedError("connection refused")

    monkeypatch.setattr(smtplib, "SMTP", refuse)
    gateway = SMTPNotificationGateway(EmailSettings(smtp_host="127.0.0.1", smtp_port=1))

    with pytest.raises(DeliveryError):
        await gateway.send(verification_request())
