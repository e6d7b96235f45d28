"""
Minimal message bodies per template kind.
"""

from html import escape as html_escape

from .interfaces import NotificationRequest, RenderedMessage, TemplateKind


def _html_page(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
<head><meta charset="utf-8"><title>{html_escape(title)}</title></head>
<body style="font-family: Arial, sans-serif; color: #374151; max-width: 600px; margin: 0 auto; padding: 20px;">
{body}
</body>
</html>
"""


def _button(url: str, label: str) -> str:
    return (
        f'<p><a href="{html_escape(url)}" '
        'style="background-color: #f59e0b; color: #ffffff; padding: 12px 20px; '
        'text-decoration: none; border-radius: 4px; display: inline-block;">'
        f"{html_escape(label)}</a></p>"
    )


def render(request: NotificationRequest) -> RenderedMessage:
    ctx = request.context

    if request.template_kind == TemplateKind.OTP:
        otp = str(ctx["otp"])
        return RenderedMessage(
            subject="Your OTP Code",
            text=f"Your OTP code is: {otp}",
            html=_html_page(
                "Your OTP Code",
                f"<p>Dear user,</p><p>Your OTP code is: <strong>{html_escape(otp)}</strong></p>"
                "<p>This code will expire in 5 minutes.</p>",
            ),
        )

    if request.template_kind == TemplateKind.VERIFICATION:
        username = str(ctx.get("username", ""))
        url = str(ctx["verification_url"])
        return RenderedMessage(
            subject="Verify Your Email",
            text=f"Hello {username},\n\nPlease verify your email by clicking this link: {url}\n",
            html=_html_page(
                "Email Verification",
                f"<h1>Welcome, <strong>{html_escape(username)}</strong>!</h1>"
                "<p>Thank you for signing up. Please verify your email address by clicking the button below.</p>"
                + _button(url, "Verify Your Email"),
            ),
        )

    if request.template_kind == TemplateKind.PASSWORD_RESET:
        username = str(ctx.get("username", ""))
        url = str(ctx["reset_url"])
        return RenderedMessage(
            subject="Reset Your Password",
            text=f"Hello {username},\n\nPlease reset your password by clicking this link: {url}\n",
            html=_html_page(
                "Password Reset Request",
                f"<p>Hi <strong>{html_escape(username)}</strong>,</p>"
                "<p>We received a request to reset your password.</p>"
                + _button(url, "Reset Your Password"),
            ),
        )

    raise ValueError(f"Unknown template kind: {request.template_kind}")
