"""Email client using Resend API."""

import html
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from urllib.parse import quote

import resend

from src.stockpoint.core.config import get_settings
from src.stockpoint.core.logging import get_logger

logger = get_logger(__name__)

# Thread pool for email sending with timeout support
_email_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="email_sender")

_BODY_STYLE = (
    "font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; "
    "line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;"
)
_BUTTON_STYLE = (
    "background-color: #0f766e; color: white; padding: 12px 24px; "
    "text-decoration: none; border-radius: 6px; display: inline-block; font-weight: 500;"
)
_MUTED_STYLE = "color: #666; font-size: 14px;"


def build_password_reset_url(token: str) -> str:
    """Frontend link carrying the composite reset token."""
    settings = get_settings()
    return f"{settings.app_url.rstrip('/')}/reset-password?token={quote(token, safe='')}"


def send_password_reset_email(to: str, token: str, first_name: str | None = None) -> bool:
    """Send a password reset link.

    Args:
        to: Recipient email address
        token: Composite reset token (plaintext, included in URL)
        first_name: Optional name for the greeting

    Returns:
        True if email was sent (or logged in dev mode), False on error
    """
    settings = get_settings()
    reset_url = build_password_reset_url(token)

    if not settings.resend_api_key:
        # Dev mode: log instead of sending
        logger.warning(
            "RESEND_API_KEY not set - email not sent",
            email_type="password_reset",
        )
        return True

    resend.api_key = settings.resend_api_key

    def _send() -> None:
        resend.Emails.send(
            {
                "from": settings.email_from,
                "to": [to],
                "subject": f"Reset your {settings.app_name} password",
                "html": _get_password_reset_email_html(
                    first_name, reset_url, settings.password_reset_expire_minutes
                ),
            }
        )

    try:
        future = _email_executor.submit(_send)
        future.result(timeout=settings.email_send_timeout_seconds)
        logger.info("Password reset email sent")
        return True
    except FuturesTimeoutError:
        logger.error("Email send timed out", timeout=settings.email_send_timeout_seconds)
        return False
    except Exception as e:
        logger.error("Failed to send password reset email", error=str(e))
        return False


def _get_password_reset_email_html(
    first_name: str | None, reset_url: str, expire_minutes: int
) -> str:
    """Generate HTML content for the password reset email."""
    greeting = f"Hi {html.escape(first_name)}," if first_name else "Hi,"
    safe_url = html.escape(reset_url, quote=True)
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="{_BODY_STYLE}">
    <h1 style="color: #0f766e; margin-bottom: 24px;">Password reset</h1>
    <p>{greeting}</p>
    <p>We received a request to reset your password. Click below to choose a new one:</p>
    <p style="margin: 32px 0;">
        <a href="{safe_url}" style="{_BUTTON_STYLE}">Reset Password</a>
    </p>
    <p style="{_MUTED_STYLE}">
        This link expires in {expire_minutes} minutes and can be used once.
        If you didn't request a reset, you can ignore this email.
    </p>
</body>
</html>"""
