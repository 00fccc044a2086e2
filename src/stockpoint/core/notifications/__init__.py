"""Notification utilities - email."""

from src.stockpoint.core.notifications.email import (
    build_password_reset_url,
    send_password_reset_email,
)

__all__ = [
    "build_password_reset_url",
    "send_password_reset_email",
]
