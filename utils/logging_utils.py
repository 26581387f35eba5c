"""Helpers keeping personal data out of log lines."""

from typing import Any


def mask_value(value: Any) -> Any:
    """Mask an email (``jo***@example.com``) or any other identifier string."""
    if not isinstance(value, str):
        return value
    if "@" in value:
        name, _, domain = value.partition("@")
        return (name[:2] + "***@" + domain) if name else "***@" + domain
    if len(value) > 12:
        return value[:4] + "..." + value[-4:]
    if len(value) > 2:
        return value[:2] + "***"
    return "***"


def describe_user(user: Any) -> str:
    """Short log-safe label for a user: id plus masked email."""
    if user is None:
        return "user=<none>"
    return f"user={getattr(user, 'pk', None)} ({mask_value(getattr(user, 'email', ''))})"
