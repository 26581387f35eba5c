"""
Result payloads for the authentication service.

These are the ``value`` of a successful ServiceResult; failures use the
shared ServiceResult error fields.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass
class AuthResult:
    """A user together with a freshly issued JWT pair."""

    user: Any  # CustomUser instance
    access_token: str
    refresh_token: str
    message: str = ""


@dataclass
class ProfileResult:
    """Public profile; ``liked_items`` and the email are only filled for the owner."""

    user: Any
    items: List[Any] = field(default_factory=list)
    is_owner: bool = False
    liked_items: Optional[List[Any]] = None
