"""
Business logic services for authentication.

Services encapsulate account rules and coordinate with the marketplace
services (catalog, favorites) injected by the container.
"""

from .auth_service import AuthService
from .results import AuthResult, ProfileResult

__all__ = [
    "AuthService",
    "AuthResult",
    "ProfileResult",
]
