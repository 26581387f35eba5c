"""
Ownership guard.

One check for every gated mutation: item update/delete and offer decisions
(owner field ``seller``), review update/delete (``rater``) and profile
update/delete (the user record itself).
"""

import logging
from typing import Any, Optional

from utils.service_base import ErrorCodes, ServiceResult, service_err

logger = logging.getLogger(__name__)


def _identity_id(identity: Any) -> Optional[str]:
    if identity is None:
        return None
    if not getattr(identity, "is_authenticated", True):
        return None
    value = getattr(identity, "pk", identity)
    return str(value) if value is not None else None


def owner_id_of(resource: Any, owner_field: Optional[str] = None) -> Optional[str]:
    """
    Return the owning user id of ``resource`` as a string.

    ``owner_field`` names a foreign key (``seller``, ``rater``); its ``_id``
    attribute is read so the related row is never fetched. Without
    ``owner_field`` the resource is itself the owning identity.
    """
    if owner_field is None:
        return _identity_id(resource)
    raw = getattr(resource, f"{owner_field}_id", None)
    if raw is None:
        raw = getattr(resource, owner_field, None)
        return _identity_id(raw)
    return str(raw)


def is_owner(resource: Any, identity: Any, owner_field: Optional[str] = None) -> bool:
    owner = owner_id_of(resource, owner_field)
    caller = _identity_id(identity)
    return owner is not None and caller is not None and owner == caller


def require_owner(
    resource: Any,
    identity: Any,
    owner_field: Optional[str] = None,
    message: str = "You do not own this resource",
) -> Optional[ServiceResult]:
    """
    Return a FORBIDDEN result when ``identity`` does not own ``resource``.

    Returns None when the caller is authorized, so services read:

        denied = require_owner(item, caller, "seller", "You can only manage offers for your own items")
        if denied:
            return denied
    """
    if is_owner(resource, identity, owner_field):
        return None
    logger.info(
        f"Ownership check failed on {type(resource).__name__} "
        f"(owner={owner_id_of(resource, owner_field)}, caller={_identity_id(identity)})"
    )
    return service_err(ErrorCodes.FORBIDDEN, message)
