"""
Shared service-layer foundation.

Every domain service (catalog, offers, favorites, reviews, auth, payments)
returns a ServiceResult instead of raising for expected outcomes. Views map
``result.error`` to an HTTP status through ``ErrorCodes.HTTP_STATUS``.

Exceptions are reserved for truly unexpected conditions (storage outages,
programming errors). Services catch those at their boundary, log them with
the traceback and return INTERNAL_ERROR with a generic message.
"""

import logging
import time
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Outcome of a service operation.

    Attributes:
        ok: True if the operation succeeded
        value: The success value (present if ok=True)
        error: Error code from ErrorCodes (present if ok=False)
        error_detail: Human-readable message, safe to show to API clients
        extra: Optional structured context for the error (e.g. expected/received amounts)

    Examples:
        >>> result = offer_service.submit_offer(item_id, buyer, amount)
        >>> if not result.ok:
        ...     return error_response(result)
        >>> return Response(OfferSerializer(result.value).data, status=201)
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_detail: Optional[str] = None
    extra: Optional[dict] = None

    def to_dict(self) -> dict:
        """Error payload in the public ``{error, message}`` shape."""
        if self.ok:
            return {"success": True, "data": self.value}
        payload = {"error": self.error, "message": self.error_detail}
        if self.extra:
            payload.update(self.extra)
        return payload


def service_ok(value: T = None) -> ServiceResult[T]:
    """Create a successful ServiceResult."""
    return ServiceResult(ok=True, value=value)


def service_err(error: str, error_detail: str = "", extra: Optional[dict] = None) -> ServiceResult:
    """
    Create a failed ServiceResult.

    Args:
        error: Error code (one of ErrorCodes)
        error_detail: Human-readable error message
        extra: Optional structured context merged into the error payload

    Example:
        >>> return service_err(ErrorCodes.NOT_FOUND, "Item not found")
    """
    return ServiceResult(ok=False, error=error, error_detail=error_detail or error, extra=extra)


class ErrorCodes:
    """Error taxonomy shared by every service."""

    VALIDATION_ERROR = "validation_error"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INVALID_STATE = "invalid_state"
    PAYMENT_ERROR = "payment_error"
    INTERNAL_ERROR = "internal_error"

    HTTP_STATUS = {
        VALIDATION_ERROR: 400,
        UNAUTHORIZED: 401,
        FORBIDDEN: 403,
        NOT_FOUND: 404,
        CONFLICT: 409,
        INVALID_STATE: 409,
        PAYMENT_ERROR: 502,
        INTERNAL_ERROR: 500,
    }

    @classmethod
    def status_for(cls, code: Optional[str]) -> int:
        return cls.HTTP_STATUS.get(code, 500)


GENERIC_ERROR_MESSAGE = "Internal server error"


class BaseService:
    """
    Base class for domain services.

    Provides a class-scoped logger and the ``log_performance`` decorator.

    Usage:
        class OfferService(BaseService):
            def __init__(self, store):
                super().__init__()
                self.store = store

            @BaseService.log_performance
            def submit_offer(self, item_id, buyer, amount):
                ...
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__module__ + "." + self.__class__.__name__)

    @staticmethod
    def log_performance(func: Callable) -> Callable:
        """
        Decorator logging execution time and outcome of a service method.

        Failed ServiceResults are logged at WARNING, exceptions at ERROR
        (and re-raised).
        """

        @wraps(func)
        def wrapper(self, *args, **kwargs):
            start_time = time.time()
            method_name = f"{self.__class__.__name__}.{func.__name__}"

            try:
                self.logger.debug(f"{method_name} started")
                result = func(self, *args, **kwargs)
                elapsed_time = (time.time() - start_time) * 1000

                if isinstance(result, ServiceResult):
                    if result.ok:
                        self.logger.info(f"{method_name} completed successfully in {elapsed_time:.2f}ms")
                    else:
                        self.logger.warning(
                            f"{method_name} failed with error '{result.error}' in {elapsed_time:.2f}ms"
                        )
                else:
                    self.logger.info(f"{method_name} completed in {elapsed_time:.2f}ms")

                return result

            except Exception as e:
                elapsed_time = (time.time() - start_time) * 1000
                self.logger.error(
                    f"{method_name} raised exception after {elapsed_time:.2f}ms: {str(e)}",
                    exc_info=True,
                )
                raise

        return wrapper

    def internal_error(self, context: str, exc: Exception) -> ServiceResult[Any]:
        """Log an unexpected failure and return a generic INTERNAL_ERROR result."""
        self.logger.error(f"Error {context}: {exc}", exc_info=True)
        return service_err(ErrorCodes.INTERNAL_ERROR, GENERIC_ERROR_MESSAGE)
