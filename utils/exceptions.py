"""
DRF exception handler producing the public ``{error, message}`` error shape.

Expected failures never reach this handler: services return ServiceResult
and views answer with ``error_response``. What arrives here is either a DRF
exception (bad JSON, missing credentials, throttling) or an unexpected error,
which is logged with its traceback and answered with a generic 500.
"""

import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from utils.service_base import GENERIC_ERROR_MESSAGE, ErrorCodes

logger = logging.getLogger(__name__)

_DRF_CODES = {
    status.HTTP_400_BAD_REQUEST: ErrorCodes.VALIDATION_ERROR,
    status.HTTP_401_UNAUTHORIZED: ErrorCodes.UNAUTHORIZED,
    status.HTTP_403_FORBIDDEN: ErrorCodes.FORBIDDEN,
    status.HTTP_404_NOT_FOUND: ErrorCodes.NOT_FOUND,
}


def _first_message(detail):
    if isinstance(detail, list) and detail:
        return _first_message(detail[0])
    if isinstance(detail, dict) and detail:
        key, value = next(iter(detail.items()))
        message = _first_message(value)
        return message if key in ("detail", "non_field_errors") else f"{key}: {message}"
    return str(detail)


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.error(
            f"Unhandled exception in {type(view).__name__ if view else 'unknown view'}: {exc}",
            exc_info=exc,
        )
        return Response(
            {"error": ErrorCodes.INTERNAL_ERROR, "message": GENERIC_ERROR_MESSAGE},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    payload = {
        "error": _DRF_CODES.get(response.status_code, "error"),
        "message": _first_message(response.data),
    }
    if isinstance(exc, exceptions.ValidationError) and isinstance(response.data, dict):
        payload["errors"] = response.data
    response.data = payload
    return response
