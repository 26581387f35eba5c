from rest_framework.response import Response

from utils.service_base import ErrorCodes, ServiceResult


def error_response(result: ServiceResult) -> Response:
    """Render a failed ServiceResult as ``{"error", "message"}`` with its mapped HTTP status."""
    return Response(result.to_dict(), status=ErrorCodes.status_for(result.error))
