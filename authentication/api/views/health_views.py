"""
Health Check Endpoints

Kubernetes-compatible health probes for liveness and readiness checks.
"""

import logging

from django.http import JsonResponse

from infrastructure.container import container

logger = logging.getLogger(__name__)


def health_live(request):
    """
    Liveness probe: Is the process alive?

    **Always returns 200** unless the process is completely dead.
    """
    return JsonResponse({"status": "ok"}, status=200)


def health_ready(request):
    """
    Readiness probe: Can the service handle requests?

    Returns 200 when the store answers, 503 otherwise.
    """
    checks = {"database": check_database()}

    all_ok = all(checks.values())
    status_code = 200 if all_ok else 503

    return JsonResponse({"status": "ready" if all_ok else "not_ready", "checks": checks}, status=status_code)


def check_database():
    """True if the store handle can reach the database."""
    try:
        return container.store().ping()
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False
