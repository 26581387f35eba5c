"""
Process lifecycle for the server entry points.

Opens the store handle when the WSGI/ASGI application is built and closes it
at interpreter shutdown. Tracing is installed here too so it is active before
the first request.
"""

import atexit
import logging

from django.conf import settings

from infrastructure.container import container
from utils.tracing import setup_tracing

logger = logging.getLogger(__name__)

_started = False


def start() -> None:
    global _started
    if _started:
        return

    setup_tracing(
        service_name="bazaar-backend",
        enable=getattr(settings, "TRACING_ENABLED", False),
        console_export=getattr(settings, "TRACING_CONSOLE_EXPORT", False),
    )

    store = container.store()
    store.open()
    atexit.register(stop)
    _started = True
    logger.info("Bazaar backend started")


def stop() -> None:
    global _started
    container.store().close()
    _started = False
    logger.info("Bazaar backend stopped")
