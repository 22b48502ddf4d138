"""
HTTP middleware for the relay.

Provides:
- Plain-text 404 for unknown paths and unsupported methods
- Plain-text 500 (with logged traceback) for unexpected handler errors
- Debug-level request logging
"""

import time
from typing import Callable

from aiohttp import web

from mjpeg_relay.core.logging_utils import get_module_logger


logger = get_module_logger("HTTP")

NOT_FOUND_TEXT = "Page not found"


@web.middleware
async def request_logging_middleware(request: web.Request, handler: Callable) -> web.StreamResponse:
    """Log method, path, status and timing of every request at DEBUG."""
    start_time = time.perf_counter()
    response = await handler(request)
    elapsed_ms = (time.perf_counter() - start_time) * 1000
    logger.debug("%s %s -> %d (%.1f ms)", request.method, request.path, response.status, elapsed_ms)
    return response


@web.middleware
async def error_handling_middleware(request: web.Request, handler: Callable) -> web.StreamResponse:
    try:
        return await handler(request)
    except (web.HTTPNotFound, web.HTTPMethodNotAllowed):
        return web.Response(status=404, text=NOT_FOUND_TEXT, content_type="text/plain")
    except web.HTTPException:
        raise
    except Exception as e:
        logger.error("Unexpected error on %s %s: %s", request.method, request.path, e, exc_info=True)
        return web.Response(status=500, text="Internal server error", content_type="text/plain")
