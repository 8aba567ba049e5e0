"""
AdoptMe Backend - Access Log Middleware
========================================

What:  One access-log line per HTTP request: method, path, status, duration,
       request id and client address.
How:   Written to the `adoptme.access` logger. `setup_logging()` sends that
       logger to stdout and, in production, also to LOG_DIR/access.log.
When:  Inside RequestIDMiddleware so the request id is already set.

Level by status class:
    5xx → ERROR, 4xx → WARNING, everything else → INFO

Never logged: request bodies (passwords, uploads) and cookies.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from adoptme.middleware.request_id import request_id_var

logger = logging.getLogger("adoptme.access")

# Probed by orchestrators every few seconds
QUIET_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        rid = request_id_var.get("")
        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
