"""
AdoptMe Backend - Middleware Package
=====================================

Middleware chain (outermost first):
    Request → [Request ID] → [Access Log] → [GZip] → [CORS] → Route Handler

The request id is assigned before the access log runs, so the access line
and every log record emitted while handling the request share it.
"""

from adoptme.middleware.logging import RequestLoggingMiddleware, level_for_status
from adoptme.middleware.request_id import RequestIDFilter, RequestIDMiddleware, request_id_var

__all__ = [
    "RequestIDFilter",
    "RequestIDMiddleware",
    "RequestLoggingMiddleware",
    "level_for_status",
    "request_id_var",
]
