"""Logging middleware for admission request tracking."""

import time
from typing import Callable, Iterable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from storageaccessor.core.logging import get_logger, log_event

logger = get_logger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs every request; probe and scrape paths are logged at debug."""

    def __init__(self, app, quiet_paths: Iterable[str] = ()):
        super().__init__(app)
        self.quiet_paths = frozenset(quiet_paths)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Log request and response information."""
        start_time = time.time()
        level = "debug" if request.url.path in self.quiet_paths else "info"

        request_info = {
            "method": request.method,
            "path": request.url.path,
            "content_type": request.headers.get("content-type"),
            "client_host": request.client.host if request.client else None,
        }

        request_id = request.headers.get("x-request-id")
        if request_id:
            request_info["request_id"] = request_id

        log_event(logger, level, "request_started", **request_info)

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.time() - start_time
            log_event(
                logger,
                "error",
                "request_failed",
                error=str(e),
                error_type=type(e).__name__,
                duration_seconds=duration,
                **request_info,
            )
            raise

        duration = time.time() - start_time
        log_event(
            logger,
            "warning" if response.status_code >= 400 else level,
            "request_completed",
            status_code=response.status_code,
            duration_seconds=duration,
            **request_info,
        )

        response.headers["X-Process-Time"] = str(duration)
        return response
