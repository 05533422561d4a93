"""Request logging middleware."""

import logging
import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("deckmodel.api")

REQUEST_ID_HEADER = "X-Request-ID"


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request with its status, duration and payload sizes.

    Uploads and exports are whole files, so the request and response
    Content-Length are part of the log line. Every response carries an
    ``X-Request-ID`` header, reusing the caller's ID when one was sent.
    """

    def __init__(self, app, exclude_paths: list[str] | None = None):
        super().__init__(app)
        self.exclude_paths = tuple(exclude_paths or ["/health"])

    async def dispatch(self, request: Request, call_next) -> Response:
        """Process request with logging."""
        if request.url.path.startswith(self.exclude_paths):
            return await call_next(request)

        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        summary = f"[{request_id}] {request.method} {request.url.path}"
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(f"{summary} failed after {self._elapsed_ms(started):.1f}ms: {e}")
            raise

        sent = request.headers.get("Content-Length", "0")
        received = response.headers.get("Content-Length", "?")
        logger.log(
            _level_for(response.status_code),
            f"{summary} -> {response.status_code} in {self._elapsed_ms(started):.1f}ms "
            f"(in {sent} B, out {received} B, client {self._client_ip(request)})",
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return (time.perf_counter() - started) * 1000

    @staticmethod
    def _client_ip(request: Request) -> str:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"
