"""Application middleware implementations."""

from __future__ import annotations

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .context import REQUEST_ID_HEADER, bind_request_id, reset_request_id

logger = logging.getLogger(__name__)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Attach a correlation identifier to each request/response cycle.

    Every handled request is also logged once with its method, path, client
    address, user agent, status and duration.
    """

    def __init__(self, app, header_name: str = REQUEST_ID_HEADER):  # type: ignore[override]
        super().__init__(app)
        self._header_name = header_name

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        request_id = request.headers.get(self._header_name) or self._generate_request_id()
        token = bind_request_id(request_id)
        request.state.request_id = request_id
        started = time.perf_counter()
        try:
            response = await call_next(request)
            logger.info(
                "Request handled",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "client": request.client.host if request.client else None,
                    "user_agent": request.headers.get("user-agent"),
                    "status_code": response.status_code,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )
        finally:
            reset_request_id(token)
        response.headers.setdefault(self._header_name, request_id)
        return response

    @staticmethod
    def _generate_request_id() -> str:
        return str(uuid.uuid4())


__all__ = ["CorrelationIdMiddleware"]
