from __future__ import annotations

import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from structlog.contextvars import bound_contextvars

from ..observability.logging import get_logger

REQUEST_ID_HEADER = "X-Request-Id"


class RequestLogMiddleware(BaseHTTPMiddleware):
    """
    Tags each request with an id and writes one access log line for it.

    The id comes from an inbound X-Request-Id or is a fresh UUIDv4. It is
    kept on request.state for error bodies, bound into structlog's context
    for every log line emitted while the request runs, and echoed back on the
    response. Paths in ``quiet_paths`` get an id but no access log line.
    """

    def __init__(self, app, *, quiet_paths: set[str] | None = None):
        super().__init__(app)
        self._quiet = quiet_paths or set()
        self._log = get_logger("access")

    async def dispatch(self, request: Request, call_next):
        inbound = (request.headers.get("x-request-id") or "").strip()
        request_id = inbound or str(uuid.uuid4())
        request.state.request_id = request_id

        with bound_contextvars(request_id=request_id):
            start = time.perf_counter()
            try:
                response = await call_next(request)
            except Exception:
                self._log.exception("request_error", **self._fields(request, start))
                raise

            response.headers[REQUEST_ID_HEADER] = request_id
            if request.url.path not in self._quiet:
                self._log.info("request", status_code=response.status_code, **self._fields(request, start))
            return response

    @staticmethod
    def _fields(request: Request, start: float) -> dict[str, object]:
        return {
            "http_method": request.method,
            "path": request.url.path,
            "duration_ms": round((time.perf_counter() - start) * 1000.0, 2),
            "client_ip": request.client.host if request.client else None,
        }
