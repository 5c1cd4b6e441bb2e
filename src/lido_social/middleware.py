import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from lido_social.context import principal_id_var, request_id_var

logger = logging.getLogger("lido_social.request")


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-Id") or f"req-{uuid.uuid4().hex[:12]}"
        principal_id = (request.headers.get("X-User-Id") or "").strip() or None

        req_token = request_id_var.set(request_id)
        principal_token = principal_id_var.set(principal_id)
        start = time.perf_counter()

        try:
            response = await call_next(request)
            latency_ms = max((time.perf_counter() - start) * 1000, 0.0)
            logger.info(
                "http_request_complete",
                extra={
                    "method": request.method,
                    "path": str(request.url.path),
                    "status_code": response.status_code,
                    "latency_ms": round(latency_ms, 3),
                },
            )
            response.headers["X-Request-Id"] = request_id
            return response
        finally:
            request_id_var.reset(req_token)
            principal_id_var.reset(principal_token)
