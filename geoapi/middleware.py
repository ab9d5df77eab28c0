import time
import uuid
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
import logging
from .config import ACCESS_LOG_ENABLED
from .logging_config import trace_id_var

logger = logging.getLogger("geoapi.access")


class TracingMiddleware(BaseHTTPMiddleware):
    """Request ID propagation and one access log line per request"""

    def __init__(self, app: ASGIApp, access_log: bool = ACCESS_LOG_ENABLED):
        super().__init__(app)
        self.access_log = access_log

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Generate or reuse trace ID
        trace_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = trace_id_var.set(trace_id)

        client_ip = request.client.host if request.client else "unknown"
        start_time = time.time()

        try:
            response = await call_next(request)

            latency_ms = round((time.time() - start_time) * 1000, 2)
            self._log_request(
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                latency_ms=latency_ms,
                client_ip=client_ip,
            )

            response.headers["X-Request-ID"] = trace_id
            return response

        except Exception as e:
            latency_ms = round((time.time() - start_time) * 1000, 2)
            logger.error(f"Request failed: {e}", extra={
                "method": request.method,
                "path": request.url.path,
                "status": 500,
                "latency_ms": latency_ms,
                "client_ip": client_ip,
            })
            raise
        finally:
            trace_id_var.reset(token)

    def _log_request(self, method: str, path: str, status: int, latency_ms: float,
                     client_ip: str):
        if not self.access_log:
            return

        if status >= 500:
            level = logging.ERROR
        elif status >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO

        logger.log(level, "%s %s %d %.2fms", method, path, status, latency_ms, extra={
            "method": method,
            "path": path,
            "status": status,
            "latency_ms": latency_ms,
            "client_ip": client_ip,
        })
