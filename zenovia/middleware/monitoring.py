"""Access logging and request metrics"""
import time
import uuid
from datetime import datetime, timezone
from typing import Callable

from fastapi import Request, Response
from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware

from zenovia.utils.logger import logger

# ===== Prometheus Metrics =====

http_requests_total = Counter(
    "zenovia_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"]
)

http_request_duration_seconds = Histogram(
    "zenovia_http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"]
)

http_errors_total = Counter(
    "zenovia_http_errors_total",
    "Total HTTP errors",
    ["method", "endpoint", "status"]
)


def _endpoint_label(request: Request) -> str:
    """Route template rather than raw path, to keep label cardinality bounded"""
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


def format_dev(request: Request, status: int, duration: float, length: str) -> str:
    """``GET /health 200 1.234 ms - 57``"""
    return f"{request.method} {request.url.path} {status} {duration * 1000:.3f} ms - {length}"


def format_combined(request: Request, status: int, length: str) -> str:
    """Apache combined log format"""
    client = request.client.host if request.client else "-"
    timestamp = datetime.now(timezone.utc).strftime("%d/%b/%Y:%H:%M:%S +0000")
    target = request.url.path + (f"?{request.url.query}" if request.url.query else "")
    version = request.scope.get("http_version", "1.1")
    referrer = request.headers.get("referer", "-")
    agent = request.headers.get("user-agent", "-")
    return (
        f'{client} - - [{timestamp}] "{request.method} {target} HTTP/{version}" '
        f'{status} {length} "{referrer}" "{agent}"'
    )


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Log one line per request and collect request metrics"""

    def __init__(self, app, log_format: str = "combined") -> None:
        super().__init__(app)
        self.log_format = log_format

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        method = request.method

        request_id = request.headers.get("x-request-id") or f"req_{uuid.uuid4().hex[:16]}"
        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.perf_counter() - start_time
            http_errors_total.labels(method=method, endpoint=_endpoint_label(request), status=500).inc()
            logger.error(
                f"Request failed: {method} {request.url.path}",
                extra={
                    "request_id": request_id,
                    "method": method,
                    "path": request.url.path,
                    "duration_ms": round(duration * 1000, 3),
                },
                exc_info=True,
            )
            raise

        duration = time.perf_counter() - start_time
        status = response.status_code
        endpoint = _endpoint_label(request)

        http_requests_total.labels(method=method, endpoint=endpoint, status=status).inc()
        http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)
        if status >= 400:
            http_errors_total.labels(method=method, endpoint=endpoint, status=status).inc()

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration * 1000:.3f}ms"

        length = response.headers.get("content-length", "-")
        if self.log_format == "dev":
            line = format_dev(request, status, duration, length)
        else:
            line = format_combined(request, status, length)
        logger.info(
            line,
            extra={
                "request_id": request_id,
                "method": method,
                "path": request.url.path,
                "status": status,
                "duration_ms": round(duration * 1000, 3),
            },
        )
        return response
