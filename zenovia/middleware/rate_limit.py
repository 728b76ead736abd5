"""Global per-IP rate limiting"""
from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import _find_route_handler, sync_check_limits
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from zenovia.config import Settings
from zenovia.utils.logger import logger

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."


def create_limiter(settings: Settings) -> Limiter:
    """Build a limiter applying ``settings.rate_limit`` across the whole API.

    Application limits share one counter per client IP for every route,
    where default limits would count each route separately.  Each
    application gets its own limiter, so counters in ``memory://`` storage
    are never shared between instances.
    """
    return Limiter(
        key_func=get_remote_address,
        application_limits=[settings.rate_limit],
        storage_uri=settings.RATE_LIMIT_STORAGE_URI,
        strategy="moving-window",
        headers_enabled=True,
        enabled=settings.RATE_LIMIT_ENABLED,
    )


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Answer 429 with the standard envelope and rate limit headers.

    Kept synchronous: slowapi's ``sync_check_limits`` calls it without awaiting.
    """
    logger.warning(
        "Rate limit exceeded",
        extra={
            "path": request.url.path,
            "method": request.method,
            "client": get_remote_address(request),
        },
    )
    response = JSONResponse(
        status_code=429,
        content={"success": False, "message": RATE_LIMIT_MESSAGE},
    )
    return request.app.state.limiter._inject_headers(response, request.state.view_rate_limit)


class GlobalRateLimitMiddleware(BaseHTTPMiddleware):
    """Charge every request against the application limits.

    Same flow as ``SlowAPIMiddleware``, except that requests matching no
    route endpoint (unknown paths, the static ``/uploads`` mount) are
    counted rather than let through.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        app = request.app
        limiter: Limiter = app.state.limiter
        if not limiter.enabled:
            return await call_next(request)

        handler = _find_route_handler(app.routes, request.scope)
        error_response, inject_headers = sync_check_limits(limiter, request, handler, app)
        if error_response is not None:
            return error_response

        response = await call_next(request)
        if inject_headers:
            response = limiter._inject_headers(response, request.state.view_rate_limit)
        return response
