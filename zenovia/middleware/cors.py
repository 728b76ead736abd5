"""CORS origin policies and the middleware that enforces them"""
from typing import Iterable, Sequence

from starlette.datastructures import Headers
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from zenovia.config import Settings
from zenovia.utils.logger import logger

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]
CORS_HEADERS = ["Content-Type", "Authorization", "X-Requested-With"]

# Substrings that mark a local, emulator or Expo origin
DEVELOPMENT_HOST_MARKERS = ("localhost", "127.0.0.1", "10.0.2.2")
EXPO_SCHEME = "exp://"


class AllowListOriginPolicy:
    """Allow origins that exactly match a configured entry"""

    def __init__(self, origins: Iterable[str]) -> None:
        self.origins = frozenset(origins)

    def allows(self, origin: str) -> bool:
        return origin in self.origins


class DevelopmentOriginPolicy(AllowListOriginPolicy):
    """Allow-list plus any local, emulator or Expo origin"""

    def __init__(
        self,
        origins: Iterable[str],
        host_markers: Sequence[str] = DEVELOPMENT_HOST_MARKERS,
    ) -> None:
        super().__init__(origins)
        self.host_markers = tuple(host_markers)

    def allows(self, origin: str) -> bool:
        if origin.startswith(EXPO_SCHEME):
            return True
        if any(marker in origin for marker in self.host_markers):
            return True
        return super().allows(origin)


def build_origin_policy(settings: Settings) -> AllowListOriginPolicy:
    if settings.is_development:
        return DevelopmentOriginPolicy(settings.cors_origins_list)
    return AllowListOriginPolicy(settings.cors_origins_list)


class OriginPolicyCORSMiddleware(CORSMiddleware):
    """Starlette's CORS handling with a pluggable origin decision.

    Requests without an ``Origin`` header pass straight through.  A request
    from a rejected origin is answered 403 before it reaches the app.
    """

    def __init__(self, app: ASGIApp, policy: AllowListOriginPolicy) -> None:
        super().__init__(
            app,
            allow_origins=(),
            allow_methods=CORS_METHODS,
            allow_headers=CORS_HEADERS,
            allow_credentials=True,
        )
        self.policy = policy

    def is_allowed_origin(self, origin: str) -> bool:
        return self.policy.allows(origin)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            origin = Headers(scope=scope).get("origin")
            if origin is not None and not self.is_allowed_origin(origin):
                logger.warning(
                    "Not allowed by CORS",
                    extra={"origin": origin, "path": scope.get("path")},
                )
                response = JSONResponse(
                    status_code=403,
                    content={"success": False, "message": "Not allowed by CORS"},
                )
                await response(scope, receive, send)
                return
        await super().__call__(scope, receive, send)
