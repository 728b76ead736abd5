"""Error types and the handlers that turn them into JSON envelopes"""
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from zenovia.utils.logger import logger


class APIError(Exception):
    """An error with a client-facing status code and message"""

    def __init__(self, status_code: int, message: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.headers = headers


def error_response(
    status_code: int,
    message: str,
    headers: Optional[Dict[str, str]] = None,
    **payload: Any,
) -> JSONResponse:
    """Build the ``{"success": false, "message": ...}`` envelope"""
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, **payload},
        headers=headers,
    )


def _validation_errors(exc: RequestValidationError) -> List[Dict[str, str]]:
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        errors.append({"field": ".".join(location), "message": error.get("msg", "")})
    return errors


def register_error_handlers(app: FastAPI) -> None:
    """Attach the not-found, API, validation and catch-all handlers"""
    development = app.state.context.settings.is_development

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        return error_response(exc.status_code, exc.message, headers=exc.headers)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
            return error_response(404, f"Not Found - {request.url.path}")
        return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            "Validation failed",
            errors=_validation_errors(exc),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler for uncaught errors"""
        logger.error(
            f"Unhandled exception: {exc}",
            extra={"path": request.url.path, "method": request.method},
            exc_info=True,
        )
        extra = {"error": str(exc)} if development else {}
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error", **extra)
