from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from pinstore.exceptions import PinStoreError

logger = logging.getLogger(__name__)


def error_response(
    status: int, error: str, details: object = None, headers: dict[str, str] | None = None
) -> JSONResponse:
    content: dict[str, object] = {"error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status, content=jsonable_encoder(content), headers=headers)


def register_error_handlers(app: FastAPI) -> None:
    """Map service errors, request validation and HTTP errors to ``{"error", "details"}`` JSON."""

    @app.exception_handler(PinStoreError)
    async def _handle_service_error(request: Request, exc: PinStoreError):
        level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
        logger.log(
            level,
            "%s on %s %s (%s): %s",
            type(exc).__name__, request.method, request.url.path, exc.status_code, exc.message,
            extra={"http_method": request.method, "path": request.url.path, "status_code": exc.status_code},
        )
        return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_payload()))

    @app.exception_handler(RequestValidationError)
    async def _handle_validation(request: Request, exc: RequestValidationError):
        logger.warning("Invalid request on %s: %s", request.url.path, exc.errors())
        return error_response(400, "Invalid request body", exc.errors())

    @app.exception_handler(StarletteHTTPException)
    async def _handle_http(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))
