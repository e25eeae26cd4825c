"""Exception handlers for the comparison API.

Converts ApiError subclasses and request validation failures into
{"error": ...} JSON responses.
"""

from typing import List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from compare_api.config import config
from compare_api.core.errors import ApiError, UpstreamFailure
from compare_api.core.logging import logger


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Render an ApiError with its status code and headers."""
    content = exc.to_dict()
    if isinstance(exc, UpstreamFailure):
        logger.error(
            "upstream_failure",
            operation=exc.operation,
            error=exc.detail,
            path=request.url.path,
        )
        content["error"] = exc.public_message(config.expose_upstream_errors())

    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers or None)


def _format_validation_errors(exc: RequestValidationError) -> List[str]:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "Invalid value")
        messages.append(f"{location}: {message}" if location else message)
    return messages


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Request parameters that do not parse are client errors (400, not 422)."""
    errors = _format_validation_errors(exc)
    logger.info("request_validation_failed", path=request.url.path, errors=errors)
    return JSONResponse(status_code=400, content={"error": "Invalid request", "errors": errors})


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the app."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
