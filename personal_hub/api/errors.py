from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from personal_hub.core.errors import HubError

_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


def validation_details(errors: list[dict]) -> dict[str, list[str]]:
    details: dict[str, list[str]] = {}
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if str(part) not in _LOCATION_PREFIXES]
        field = ".".join(loc) or "_root"
        message = str(err.get("msg", "Invalid value"))
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        details.setdefault(field, []).append(message)
    return details


async def _handle_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = validation_details(list(exc.errors()))
    logger.info("Validation failed path={} fields={}", request.url.path, sorted(details))
    return JSONResponse(status_code=400, content={"error": "Invalid input", "details": details})


async def _handle_hub_error(request: Request, exc: HubError) -> JSONResponse:
    body: dict = {"error": exc.message}
    if exc.details:
        body["details"] = exc.details
    if exc.status_code >= 500:
        logger.error("Request failed path={} err={}", request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=body)


async def _handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error path={} method={}", request.url.path, request.method)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _handle_validation)
    app.add_exception_handler(HubError, _handle_hub_error)
    app.add_exception_handler(StarletteHTTPException, _handle_http_error)
    app.add_exception_handler(Exception, _handle_unexpected)
