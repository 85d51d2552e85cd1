"""Error Handlers: every failure leaves the API as the same localized JSON envelope.

Invariants:
    - Envelope: {"error": {code, message, category, severity, ...}}
    - message is localized: Accept-Language when supported, else the configured locale
    - CatalogSyncError keeps its code and HTTP status whatever the language
    - Client-side failures (< 500) log at WARNING, ours at ERROR with the entity ids
    - The catch-all never echoes exception text to the caller
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from catalog_sync.config import get_settings
from catalog_sync.core.domain_types import Locale
from catalog_sync.core.errors import CatalogSyncError, ErrorCategory, ErrorSeverity
from catalog_sync.core.message_strings import MessageKey, get_message, resolve_locale

logger = logging.getLogger(__name__)


def request_locale(request: Request) -> Locale:
    """First language tag of Accept-Language we have messages for."""
    for part in request.headers.get("accept-language", "").split(","):
        tag = part.split(";")[0].split("-")[0].strip().lower()
        if tag in {locale.value for locale in Locale}:
            return Locale(tag)
    return resolve_locale(get_settings().locale)


def _envelope(
    code: str, key: MessageKey, category: ErrorCategory,
    severity: ErrorSeverity, request: Request, **details,
) -> dict:
    return {
        "error": {
            "code": code,
            "message": get_message(key, request_locale(request)),
            "category": category.value,
            "severity": severity.value,
            **details,
        },
    }


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CatalogSyncError, catalog_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)


async def catalog_error_handler(request: Request, exc: CatalogSyncError) -> JSONResponse:
    level = logging.WARNING if exc.http_status < 500 else logging.ERROR
    logger.log(
        level, f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code, "path": request.url.path,
            "status_code": exc.http_status, **exc.context.as_log_extra(),
        },
    )
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_response(request_locale(request)),
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    fields = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    logger.warning(
        f"Invalid request on {request.url.path}: "
        + ", ".join(f["field"] for f in fields),
        extra={"path": request.url.path, "status_code": 400},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            "VALIDATION_ERROR", MessageKey.INVALID_REQUEST,
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR, request,
            details=fields,
        ),
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.url.path}: {exc}",
        exc_info=True,
        extra={"path": request.url.path, "status_code": 500},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            "INTERNAL_ERROR", MessageKey.UNEXPECTED,
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL, request,
        ),
    )
