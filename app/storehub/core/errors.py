import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.storehub.core.config import settings
from app.storehub.core.error_catalog import AppError, ErrorCatalog, ErrorDefinition

logger = logging.getLogger(__name__)

_HTTP_STATUS_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
}


def _set_error_context(request: Request, code: str, exc: Exception | None = None) -> None:
    request.state.error_code = code
    if exc is not None:
        request.state.error_class = exc.__class__.__name__


def _trace_id(request: Request) -> str:
    return getattr(request.state, "trace_id", "")


def _validation_error_details(exc: RequestValidationError) -> dict:
    errors = []
    for error in exc.errors():
        loc = list(error.get("loc", []))
        field = ".".join(str(item) for item in loc if item not in {"body", "query", "path", "header"}) or None
        errors.append(
            {
                "field": field,
                "message": error.get("msg", "Invalid value"),
                "type": error.get("type", "validation_error"),
            }
        )
    return {"errors": errors}


def error_payload(code: str, message: str, details: object, trace_id: str) -> dict:
    return {
        "success": False,
        "code": code,
        "message": message,
        "details": details,
        "trace_id": trace_id,
    }


def error_response(code: str, message: str, details: object, trace_id: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error_payload(code, message, details, trace_id))


def catalog_response(
    request: Request,
    error: ErrorDefinition,
    details: object | None = None,
    message: str | None = None,
) -> JSONResponse:
    _set_error_context(request, error.code)
    return error_response(
        code=error.code,
        message=message or error.message,
        details=details,
        trace_id=_trace_id(request),
        status_code=error.status_code,
    )


def setup_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        _set_error_context(request, exc.error.code, exc)
        payload = error_payload(exc.error.code, exc.message, exc.details, _trace_id(request))
        return JSONResponse(status_code=exc.error.status_code, content=payload)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        code = _HTTP_STATUS_CODES.get(exc.status_code, "HTTP_ERROR")
        _set_error_context(request, code, exc)
        message = str(exc.detail) if exc.detail is not None else "HTTP error"
        payload = error_payload(code, message, None, _trace_id(request))
        return JSONResponse(status_code=exc.status_code, content=payload, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        _set_error_context(request, ErrorCatalog.VALIDATION_ERROR.code, exc)
        payload = error_payload(
            ErrorCatalog.VALIDATION_ERROR.code,
            ErrorCatalog.VALIDATION_ERROR.message,
            _validation_error_details(exc),
            _trace_id(request),
        )
        return JSONResponse(status_code=ErrorCatalog.VALIDATION_ERROR.status_code, content=payload)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        _set_error_context(request, ErrorCatalog.INTERNAL_ERROR.code, exc)
        logger.exception("Unhandled application error", extra={"trace_id": _trace_id(request)})
        details = {"type": exc.__class__.__name__, "message": str(exc)} if settings.DEBUG else None
        payload = error_payload(
            ErrorCatalog.INTERNAL_ERROR.code,
            ErrorCatalog.INTERNAL_ERROR.message,
            details,
            _trace_id(request),
        )
        return JSONResponse(status_code=ErrorCatalog.INTERNAL_ERROR.status_code, content=payload)
