"""Single place where exceptions become HTTP error responses."""
import traceback
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from todoay.exceptions import (
    AppException,
    FieldViolation,
    HttpError,
    StorageIntegrityViolation,
    ValidationError,
)
from todoay.logging_config import get_logger
from todoay.middleware.correlation import get_request_id

logger = get_logger("todoay.errors")


def error_response(request: Request, exc: AppException) -> JSONResponse:
    content = {
        "error": {
            "code": exc.error_code,
            "message": exc.message,
            "details": exc.details,
        },
        "path": request.url.path,
        "timestamp": datetime.now(tz=timezone.utc).isoformat(),
        "requestId": get_request_id(),
    }
    if isinstance(exc, ValidationError):
        content["errors"] = [violation.as_dict() for violation in exc.violations]
    return JSONResponse(status_code=exc.status_code, content=content)


def _violations_from_request_error(exc: RequestValidationError) -> list[FieldViolation]:
    violations = []
    for error in exc.errors():
        # loc looks like ("body", "email"); a missing body is just ("body",)
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        violations.append(FieldViolation(
            field=".".join(location) or "body",
            code=str(error.get("type", "invalid")).upper(),
            message=error.get("msg", "Invalid value"),
        ))
    return violations


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    app_exc = ValidationError(_violations_from_request_error(exc), message="Request body is invalid")
    logger.info(
        "Request rejected",
        extra={"request_id": get_request_id(), "error_code": app_exc.error_code, "path": request.url.path},
    )
    return error_response(request, app_exc)


_HTTP_ERROR_CODES = {
    401: "AUTHENTICATION_REQUIRED",
    403: "ACCESS_DENIED",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    app_exc = HttpError(
        exc.status_code,
        _HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
        str(exc.detail),
    )
    response = error_response(request, app_exc)
    # e.g. Allow on 405
    if exc.headers:
        response.headers.update(exc.headers)
    return response


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except AppException as exc:
            return self._handled(request, exc)
        except IntegrityError as exc:
            logger.warning(
                "Storage constraint violated",
                extra={"request_id": get_request_id(), "detail": str(exc.orig)},
            )
            return self._handled(
                request, StorageIntegrityViolation("A uniqueness or integrity constraint was violated")
            )
        except Exception as exc:
            logger.error(
                "Unhandled exception",
                extra={
                    "request_id": get_request_id(),
                    "exc_type": type(exc).__name__,
                    "traceback": traceback.format_exc(),
                },
            )
            return error_response(request, AppException("An unexpected error occurred"))

    @staticmethod
    def _handled(request: Request, exc: AppException) -> JSONResponse:
        logger.warning(
            "Application error",
            extra={
                "request_id": get_request_id(),
                "error_code": exc.error_code,
                "status_code": exc.status_code,
                "path": request.url.path,
                "detail": exc.message,
            },
        )
        return error_response(request, exc)
