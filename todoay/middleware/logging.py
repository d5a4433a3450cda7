"""Access log: one line when a request arrives, one when it leaves."""
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from todoay.logging_config import get_logger
from todoay.middleware.correlation import get_request_id

logger = get_logger("todoay.access")


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        context = {
            "request_id": get_request_id(),
            "method": request.method,
            "path": request.url.path,
        }
        logger.info("Request started", extra=context)

        response = await call_next(request)

        # Set by SecurityMiddleware on protected paths.
        login_id = getattr(request.state, "login_id", None)
        logger.info(
            "Request finished",
            extra={
                **context,
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                "login_id": login_id,
            },
        )
        return response
