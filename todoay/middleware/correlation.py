"""Request correlation: every log line of a request carries the same id."""
import re
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from todoay.logging_config import bind_request_id, current_request_id, reset_request_id

REQUEST_ID_HEADER = "X-Request-ID"

# Client ids are echoed into headers and logs, so only short plain tokens pass.
_ACCEPTED_REQUEST_ID = re.compile(r"[A-Za-z0-9._-]{1,64}")


def get_request_id() -> str:
    return current_request_id()


def resolve_request_id(supplied: str | None) -> str:
    if supplied and _ACCEPTED_REQUEST_ID.fullmatch(supplied):
        return supplied
    return uuid.uuid4().hex


class CorrelationMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        reset_token = bind_request_id(request_id)
        try:
            response = await call_next(request)
        finally:
            reset_request_id(reset_token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
