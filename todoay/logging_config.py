import json
import logging
from contextvars import ContextVar, Token
from datetime import datetime, timezone

# Attributes every LogRecord carries; anything else came in through ``extra=``.
_RESERVED_ATTRS = frozenset({
    "args", "asctime", "created", "exc_info", "exc_text", "filename",
    "funcName", "levelname", "levelno", "lineno", "message", "module",
    "msecs", "msg", "name", "pathname", "process", "processName",
    "relativeCreated", "stack_info", "thread", "threadName", "taskName",
})

# Extras that must never reach a log sink in clear text.
REDACTED_KEYS = frozenset({
    "password", "new_password", "hashed_password",
    "access_token", "refresh_token", "authorization",
})
REDACTED = "***"

_request_id: ContextVar[str] = ContextVar("request_id", default="")
_login_id: ContextVar[str | None] = ContextVar("login_id", default=None)


def current_request_id() -> str:
    return _request_id.get()


def current_login_id() -> str | None:
    return _login_id.get()


def bind_request_id(request_id: str) -> Token:
    return _request_id.set(request_id)


def reset_request_id(token: Token) -> None:
    _request_id.reset(token)


def bind_login_id(login_id: str | None) -> Token:
    return _login_id.set(login_id)


def reset_login_id(token: Token) -> None:
    _login_id.reset(token)


class RequestContextFilter(logging.Filter):
    """Stamp the request id and authenticated login id on every record.

    Values passed explicitly through ``extra=`` win over the context.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "request_id", None):
            record.request_id = _request_id.get() or None
        if not getattr(record, "login_id", None):
            record.login_id = _login_id.get()
        return True


class JsonFormatter(logging.Formatter):
    """Render each record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS:
                continue
            payload[key] = REDACTED if key.lower() in REDACTED_KEYS else value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def setup_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    handler.addFilter(RequestContextFilter())
    logging.basicConfig(level=level.upper(), handlers=[handler], force=True)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
