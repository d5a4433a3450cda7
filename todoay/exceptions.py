from dataclasses import dataclass


@dataclass(frozen=True)
class FieldViolation:
    field: str
    code: str
    message: str

    def as_dict(self) -> dict:
        return {"field": self.field, "code": self.code, "message": self.message}


class AppException(Exception):
    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(AppException):
    """One or more request fields broke their format rules."""

    status_code = 400
    error_code = "VALIDATION_ERROR"

    def __init__(self, violations: list[FieldViolation], message: str = "Invalid request fields"):
        self.violations = list(violations)
        super().__init__(message)


class AuthenticationFailed(AppException):
    status_code = 400
    error_code = "AUTHENTICATION_FAILED"


# --- conflicts ---

class DuplicateNickname(AppException):
    status_code = 400
    error_code = "DUPLICATE_NICKNAME"


class DuplicateAccount(AppException):
    status_code = 409
    error_code = "DUPLICATE_ACCOUNT"


class DuplicateCategory(AppException):
    status_code = 409
    error_code = "DUPLICATE_CATEGORY"


class StorageIntegrityViolation(AppException):
    status_code = 409
    error_code = "SQL_INTEGRITY_CONSTRAINT_VIOLATION"


# --- credentials ---

class AuthError(AppException):
    status_code = 401
    error_code = "AUTH_ERROR"


class AuthenticationRequired(AuthError):
    error_code = "AUTHENTICATION_REQUIRED"


class JwtExpired(AuthError):
    error_code = "JWT_EXPIRED"


class JwtMalformed(AuthError):
    error_code = "JWT_MALFORMED"


class JwtNotVerified(AuthError):
    error_code = "JWT_NOT_VERIFIED"


class JwtUnsupported(AuthError):
    error_code = "JWT_UNSUPPORTED"


class AccessDenied(AppException):
    status_code = 403
    error_code = "ACCESS_DENIED"


class AccountNotFound(AppException):
    status_code = 404
    error_code = "ACCOUNT_NOT_FOUND"


class HttpError(AppException):
    """A framework-level HTTP failure (unknown route, wrong method, ...)."""

    def __init__(self, status_code: int, error_code: str, message: str):
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(message)
