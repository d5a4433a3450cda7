"""Field validators for incoming requests.

Each ``check_*`` function inspects one value and returns the violations it
found (empty when the value is fine). The ``validate_*`` functions combine them
per request type; services call those first and raise
:class:`~todoay.exceptions.ValidationError` when anything comes back.
"""
import re

from email_validator import EmailNotValidError, validate_email

from todoay import schemas
from todoay.exceptions import FieldViolation, ValidationError

EMAIL_MAX_LENGTH = 255

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 20
# bcrypt ignores everything past this many bytes.
PASSWORD_MAX_BYTES = 72
_PASSWORD_LETTER = re.compile(r"[A-Za-z]")
_PASSWORD_DIGIT = re.compile(r"\d")
_PASSWORD_SPECIAL = re.compile(r"[^A-Za-z\d\s]")

# Letters (Hangul included), digits and underscore.
_NICKNAME = re.compile(r"\w{2,10}")

CATEGORY_NAME_MAX_LENGTH = 20
_CATEGORY_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


def check_email(value: str, field: str = "email") -> list[FieldViolation]:
    if not value:
        return [FieldViolation(field, "REQUIRED", "Email is required")]
    if len(value) > EMAIL_MAX_LENGTH:
        return [FieldViolation(field, "TOO_LONG", f"Email must be at most {EMAIL_MAX_LENGTH} characters")]
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return [FieldViolation(field, "INVALID_EMAIL", "Email address is not well formed")]
    return []


def normalize_email(value: str) -> str:
    """Canonical login id: the normalized address, lower-cased."""
    try:
        return validate_email(value, check_deliverability=False).normalized.lower()
    except EmailNotValidError:
        return value.strip().lower()


def check_password(value: str, field: str = "password") -> list[FieldViolation]:
    if not value:
        return [FieldViolation(field, "REQUIRED", "Password is required")]
    if not PASSWORD_MIN_LENGTH <= len(value) <= PASSWORD_MAX_LENGTH:
        return [FieldViolation(
            field,
            "INVALID_LENGTH",
            f"Password must be {PASSWORD_MIN_LENGTH}-{PASSWORD_MAX_LENGTH} characters",
        )]
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        return [FieldViolation(
            field, "TOO_LONG", f"Password must be at most {PASSWORD_MAX_BYTES} bytes in UTF-8"
        )]
    if any(ch.isspace() for ch in value) or not (
        _PASSWORD_LETTER.search(value)
        and _PASSWORD_DIGIT.search(value)
        and _PASSWORD_SPECIAL.search(value)
    ):
        return [FieldViolation(
            field,
            "INVALID_PASSWORD",
            "Password needs a letter, a digit and a special character and no spaces",
        )]
    return []


def check_nickname(value: str, field: str = "nickname") -> list[FieldViolation]:
    if not value:
        return [FieldViolation(field, "REQUIRED", "Nickname is required")]
    if not _NICKNAME.fullmatch(value):
        return [FieldViolation(
            field,
            "INVALID_NICKNAME",
            "Nickname must be 2-10 letters, digits or underscores",
        )]
    return []


def check_category_name(value: str, field: str = "name") -> list[FieldViolation]:
    stripped = (value or "").strip()
    if not stripped:
        return [FieldViolation(field, "REQUIRED", "Category name is required")]
    if len(stripped) > CATEGORY_NAME_MAX_LENGTH:
        return [FieldViolation(
            field, "TOO_LONG", f"Category name must be at most {CATEGORY_NAME_MAX_LENGTH} characters"
        )]
    return []


def check_category_color(value: str, field: str = "color") -> list[FieldViolation]:
    if not value or not _CATEGORY_COLOR.fullmatch(value):
        return [FieldViolation(field, "INVALID_COLOR", "Color must look like #RRGGBB")]
    return []


def check_order_index(value: int | None, field: str = "orderIndex") -> list[FieldViolation]:
    if value is not None and value < 0:
        return [FieldViolation(field, "NEGATIVE", "Order index must not be negative")]
    return []


# --- per-request validators ---

def validate_signup(request: schemas.SignupRequest) -> list[FieldViolation]:
    return (
        check_email(request.email)
        + check_password(request.password)
        + check_nickname(request.nickname)
    )


def validate_login(request: schemas.LoginRequest) -> list[FieldViolation]:
    # Presence only; a malformed email just fails to match an account.
    violations = []
    if not request.email:
        violations.append(FieldViolation("email", "REQUIRED", "Email is required"))
    if not request.password:
        violations.append(FieldViolation("password", "REQUIRED", "Password is required"))
    return violations


def validate_password_update(request: schemas.PasswordUpdateRequest) -> list[FieldViolation]:
    return check_password(request.new_password, field="newPassword")


def validate_nickname_check(request: schemas.NicknameCheckRequest) -> list[FieldViolation]:
    return check_nickname(request.nickname)


def validate_category_save(request: schemas.CategorySaveRequest) -> list[FieldViolation]:
    return (
        check_category_name(request.name)
        + check_category_color(request.color)
        + check_order_index(request.order_index)
    )


def raise_for_violations(violations: list[FieldViolation]) -> None:
    if violations:
        raise ValidationError(violations)
