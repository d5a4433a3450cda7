from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from todoay.models import AccountStatus, Role


class CamelModel(BaseModel):
    """Snake-case attributes in Python, camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Request schemas ---
# Format rules live in todoay.validation; these only fix the JSON shape.

class SignupRequest(CamelModel):
    email: str
    password: str
    nickname: str


class LoginRequest(CamelModel):
    email: str
    password: str


class RefreshRequest(CamelModel):
    refresh_token: str


class PasswordUpdateRequest(CamelModel):
    new_password: str


class NicknameCheckRequest(CamelModel):
    nickname: str


class CategorySaveRequest(CamelModel):
    name: str
    color: str
    order_index: int | None = None


# --- Response schemas ---

class TokenResponse(CamelModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class ProfileResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    email: str
    nickname: str
    role: Role


class AccountSummary(ProfileResponse):
    status: AccountStatus


class CategoryCreatedResponse(CamelModel):
    id: int


class CategoryResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    color: str
    order_index: int


# --- Error schemas ---

class ErrorDetail(BaseModel):
    code: str
    message: str
    details: dict = Field(default_factory=dict)


class FieldError(BaseModel):
    field: str
    code: str
    message: str


class ErrorResponse(CamelModel):
    error: ErrorDetail
    path: str
    timestamp: str
    request_id: str


class ValidErrorResponse(ErrorResponse):
    errors: list[FieldError]
