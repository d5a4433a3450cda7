from datetime import datetime, timezone

from passlib.context import CryptContext
from sqlalchemy.orm import Session

from todoay import schemas
from todoay.auth.jwt import REFRESH, create_access_token, create_refresh_token, decode_token
from todoay.exceptions import (
    AccountNotFound,
    AuthenticationFailed,
    AuthenticationRequired,
    DuplicateAccount,
    DuplicateNickname,
)
from todoay.logging_config import get_logger
from todoay.models import Account, AccountStatus, Role
from todoay.profile.service import get_account_by_email, get_active_account, nickname_taken
from todoay.validation import (
    normalize_email,
    raise_for_violations,
    validate_login,
    validate_password_update,
    validate_signup,
)

logger = get_logger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def save(db: Session, request: schemas.SignupRequest) -> Account:
    """Create an account; the nickname is reserved in the same transaction."""
    raise_for_violations(validate_signup(request))

    if get_account_by_email(db, request.email) is not None:
        raise DuplicateAccount("Email already registered")
    if nickname_taken(db, request.nickname):
        raise DuplicateNickname("Nickname is already in use")

    account = Account(
        email=normalize_email(request.email),
        hashed_password=hash_password(request.password),
        nickname=request.nickname,
        role=Role.USER,
        status=AccountStatus.ACTIVE,
    )
    db.add(account)
    # A concurrent signup that slipped past the checks fails here on the
    # unique columns and surfaces as StorageIntegrityViolation.
    db.commit()
    db.refresh(account)
    logger.info("Account created", extra={"account_id": account.id, "login_id": account.email})
    return account


def login(db: Session, request: schemas.LoginRequest) -> Account:
    raise_for_violations(validate_login(request))

    account = get_active_account(db, request.email)
    # Unknown email, deleted account and wrong password look the same
    if account is None or not verify_password(request.password, account.hashed_password):
        raise AuthenticationFailed("Email or password does not match")

    logger.info("Account logged in", extra={"account_id": account.id})
    return account


def issue_tokens(login_id: str) -> schemas.TokenResponse:
    return schemas.TokenResponse(
        access_token=create_access_token(login_id),
        refresh_token=create_refresh_token(login_id),
    )


def refresh(db: Session, request: schemas.RefreshRequest) -> schemas.TokenResponse:
    """Mint a new token pair from a refresh token whose subject is still active."""
    claims = decode_token(request.refresh_token, expected_type=REFRESH)
    login_id = claims["sub"]
    if get_active_account(db, login_id) is None:
        raise AuthenticationRequired("Account is not active")
    return issue_tokens(login_id)


def _require_active(db: Session, login_id: str) -> Account:
    account = get_active_account(db, login_id)
    if account is None:
        raise AccountNotFound("Account not found")
    return account


def update_auth_password(db: Session, login_id: str, request: schemas.PasswordUpdateRequest) -> None:
    raise_for_violations(validate_password_update(request))
    account = _require_active(db, login_id)

    account.hashed_password = hash_password(request.new_password)
    db.commit()
    logger.info("Password changed", extra={"account_id": account.id})


def delete_auth(db: Session, login_id: str) -> None:
    """Soft-delete the account. A second call raises AccountNotFound."""
    account = _require_active(db, login_id)

    account.status = AccountStatus.DELETED
    account.deleted_at = datetime.now(tz=timezone.utc)
    db.commit()
    logger.info("Account deleted", extra={"account_id": account.id})
