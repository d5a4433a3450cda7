from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from todoay import schemas
from todoay.exceptions import AccountNotFound, AuthenticationRequired, DuplicateNickname
from todoay.logging_config import get_logger
from todoay.models import Account, AccountStatus, Role
from todoay.validation import normalize_email, raise_for_violations, validate_nickname_check

logger = get_logger(__name__)

# ADMIN may do anything a USER may.
ROLE_CAPABILITIES: dict[Role, frozenset[str]] = {
    Role.USER: frozenset({Role.USER.value}),
    Role.ADMIN: frozenset({Role.USER.value, Role.ADMIN.value}),
}


@dataclass(frozen=True)
class Principal:
    """The authenticated subject of the current request."""

    login_id: str
    roles: frozenset[str]


def get_account_by_email(db: Session, email: str) -> Account | None:
    return db.scalars(select(Account).where(Account.email == normalize_email(email))).first()


def get_active_account(db: Session, email: str) -> Account | None:
    account = get_account_by_email(db, email)
    if account is None or not account.is_active:
        return None
    return account


def nickname_taken(db: Session, nickname: str) -> bool:
    # Deleted accounts still hold their nickname.
    return db.scalars(select(Account.id).where(Account.nickname == nickname)).first() is not None


def nickname_duplicate_check(db: Session, request: schemas.NicknameCheckRequest) -> None:
    raise_for_violations(validate_nickname_check(request))
    if nickname_taken(db, request.nickname):
        raise DuplicateNickname("Nickname is already in use")


def load_principal(db: Session, login_id: str) -> Principal:
    """Resolve a token subject to a principal; deleted accounts do not resolve."""
    account = get_active_account(db, login_id)
    if account is None:
        logger.info("Token subject is not an active account", extra={"login_id": login_id})
        raise AuthenticationRequired("Account is not active")
    return Principal(login_id=account.email, roles=ROLE_CAPABILITIES[account.role])


def get_my_profile(db: Session, login_id: str) -> Account:
    account = get_active_account(db, login_id)
    if account is None:
        raise AccountNotFound("Account not found")
    return account


def list_accounts(db: Session, status: AccountStatus | None = None) -> list[Account]:
    query = select(Account).order_by(Account.id)
    if status is not None:
        query = query.where(Account.status == status)
    return list(db.scalars(query))
