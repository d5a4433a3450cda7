from sqlalchemy import func, select
from sqlalchemy.orm import Session

from todoay import schemas
from todoay.exceptions import AccountNotFound, DuplicateCategory
from todoay.logging_config import get_logger
from todoay.models import Category
from todoay.profile.service import get_active_account
from todoay.validation import raise_for_violations, validate_category_save

logger = get_logger(__name__)


def save(db: Session, login_id: str, request: schemas.CategorySaveRequest) -> Category:
    raise_for_violations(validate_category_save(request))
    account = get_active_account(db, login_id)
    if account is None:
        raise AccountNotFound("Account not found")

    name = request.name.strip()
    clash = db.scalars(
        select(Category.id).where(Category.account_id == account.id, Category.name == name)
    ).first()
    if clash is not None:
        raise DuplicateCategory(f"Category '{name}' already exists")

    order_index = request.order_index
    if order_index is None:
        last = db.scalar(
            select(func.max(Category.order_index)).where(Category.account_id == account.id)
        )
        order_index = 0 if last is None else last + 1

    category = Category(
        account_id=account.id,
        name=name,
        color=request.color.upper(),
        order_index=order_index,
    )
    db.add(category)
    db.commit()
    db.refresh(category)
    logger.info(
        "Category created",
        extra={"account_id": account.id, "category_id": category.id},
    )
    return category


def list_mine(db: Session, login_id: str) -> list[Category]:
    account = get_active_account(db, login_id)
    if account is None:
        raise AccountNotFound("Account not found")
    query = (
        select(Category)
        .where(Category.account_id == account.id)
        .order_by(Category.order_index, Category.id)
    )
    return list(db.scalars(query))
