from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from todoay import schemas
from todoay.config import get_db
from todoay.models import AccountStatus
from todoay.profile import service as profile_service

router = APIRouter()


@router.get("/accounts", response_model=list[schemas.AccountSummary])
def list_accounts(status: AccountStatus | None = None, db: Session = Depends(get_db)):
    """List accounts, optionally filtered by status. ADMIN only."""
    return profile_service.list_accounts(db, status)
