from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from todoay import schemas
from todoay.config import get_db
from todoay.profile import service
from todoay.security.gate import current_login_id

router = APIRouter()


@router.get("/my", response_model=schemas.ProfileResponse)
def my_profile(login_id: str = Depends(current_login_id), db: Session = Depends(get_db)):
    return service.get_my_profile(db, login_id)
