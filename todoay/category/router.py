from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from todoay import schemas
from todoay.category import service
from todoay.config import get_db
from todoay.security.gate import current_login_id

router = APIRouter()


@router.post("", response_model=schemas.CategoryCreatedResponse, status_code=201)
def create_category(
    body: schemas.CategorySaveRequest,
    login_id: str = Depends(current_login_id),
    db: Session = Depends(get_db),
):
    """Create a category for the caller; order index defaults to the end."""
    category = service.save(db, login_id, body)
    return schemas.CategoryCreatedResponse(id=category.id)


@router.get("/my", response_model=list[schemas.CategoryResponse])
def my_categories(login_id: str = Depends(current_login_id), db: Session = Depends(get_db)):
    return service.list_mine(db, login_id)
