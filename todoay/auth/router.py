from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from todoay import schemas
from todoay.auth import service
from todoay.config import get_db
from todoay.profile import service as profile_service
from todoay.security.gate import current_login_id

router = APIRouter()

_ERRORS = {
    400: {"model": schemas.ValidErrorResponse, "description": "Invalid input"},
    401: {"model": schemas.ErrorResponse, "description": "Missing or invalid token"},
}


def _no_content() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/sign-up", status_code=204, responses={400: _ERRORS[400], 409: {"model": schemas.ErrorResponse}})
def sign_up(body: schemas.SignupRequest, db: Session = Depends(get_db)):
    """Create an account from email, password and nickname."""
    service.save(db, body)
    return _no_content()


@router.post("/login", response_model=schemas.TokenResponse, status_code=201, responses={400: _ERRORS[400]})
def login(body: schemas.LoginRequest, db: Session = Depends(get_db)):
    """Check credentials and issue an access/refresh token pair."""
    account = service.login(db, body)
    return service.issue_tokens(account.email)


@router.post("/refresh", response_model=schemas.TokenResponse, status_code=201, responses={401: _ERRORS[401]})
def refresh(body: schemas.RefreshRequest, db: Session = Depends(get_db)):
    """Exchange a refresh token for a fresh token pair."""
    return service.refresh(db, body)


@router.patch("/password", status_code=204, responses=_ERRORS)
def change_password(
    body: schemas.PasswordUpdateRequest,
    login_id: str = Depends(current_login_id),
    db: Session = Depends(get_db),
):
    """Replace the password of the account the token belongs to."""
    service.update_auth_password(db, login_id, body)
    return _no_content()


@router.delete("/my", status_code=204, responses={401: _ERRORS[401]})
def delete_account(login_id: str = Depends(current_login_id), db: Session = Depends(get_db)):
    """Mark the caller's account as deleted."""
    service.delete_auth(db, login_id)
    return _no_content()


@router.post("/nickname-duplicate-check", status_code=204, responses={400: _ERRORS[400]})
def nickname_duplicate_check(body: schemas.NicknameCheckRequest, db: Session = Depends(get_db)):
    """Fail when the nickname is malformed or already taken."""
    profile_service.nickname_duplicate_check(db, body)
    return _no_content()
