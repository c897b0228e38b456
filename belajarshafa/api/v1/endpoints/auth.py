# belajarshafa/api/v1/endpoints/auth.py
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from belajarshafa.core.exceptions import UnauthorizedError
from belajarshafa.core.security import authenticate_user, create_user_token
from belajarshafa.db.session import get_db
from belajarshafa.models.user import User
from belajarshafa.schemas.auth import LoginRequest, RegisterRequest, Token
from belajarshafa.schemas.user import UserCreate
from belajarshafa.services import user_service

router = APIRouter(prefix="/auth", tags=["auth"])


def _issue_token(user: User) -> Token:
    return Token(access_token=create_user_token(user), user=user)


def _login(db: Session, email: str, password: str) -> Token:
    user = authenticate_user(db, email, password)
    if not user:
        raise UnauthorizedError("Incorrect email or password")
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is disabled",
        )
    return _issue_token(user)


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
def register_user(payload: RegisterRequest, db: Session = Depends(get_db)):
    user = user_service.create_user(
        db,
        obj_in=UserCreate(
            email=payload.email,
            password=payload.password,
            name=payload.name,
            roles=[payload.role],
        ),
    )
    return _issue_token(user)


# JSON body login, used by the web client
@router.post("/login", response_model=Token)
def login_for_access_token(payload: LoginRequest, db: Session = Depends(get_db)):
    return _login(db, payload.email, payload.password)


@router.post("/token", response_model=Token)
def login_for_access_token_form(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    """
    OAuth2 password flow for the interactive docs.

    ``username`` is the email address.
    """
    return _login(db, form_data.username, form_data.password)
