# belajarshafa/core/security.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from belajarshafa.core.config import settings
from belajarshafa.core.exceptions import UnauthorizedError
from belajarshafa.db.session import get_db
from belajarshafa.models.enums import Role
from belajarshafa.models.user import User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/token")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return pwd_context.verify(plain_password, password_hash)


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    user = db.query(User).filter(User.email == email).first()
    if user is None or not verify_password(password, user.password_hash):
        logger.warning(f"Failed login attempt for {email}")
        return None
    return user


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode["exp"] = expire
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_user_token(user: User) -> str:
    """
    Token payload: sub (user id), email, roles[].
    ``role`` (first role) is written for older clients only and never read back.
    """
    roles = [r.value for r in user.roles]
    return create_access_token(
        data={
            "sub": str(user.id),
            "email": user.email,
            "roles": roles,
            "role": roles[0] if roles else None,
        }
    )


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    credentials_exception = UnauthorizedError("Could not validate credentials")
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        user_id = int(payload["sub"])
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise credentials_exception

    user = db.get(User, user_id)
    if user is None:
        raise credentials_exception
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is disabled",
        )
    return user


def require_roles(*roles: Role) -> Callable[..., User]:
    """
    Route guard: the current user must hold at least one of ``roles``.
    Services still re-check ownership and membership.
    """

    def dependency(current_user: User = Depends(get_current_user)) -> User:
        if not current_user.has_role(*roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient role for this operation",
            )
        return current_user

    return dependency


get_current_manager = require_roles(Role.MANAGER, Role.ADMIN)
get_current_admin = require_roles(Role.ADMIN)
get_current_mentee = require_roles(Role.MENTEE)
get_current_staff = require_roles(Role.MENTOR, Role.MANAGER, Role.ADMIN)
