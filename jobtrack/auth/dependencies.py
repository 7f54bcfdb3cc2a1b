"""Dependencies that resolve the account behind a request."""
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from .accounts import local_user
from .models import User
from .security import read_session_token

# Missing credentials are handled below so single-user mode needs no header
bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """
    The account making the request.

    In single-user mode that is always the local account. Otherwise the
    bearer token has to be a session token that is well signed, unexpired
    and issued after the user's last sign-out.
    """
    if settings.auth.single_user_mode:
        return local_user(db)
    if credentials is None:
        raise _unauthorized("Not authenticated")

    claims = read_session_token(credentials.credentials)
    if claims is None:
        raise _unauthorized("Invalid or expired session")

    user = db.query(User).filter(User.id == claims.user_id).first()
    if user is None or user.session_epoch != claims.epoch:
        raise _unauthorized("Session has ended, please sign in again")
    return user


def get_current_active_user(user: User = Depends(get_current_user)) -> User:
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="This account is disabled")
    return user
