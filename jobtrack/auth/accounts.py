"""
Account rules behind the /auth endpoints.

Plain functions over a SQLAlchemy session. Anything the caller may show to
the user is raised as AccountError; the router turns it into a 4xx.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..config import settings
from .models import User, LinkedIdentity
from .security import hash_password, password_matches

logger = logging.getLogger("jobtrack.auth")

# Owner of all data in single-user mode. .local is reserved, so no real
# sign-up can ever collide with it.
LOCAL_USER_EMAIL = "local@jobtrack.local"


class AccountError(Exception):
    pass


def normalize_email(email: str) -> str:
    return email.strip().lower()


def find_user(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def check_password(password: str) -> None:
    minimum = settings.auth.min_password_length
    if len(password) < minimum:
        raise AccountError(f"Password must be at least {minimum} characters")


def sign_up(db: Session, email: str, password: str, name: Optional[str] = None) -> User:
    check_password(password)
    if find_user(db, email):
        raise AccountError("An account with this email already exists")

    user = User(email=normalize_email(email), name=name, password_hash=hash_password(password))
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Created account %s", user.id)
    return user


def sign_in(db: Session, email: str, password: str) -> User:
    user = find_user(db, email)
    # Same message for unknown email and wrong password
    if user is None or not password_matches(password, user.password_hash):
        raise AccountError("Invalid email or password")
    if not user.is_active:
        raise AccountError("This account is disabled")
    return user


def end_sessions(db: Session, user: User) -> None:
    """Void every session and reset token issued to `user` so far."""
    user.session_epoch = (user.session_epoch or 0) + 1
    db.commit()


def set_password(db: Session, user: User, password: str) -> None:
    check_password(password)
    user.password_hash = hash_password(password)
    end_sessions(db, user)
    logger.info("Password changed for account %s", user.id)


def sign_in_with_identity(
    db: Session, provider: str, subject: str, email: str, name: Optional[str] = None
) -> User:
    """
    The account a Google/GitHub identity signs in as.

    A known identity maps straight to its account. A new one is linked to
    the account with the same email, or to a fresh password-less account.
    """
    identity = db.query(LinkedIdentity).filter(
        LinkedIdentity.provider == provider,
        LinkedIdentity.subject == subject
    ).first()
    if identity is not None:
        return identity.user

    user = find_user(db, email)
    if user is None:
        user = User(email=normalize_email(email), name=name)
        db.add(user)
    user.identities.append(LinkedIdentity(provider=provider, subject=subject))
    db.commit()
    db.refresh(user)
    logger.info("Linked %s identity to account %s", provider, user.id)
    return user


def local_user(db: Session) -> User:
    user = db.query(User).filter(User.email == LOCAL_USER_EMAIL).first()
    if user is None:
        user = User(email=LOCAL_USER_EMAIL, name="Local User")
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("Created the single-user mode account")
    return user
