"""
Password hashing and the two signed tokens JobTrack hands out.

Session tokens are JWTs sent back as `Authorization: Bearer ...`. Reset
tokens are itsdangerous signatures mailed inside password reset links. Both
carry the user's session epoch: once the epoch moves on (sign-out, password
change) every older token stops validating, which also makes a reset link
single-use.
"""
from datetime import datetime, timedelta
from typing import NamedTuple, Optional

from itsdangerous import BadSignature, URLSafeTimedSerializer
from jose import JWTError, jwt
from passlib.context import CryptContext

from ..config import settings

_password_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
_reset_signer = URLSafeTimedSerializer(settings.auth.secret_key, salt="jobtrack.password-reset")


class TokenClaims(NamedTuple):
    user_id: int
    epoch: int


def hash_password(password: str) -> str:
    return _password_context.hash(password)


def password_matches(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    try:
        return _password_context.verify(password, password_hash)
    except ValueError:
        # Not a hash passlib recognises
        return False


def session_lifetime() -> timedelta:
    return timedelta(hours=settings.auth.session_hours)


def issue_session_token(user, now: Optional[datetime] = None) -> str:
    issued = now or datetime.utcnow()
    claims = {
        "sub": str(user.id),
        "epoch": user.session_epoch or 0,
        "iat": issued,
        "exp": issued + session_lifetime(),
    }
    return jwt.encode(claims, settings.auth.secret_key, algorithm=settings.auth.jwt_algorithm)


def read_session_token(token: str) -> Optional[TokenClaims]:
    """Claims of a well-signed, unexpired session token; None for anything else."""
    try:
        claims = jwt.decode(token, settings.auth.secret_key, algorithms=[settings.auth.jwt_algorithm])
        return TokenClaims(int(claims["sub"]), int(claims.get("epoch", 0)))
    except (JWTError, KeyError, ValueError):
        return None


def issue_reset_token(user) -> str:
    return _reset_signer.dumps({"uid": user.id, "epoch": user.session_epoch or 0})


def read_reset_token(token: str) -> Optional[TokenClaims]:
    try:
        data = _reset_signer.loads(token, max_age=settings.auth.reset_link_minutes * 60)
    except BadSignature:
        # Also covers SignatureExpired
        return None
    return TokenClaims(int(data["uid"]), int(data["epoch"]))
