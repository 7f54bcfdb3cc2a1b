"""
Per-account query scoping and LIKE escaping shared by the routers.
"""
import re

from fastapi import HTTPException
from sqlalchemy.orm import Session

LIKE_ESCAPE_CHAR = "\\"
_LIKE_SPECIALS = re.compile(r"[\\%_]")


def user_query(db: Session, model, user):
    """Rows of `model` that belong to `user`."""
    return db.query(model).filter_by(user_id=user.id)


def get_owned_or_404(db: Session, model, record_id: int, user, label: str = "Record"):
    """One of the user's rows by id. Rows of other accounts look the same as missing ones."""
    record = user_query(db, model, user).filter_by(id=record_id).one_or_none()
    if record is None:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return record


def escape_like(value: str) -> str:
    """Make `%`, `_` and the escape character itself match literally."""
    return _LIKE_SPECIALS.sub(lambda m: LIKE_ESCAPE_CHAR + m.group(0), value)
