"""Request and response bodies of the /auth endpoints."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class Credentials(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class SignUp(Credentials):
    name: Optional[str] = Field(None, max_length=200)


class AccountOut(BaseModel):
    id: int
    # Plain str: the single-user account lives on the reserved .local domain
    email: str
    name: Optional[str] = None
    has_password: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SessionOut(BaseModel):
    """A signed-in session: the bearer token, its lifetime in seconds, and who it belongs to."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: AccountOut


class ResetRequest(BaseModel):
    email: EmailStr


class NewPassword(BaseModel):
    token: str
    password: str = Field(..., max_length=128)
