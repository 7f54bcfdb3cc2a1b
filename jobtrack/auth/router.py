"""
Sign-in endpoints, mounted under /auth.

    GET  /status                      which sign-in options the login page should offer
    POST /signup                      email + password account, signed in straight away
    POST /login                       email + password sign-in
    POST /logout                      end every session of the account
    GET  /me                          the signed-in account
    POST /forgot-password             mail a password reset link
    POST /reset-password              set a new password from a reset link
    GET  /oauth/{provider}            start Google/GitHub sign-in
    GET  /oauth/{provider}/callback   finish it

Password sign-up and sign-in are refused in single-user mode, where every
request already acts as the local account.
"""
import logging
from typing import Optional
from urllib.parse import urlencode

from authlib.integrations.starlette_client import OAuthError
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..rate_limit import limiter, RATE_LIMIT_AUTH
from ..services.email_service import mail_configured, send_password_reset
from . import accounts
from .accounts import AccountError
from .dependencies import get_current_active_user
from .models import User
from .oauth import (
    ProviderError, configured_providers, fetch_profile, get_oauth_client, safe_next_path,
)
from .schemas import AccountOut, Credentials, NewPassword, ResetRequest, SessionOut, SignUp
from .security import issue_reset_token, issue_session_token, read_reset_token, session_lifetime

logger = logging.getLogger("jobtrack.auth")
router = APIRouter()

OAUTH_NEXT_SESSION_KEY = "oauth_next"
OAUTH_PROVIDER_SESSION_KEY = "oauth_provider"

RESET_LINK_SENT = "If an account exists for that email, a reset link is on its way."


def _session_for(user: User) -> SessionOut:
    return SessionOut(
        access_token=issue_session_token(user),
        expires_in=int(session_lifetime().total_seconds()),
        user=AccountOut.model_validate(user),
    )


def _password_auth_enabled():
    if settings.auth.single_user_mode:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Password sign-in is off in single-user mode"
        )


def _login_failed() -> RedirectResponse:
    return RedirectResponse(url="/login?error=auth", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/status")
def auth_status():
    return {
        "single_user_mode": settings.auth.single_user_mode,
        "oauth_providers": configured_providers(),
        "password_reset_mail": mail_configured(),
    }


@router.post("/signup", response_model=SessionOut, status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMIT_AUTH)
def signup(request: Request, payload: SignUp, db: Session = Depends(get_db)):
    _password_auth_enabled()
    try:
        user = accounts.sign_up(db, payload.email, payload.password, payload.name)
    except AccountError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return _session_for(user)


@router.post("/login", response_model=SessionOut)
@limiter.limit(RATE_LIMIT_AUTH)
def login(request: Request, payload: Credentials, db: Session = Depends(get_db)):
    _password_auth_enabled()
    try:
        user = accounts.sign_in(db, payload.email, payload.password)
    except AccountError as e:
        logger.info("Failed sign-in for %s", payload.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"}
        )
    return _session_for(user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(user: User = Depends(get_current_active_user), db: Session = Depends(get_db)):
    """Sign out everywhere: every token issued to the account so far stops working."""
    accounts.end_sessions(db, user)


@router.get("/me", response_model=AccountOut)
def me(user: User = Depends(get_current_active_user)):
    return user


@router.post("/forgot-password")
@limiter.limit(RATE_LIMIT_AUTH)
async def forgot_password(request: Request, payload: ResetRequest, db: Session = Depends(get_db)):
    """Mail a reset link. The answer never reveals whether the address has an account."""
    user = accounts.find_user(db, payload.email)
    if user is not None and user.is_active:
        await send_password_reset(user.email, issue_reset_token(user))
    return {"message": RESET_LINK_SENT}


@router.post("/reset-password", response_model=SessionOut)
@limiter.limit(RATE_LIMIT_AUTH)
def reset_password(request: Request, payload: NewPassword, db: Session = Depends(get_db)):
    """Set the password named in a reset link and sign in with it. Each link works once."""
    claims = read_reset_token(payload.token)
    user = db.query(User).filter(User.id == claims.user_id).first() if claims else None
    if user is None or user.session_epoch != claims.epoch:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="This reset link is invalid or has expired"
        )
    try:
        accounts.set_password(db, user, payload.password)
    except AccountError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return _session_for(user)


@router.get("/oauth/{provider}")
async def oauth_start(
    provider: str,
    request: Request,
    next: Optional[str] = None,
    redirect_to: Optional[str] = None,
):
    client = get_oauth_client(provider)
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Sign-in with '{provider}' is not configured"
        )

    origin = str(request.base_url).rstrip("/")
    request.session[OAUTH_NEXT_SESSION_KEY] = safe_next_path(next, redirect_to, origin)
    request.session[OAUTH_PROVIDER_SESSION_KEY] = provider
    callback_url = request.url_for("oauth_callback", provider=provider)
    return await client.authorize_redirect(request, str(callback_url))


@router.get("/oauth/{provider}/callback", name="oauth_callback")
async def oauth_callback(provider: str, request: Request, db: Session = Depends(get_db)):
    """
    Finish provider sign-in.

    The session token travels to the login page in the URL fragment, which
    never reaches a server; the page stores it and moves on to the saved
    `next` path. Any failure lands on /login?error=auth.
    """
    client = get_oauth_client(provider)
    if client is None:
        return _login_failed()

    try:
        token = await client.authorize_access_token(request)
        profile = await fetch_profile(provider, client, token)
    except (OAuthError, ProviderError) as e:
        logger.warning("%s sign-in failed: %s", provider, e)
        return _login_failed()

    user = accounts.sign_in_with_identity(
        db, provider, profile["subject"], profile["email"], profile.get("name")
    )
    if not user.is_active:
        return _login_failed()

    session = _session_for(user)
    fragment = urlencode({
        "access_token": session.access_token,
        "expires_in": session.expires_in,
        "next": request.session.pop(OAUTH_NEXT_SESSION_KEY, None) or safe_next_path(None, None, ""),
    })
    request.session.pop(OAUTH_PROVIDER_SESSION_KEY, None)
    return RedirectResponse(url=f"/login#{fragment}", status_code=status.HTTP_303_SEE_OTHER)
