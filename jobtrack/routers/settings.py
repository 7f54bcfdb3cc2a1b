"""
Settings API, mounted under /api/settings: the UI language and the custom
job sources and industries that extend the built-in lists.
"""
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session
from datetime import datetime

from ..database import get_db
from ..models import UserSettings
from ..schemas import SettingsResponse, SettingsUpdate
from ..auth.dependencies import get_current_active_user
from ..auth.models import User
from ..rate_limit import limiter, RATE_LIMIT_GENERAL
from ..services.user_settings import (
    DEFAULT_SOURCES, DEFAULT_INDUSTRIES,
    get_or_create_settings, clean_entries, add_custom_entry, remove_custom_entry,
    settings_to_response,
)

router = APIRouter()

# URL segment -> (column, built-in defaults)
CUSTOM_LISTS = {
    "sources": ("custom_sources", DEFAULT_SOURCES),
    "industries": ("custom_industries", DEFAULT_INDUSTRIES),
}


def current_settings(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_active_user)
) -> UserSettings:
    return get_or_create_settings(db, user)


def _save(db: Session, row: UserSettings) -> SettingsResponse:
    db.commit()
    db.refresh(row)
    return settings_to_response(row)


@router.get("", response_model=SettingsResponse)
def get_settings(row: UserSettings = Depends(current_settings)):
    return settings_to_response(row)


@router.patch("", response_model=SettingsResponse)
@limiter.limit(RATE_LIMIT_GENERAL)
def update_settings(
    request: Request,
    payload: SettingsUpdate,
    row: UserSettings = Depends(current_settings),
    db: Session = Depends(get_db)
):
    """Change the language and/or replace either custom list as a whole."""
    if payload.language:
        row.language = payload.language.value
    if payload.custom_sources is not None:
        row.custom_sources = clean_entries(payload.custom_sources)
    if payload.custom_industries is not None:
        row.custom_industries = clean_entries(payload.custom_industries)
    row.updated_at = datetime.utcnow()
    return _save(db, row)


@router.post("/{kind}/{name}", response_model=SettingsResponse)
def add_custom_value(
    kind: str,
    name: str,
    row: UserSettings = Depends(current_settings),
    db: Session = Depends(get_db)
):
    """Add a custom source or industry. Blank or already-listed names change nothing."""
    if kind not in CUSTOM_LISTS:
        raise HTTPException(status_code=404, detail="Unknown settings list")
    field, defaults = CUSTOM_LISTS[kind]
    if add_custom_entry(row, field, name, defaults):
        return _save(db, row)
    return settings_to_response(row)


@router.delete("/{kind}/{name}", response_model=SettingsResponse)
def remove_custom_value(
    kind: str,
    name: str,
    row: UserSettings = Depends(current_settings),
    db: Session = Depends(get_db)
):
    if kind not in CUSTOM_LISTS:
        raise HTTPException(status_code=404, detail="Unknown settings list")
    field, _ = CUSTOM_LISTS[kind]
    if remove_custom_entry(row, field, name):
        return _save(db, row)
    return settings_to_response(row)
