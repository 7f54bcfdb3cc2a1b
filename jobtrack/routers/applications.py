"""
Job applications API, mounted under /api/applications.

Every route only ever sees the signed-in account's applications; asking for
someone else's id is a 404, the same as asking for one that doesn't exist.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session
from sqlalchemy import or_
from typing import List, Optional
from datetime import date, datetime
import logging

from ..database import get_db
from ..models import Application, ApplicationContact
from ..schemas import (
    ApplicationCreate, ApplicationUpdate, ApplicationResponse, ApplicationStatus,
    ClearResult, NoteCreate, StatusChange, WorkType,
)
from ..auth.dependencies import get_current_active_user
from ..auth.models import User
from ..query_helpers import user_query, get_owned_or_404, escape_like, LIKE_ESCAPE_CHAR
from ..rate_limit import limiter, RATE_LIMIT_GENERAL, RATE_LIMIT_READ
from ..services.salary import apply_salary_inputs

logger = logging.getLogger("jobtrack.applications")
router = APIRouter()

SORT_FIELDS = ("application_date", "company_name", "status", "created_at", "updated_at")
SEARCH_FIELDS = ("company_name", "position", "notes")


def column_values(payload) -> dict:
    """The sent fields of a create/update body, ready to set on an Application."""
    data = apply_salary_inputs(payload.model_dump(exclude_unset=True))
    for key in ("status", "work_type"):
        if isinstance(data.get(key), (ApplicationStatus, WorkType)):
            data[key] = data[key].value
    return data


def owned_application(
    application_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_active_user)
) -> Application:
    return get_owned_or_404(db, Application, application_id, user, "Application")


def _touch_and_save(db: Session, application: Application) -> Application:
    application.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(application)
    return application


@router.get("/", response_model=List[ApplicationResponse])
@limiter.limit(RATE_LIMIT_READ)
def list_applications(
    request: Request,
    status: Optional[ApplicationStatus] = None,
    work_type: Optional[WorkType] = None,
    source: Optional[str] = None,
    search: Optional[str] = None,
    pinned_only: bool = False,
    sort_by: str = Query("created_at", pattern="^(" + "|".join(SORT_FIELDS) + ")$"),
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_active_user)
):
    """Filter, search and sort the account's applications. Pinned ones always lead."""
    query = user_query(db, Application, user)

    exact = {"status": status and status.value, "work_type": work_type and work_type.value, "source": source}
    for column, value in exact.items():
        if value:
            query = query.filter(getattr(Application, column) == value)
    if pinned_only:
        query = query.filter(Application.is_pinned.is_(True))

    term = (search or "").strip()
    if term:
        pattern = f"%{escape_like(term)}%"
        query = query.filter(or_(*(
            getattr(Application, field).ilike(pattern, escape=LIKE_ESCAPE_CHAR) for field in SEARCH_FIELDS
        )))

    sort_column = getattr(Application, sort_by)
    query = query.order_by(
        Application.is_pinned.desc(),
        sort_column.asc() if sort_order == "asc" else sort_column.desc(),
        Application.id.desc(),
    )
    return query.offset(skip).limit(limit).all()


@router.get("/{application_id}", response_model=ApplicationResponse)
def get_application(application: Application = Depends(owned_application)):
    return application


@router.post("/", response_model=ApplicationResponse, status_code=201)
@limiter.limit(RATE_LIMIT_GENERAL)
def create_application(
    request: Request,
    payload: ApplicationCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_active_user)
):
    """Record a new application. Without an application date, today is used."""
    data = column_values(payload)
    contacts = data.pop("contacts", [])
    data["application_date"] = data.get("application_date") or date.today()

    application = Application(user_id=user.id, **data)
    application.contacts = [ApplicationContact(**c) for c in contacts]
    db.add(application)
    db.commit()
    db.refresh(application)
    logger.info("Application %s created for user %s", application.id, user.id)
    return application


@router.patch("/{application_id}", response_model=ApplicationResponse)
@limiter.limit(RATE_LIMIT_GENERAL)
def update_application(
    request: Request,
    payload: ApplicationUpdate,
    application: Application = Depends(owned_application),
    db: Session = Depends(get_db)
):
    """Change only the fields that were sent. A `contacts` list replaces the current contacts."""
    data = column_values(payload)
    contacts = data.pop("contacts", None)

    for field, value in data.items():
        setattr(application, field, value)
    if contacts is not None:
        application.contacts = [ApplicationContact(**c) for c in contacts]
    return _touch_and_save(db, application)


@router.delete("/{application_id}")
@limiter.limit(RATE_LIMIT_GENERAL)
def delete_application(
    request: Request,
    application: Application = Depends(owned_application),
    db: Session = Depends(get_db)
):
    db.delete(application)
    db.commit()
    return {"message": "Application deleted"}


@router.delete("", response_model=ClearResult)
@limiter.limit(RATE_LIMIT_GENERAL)
def clear_applications(
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_active_user)
):
    """Delete every application of the account."""
    applications = user_query(db, Application, user).all()
    for application in applications:
        db.delete(application)
    db.commit()
    logger.info("Cleared %d applications for user %s", len(applications), user.id)
    return ClearResult(deleted=len(applications))


@router.patch("/{application_id}/status", response_model=ApplicationResponse)
def change_status(
    payload: StatusChange,
    application: Application = Depends(owned_application),
    db: Session = Depends(get_db)
):
    application.status = payload.status.value
    return _touch_and_save(db, application)


@router.post("/{application_id}/pin", response_model=ApplicationResponse)
def toggle_pin(application: Application = Depends(owned_application), db: Session = Depends(get_db)):
    application.is_pinned = not application.is_pinned
    db.commit()
    db.refresh(application)
    return application


@router.post("/{application_id}/notes", response_model=ApplicationResponse)
def add_note(
    payload: NoteCreate,
    application: Application = Depends(owned_application),
    db: Session = Depends(get_db)
):
    """Append a `[YYYY-MM-DD HH:MM] text` entry below the existing notes."""
    text = payload.note.strip()
    if not text:
        raise HTTPException(status_code=400, detail="Note cannot be empty")

    entry = f"[{datetime.utcnow():%Y-%m-%d %H:%M}] {text}"
    application.notes = "\n\n".join(filter(None, [application.notes, entry]))
    return _touch_and_save(db, application)
