"""
JobTrack - Backup export and import.

A backup is one JSON document: {"applications": [...], "settings": {...},
"exportedAt": "..."}. Importing adds the applications to the current user's
data and merges the settings into theirs.
"""
import logging
from datetime import date, datetime, timezone

from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..models import Application, ApplicationContact
from ..schemas import ApplicationCreate, ApplicationResponse, BackupFile, ImportResult
from .salary import apply_salary_inputs
from .user_settings import get_or_create_settings, merge_unique, clean_entries

logger = logging.getLogger("jobtrack.backup")

# Derived on read, never imported
_RESPONSE_ONLY_FIELDS = {"salary_range", "salary_expectation_parsed"}


def backup_filename(today: date = None) -> str:
    return f"job-apply-track-backup-{(today or date.today()).isoformat()}.json"


def export_backup(db: Session, user) -> dict:
    applications = db.query(Application).filter(
        Application.user_id == user.id
    ).order_by(Application.id.asc()).all()
    row = get_or_create_settings(db, user)

    return {
        "applications": [
            ApplicationResponse.model_validate(a).model_dump(mode="json", exclude=_RESPONSE_ONLY_FIELDS)
            for a in applications
        ],
        "settings": {
            "language": row.language,
            "custom_sources": list(row.custom_sources or []),
            "custom_industries": list(row.custom_industries or []),
        },
        "exportedAt": datetime.utcnow().isoformat() + "Z",
    }


def as_naive_utc(moment: datetime) -> datetime:
    """Timestamps are stored as naive UTC; offsets are converted, naive values kept as they are."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


def _application_from_backup(entry: dict, user) -> Application:
    """
    Build an Application from one exported entry.

    Status and work type are kept as written so that entries using older
    spellings survive a round trip; everything else is validated.
    """
    data = dict(entry)
    status = data.pop("status", None)
    work_type = data.pop("work_type", None)

    validated = apply_salary_inputs(ApplicationCreate.model_validate(data).model_dump(exclude_unset=True))
    contacts = validated.pop("contacts", [])

    application = Application(**validated, user_id=user.id)
    application.status = status if isinstance(status, str) and status else "applied"
    application.work_type = work_type if isinstance(work_type, str) and work_type else None
    application.is_pinned = bool(entry.get("is_pinned", False))
    if not application.application_date:
        application.application_date = date.today()

    created_at = entry.get("created_at")
    if isinstance(created_at, str):
        try:
            application.created_at = as_naive_utc(datetime.fromisoformat(created_at.replace("Z", "+00:00")))
        except ValueError:
            logger.debug(f"Ignoring unparseable created_at {created_at!r}")

    application.contacts = [ApplicationContact(**c) for c in contacts]
    return application


def import_backup(db: Session, user, backup: BackupFile) -> ImportResult:
    """Add the backup's applications and merge its settings. Bad entries are reported and skipped."""
    result = ImportResult()

    for index, entry in enumerate(backup.applications, start=1):
        try:
            db.add(_application_from_backup(entry, user))
        except ValidationError as e:
            result.errors.append(f"Application {index}: {e.error_count()} invalid field(s)")
            continue
        result.applications_imported += 1

    row = get_or_create_settings(db, user)
    if backup.settings.language:
        row.language = backup.settings.language.value
    row.custom_sources = merge_unique(row.custom_sources or [], clean_entries(backup.settings.custom_sources))
    row.custom_industries = merge_unique(row.custom_industries or [], clean_entries(backup.settings.custom_industries))
    result.settings_imported = True

    db.commit()
    logger.info(
        f"Imported {result.applications_imported} applications for user {user.id} "
        f"({len(result.errors)} skipped)"
    )
    return result
