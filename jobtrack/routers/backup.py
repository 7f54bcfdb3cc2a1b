"""
JSON backup download and restore, mounted under /api.
"""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..auth.dependencies import get_current_active_user
from ..auth.models import User
from ..database import get_db
from ..rate_limit import limiter, RATE_LIMIT_GENERAL
from ..schemas import BackupFile, ImportResult
from ..services.backup import backup_filename, export_backup, import_backup

router = APIRouter()


@router.get("/export")
@limiter.limit(RATE_LIMIT_GENERAL)
def export_data(request: Request, db: Session = Depends(get_db), user: User = Depends(get_current_active_user)):
    """Every application and setting of the account, as a file download."""
    return JSONResponse(
        export_backup(db, user),
        headers={"Content-Disposition": f'attachment; filename="{backup_filename()}"'},
    )


@router.post("/import", response_model=ImportResult)
@limiter.limit(RATE_LIMIT_GENERAL)
def import_data(
    request: Request,
    backup: BackupFile,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_active_user)
):
    """Add the applications of an exported file and merge its settings into the account's."""
    return import_backup(db, user, backup)
