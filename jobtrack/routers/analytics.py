"""
JobTrack - Dashboard analytics API.
"""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date

from ..database import get_db
from ..schemas import AnalyticsSummary
from ..auth.dependencies import get_current_active_user
from ..auth.models import User
from ..rate_limit import limiter, RATE_LIMIT_READ
from ..services.analytics import get_analytics_data

router = APIRouter()


@router.get("", response_model=AnalyticsSummary, response_model_by_alias=True)
@limiter.limit(RATE_LIMIT_READ)
def get_analytics(
    request: Request,
    today: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Totals, response rate, status and work-type distributions, and the
    trailing weekly activity for the current user.

    `today` pins the reference date (YYYY-MM-DD); it defaults to the server's date.
    """
    return get_analytics_data(db, current_user, today=today)
