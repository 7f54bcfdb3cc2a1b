"""
JobTrack - Skill autocomplete API.
"""
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session
from typing import List

from ..database import get_db
from ..schemas import SkillSuggestionResponse, Language
from ..auth.dependencies import get_current_active_user
from ..auth.models import User
from ..rate_limit import limiter, RATE_LIMIT_SUGGEST
from ..services.skills import fetch_skill_suggestions

router = APIRouter()


@router.get("/suggestions", response_model=List[SkillSuggestionResponse])
@limiter.limit(RATE_LIMIT_SUGGEST)
def get_skill_suggestions(
    request: Request,
    q: str = "",
    locale: Language = Language.EN,
    limit: int = Query(8, ge=1, le=50),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Skills starting with `q` in the given locale, most popular first."""
    return fetch_skill_suggestions(db, q, locale=locale.value, limit=limit)
