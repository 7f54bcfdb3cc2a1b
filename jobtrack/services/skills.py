"""
JobTrack - Skill autocomplete.

Prefix lookup over the shared skill_suggestions table, plus the default
vocabulary seeded into a fresh database.
"""
import logging
from typing import List

from sqlalchemy.orm import Session

from ..models import SkillSuggestion
from ..query_helpers import escape_like, LIKE_ESCAPE_CHAR

logger = logging.getLogger("jobtrack.skills")

SUPPORTED_LOCALES = ("en", "tr")

# (label, popularity) per locale; higher popularity sorts first
DEFAULT_SKILLS = {
    "en": [
        ("Python", 100), ("JavaScript", 98), ("TypeScript", 95), ("SQL", 94),
        ("React", 92), ("Java", 90), ("Node.js", 88), ("AWS", 87),
        ("Docker", 86), ("Git", 85), ("Kubernetes", 80), ("Go", 78),
        ("C#", 76), ("PostgreSQL", 75), ("Project Management", 74),
        ("Communication", 73), ("Data Analysis", 72), ("Machine Learning", 70),
        ("Next.js", 68), ("Django", 66), ("FastAPI", 64), ("Figma", 60),
        ("Agile", 58), ("Scrum", 56), ("REST APIs", 55), ("GraphQL", 50),
        ("Pandas", 48), ("Excel", 45), ("Leadership", 44), ("Product Management", 40),
    ],
    "tr": [
        ("Python", 100), ("JavaScript", 98), ("SQL", 94), ("React", 92),
        ("Java", 90), ("Proje Yönetimi", 80), ("İletişim", 78),
        ("Veri Analizi", 76), ("Makine Öğrenmesi", 70), ("Takım Çalışması", 68),
        ("Liderlik", 60), ("Excel", 55), ("Ürün Yönetimi", 50),
    ],
}


def fetch_skill_suggestions(db: Session, query: str, locale: str = "en", limit: int = 8) -> List[SkillSuggestion]:
    """
    Suggestions whose label starts with `query` (case-insensitive).

    Wildcards in the query are escaped, so "c#" or "50%" match literally.
    A blank query returns no suggestions.
    """
    cleaned = (query or "").strip()
    if not cleaned:
        return []

    pattern = f"{escape_like(cleaned)}%"
    return db.query(SkillSuggestion).filter(
        SkillSuggestion.locale == locale,
        SkillSuggestion.label.ilike(pattern, escape=LIKE_ESCAPE_CHAR),
    ).order_by(
        SkillSuggestion.popularity.desc(),
        SkillSuggestion.label.asc(),
    ).limit(limit).all()


def seed_default_skills(db: Session) -> int:
    """Seed the default vocabulary if the table is empty. Returns rows added."""
    if db.query(SkillSuggestion).first():
        return 0

    added = 0
    for locale, entries in DEFAULT_SKILLS.items():
        for label, popularity in entries:
            db.add(SkillSuggestion(label=label, locale=locale, popularity=popularity))
            added += 1
    db.commit()
    logger.info("Seeded %d default skill suggestions", added)
    return added
