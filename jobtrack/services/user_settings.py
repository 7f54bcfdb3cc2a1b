"""
JobTrack - Per-user settings helpers.

The built-in source and industry lists are shared by everyone; users can
append their own entries, which are listed after the defaults.
"""
from typing import Iterable, List

from sqlalchemy.orm import Session

from ..models import UserSettings
from ..schemas import SettingsResponse

DEFAULT_SOURCES = [
    "LinkedIn",
    "Indeed",
    "Glassdoor",
    "Company Website",
    "Referral",
    "Job Fair",
    "Recruiter",
    "Other",
]

DEFAULT_INDUSTRIES = [
    "Technology",
    "Finance",
    "Healthcare",
    "Education",
    "E-commerce",
    "Manufacturing",
    "Consulting",
    "Media",
    "Telecommunications",
    "Government",
    "Other",
]


def get_or_create_settings(db: Session, user) -> UserSettings:
    row = db.query(UserSettings).filter(UserSettings.user_id == user.id).first()
    if not row:
        row = UserSettings(user_id=user.id, language="en", custom_sources=[], custom_industries=[])
        db.add(row)
        db.commit()
        db.refresh(row)
    return row


def merge_unique(defaults: Iterable[str], custom: Iterable[str]) -> List[str]:
    """Defaults first, then custom entries not already present."""
    merged = list(defaults)
    for entry in custom or []:
        if entry not in merged:
            merged.append(entry)
    return merged


def clean_entries(entries: Iterable[str]) -> List[str]:
    """Trim, drop blanks and duplicates, keep order."""
    result = []
    for entry in entries or []:
        cleaned = entry.strip()
        if cleaned and cleaned not in result:
            result.append(cleaned)
    return result


def all_sources(row: UserSettings) -> List[str]:
    return merge_unique(DEFAULT_SOURCES, row.custom_sources)


def all_industries(row: UserSettings) -> List[str]:
    return merge_unique(DEFAULT_INDUSTRIES, row.custom_industries)


def add_custom_entry(row: UserSettings, field: str, name: str, defaults: List[str]) -> bool:
    """
    Append `name` to a custom list. Returns False (no change) when the name is
    blank or already present among defaults or custom entries.
    """
    cleaned = (name or "").strip()
    current = list(getattr(row, field) or [])
    if not cleaned or cleaned in defaults or cleaned in current:
        return False
    # Reassign so the JSON column is flagged dirty
    setattr(row, field, current + [cleaned])
    return True


def remove_custom_entry(row: UserSettings, field: str, name: str) -> bool:
    current = list(getattr(row, field) or [])
    if name not in current:
        return False
    setattr(row, field, [entry for entry in current if entry != name])
    return True


def settings_to_response(row: UserSettings) -> SettingsResponse:
    return SettingsResponse(
        language=row.language,
        custom_sources=list(row.custom_sources or []),
        custom_industries=list(row.custom_industries or []),
        all_sources=all_sources(row),
        all_industries=all_industries(row),
    )
