"""
JobTrack - Analytics aggregation.

Turns a flat list of application records into the summary shown on the
analytics dashboard: headline counts, response rate, status distribution,
trailing weekly activity, and work-type distribution.

The aggregation itself (`aggregate`) is a pure function of the records and
the injected `today`. `get_analytics_data` is the thin database-facing
wrapper that fetches the caller's records and falls back to an all-zero
summary when the fetch fails.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import settings
from ..database import with_retry
from ..models import Application
from ..schemas import AnalyticsSummary, ChartSlice, WeeklyActivityPoint

logger = logging.getLogger("jobtrack.analytics")

COLORS = {
    "blue": "#3b82f6",
    "green": "#22c55e",
    "red": "#ef4444",
    "purple": "#a855f7",
    "orange": "#f97316",
    "yellow": "#eab308",
    "gray": "#6b7280",
    "teal": "#14b8a6",
}

NEUTRAL_COLOR = COLORS["gray"]

STATUS_COLORS = {
    "Applied": COLORS["blue"],
    "Test Case": COLORS["purple"],
    "HR Interview": COLORS["orange"],
    "Technical Interview": COLORS["yellow"],
    "Management Interview": COLORS["teal"],
    "Offer": COLORS["green"],
    "Rejected": COLORS["red"],
    "Accepted": COLORS["green"],
    "Withdrawn": COLORS["gray"],
}

WORK_TYPE_COLORS = {
    "Remote": COLORS["blue"],
    "Hypbrid": COLORS["purple"],  # misspelling found in older records
    "Hybrid": COLORS["purple"],
    "Onsite": COLORS["orange"],
}

# Matched exactly against the stored status; legacy Title-Case rows are still counted.
INTERVIEW_STATUSES = frozenset({
    "HR Interview",
    "Technical Interview",
    "Management Interview",
    "hr_interview",
    "technical_interview",
    "management_interview",
})

OFFER_STATUSES = frozenset({"Offer", "Accepted", "offer", "accepted"})

RESPONSE_STATUSES = INTERVIEW_STATUSES | OFFER_STATUSES

DateLike = Union[date, datetime, str, None]


@dataclass(frozen=True, slots=True)
class ApplicationRecord:
    """The slice of an application the aggregator looks at."""
    id: Any
    status: Optional[str]
    work_type: Optional[str] = None
    application_date: DateLike = None
    created_at: DateLike = None


def record_from_row(row: Any) -> ApplicationRecord:
    """Build a record from an ORM row, a result row, or a plain mapping."""
    if isinstance(row, dict):
        get = row.get
    else:
        def get(key: str) -> Any:
            return getattr(row, key, None)
    return ApplicationRecord(
        id=get("id"),
        status=get("status"),
        work_type=get("work_type"),
        application_date=get("application_date"),
        created_at=get("created_at"),
    )


def status_label(status: Optional[str]) -> str:
    """'hr_interview' -> 'Hr Interview'; strings without underscores pass through."""
    if not status:
        return ""
    if "_" not in status:
        return status
    return " ".join(_capitalize_first(word) for word in status.split("_"))


def work_type_label(work_type: Optional[str]) -> Optional[str]:
    if not work_type:
        return None
    stripped = work_type.strip()
    if not stripped:
        return None
    return _capitalize_first(stripped)


def _capitalize_first(word: str) -> str:
    return word[:1].upper() + word[1:]


def week_start(day: date) -> date:
    """Monday of the ISO week containing `day`."""
    return day - timedelta(days=day.weekday())


def week_label(monday: date) -> str:
    return f"{monday.day}/{monday.month}"


def trailing_week_starts(today: date, weeks: int) -> list[date]:
    """The `weeks` Mondays ending at the current week, oldest first."""
    current = week_start(today)
    return [current - timedelta(weeks=offset) for offset in range(weeks - 1, -1, -1)]


def parse_date(value: DateLike) -> Optional[date]:
    """Coerce a date, datetime or ISO string to a date; None if it cannot be read."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            return None
    return None


def _activity_date(record: ApplicationRecord) -> Optional[date]:
    return parse_date(record.application_date) or parse_date(record.created_at)


def _color_for(label: str, table: dict[str, str]) -> str:
    return table.get(label, NEUTRAL_COLOR)


def _response_rate(responses: int, total: int) -> int:
    # round-half-up to match the dashboard's integer percentages
    if not total:
        return 0
    return int(responses * 100 / total + 0.5)


def empty_summary(today: Optional[date] = None, weeks: Optional[int] = None) -> AnalyticsSummary:
    """The all-zero summary used for empty input and failed fetches."""
    return aggregate([], today=today, weeks=weeks)


def aggregate(
    records: Iterable[ApplicationRecord],
    today: Optional[date] = None,
    weeks: Optional[int] = None,
) -> AnalyticsSummary:
    """
    Compute the analytics summary for a snapshot of application records.

    Args:
        records: application records; never mutated or retained.
        today: the reference date (or datetime) for the weekly window; defaults to the clock.
        weeks: length of the weekly window, defaults to settings.analytics_weeks.
            Zero gives an empty weekly series.

    Returns:
        A fresh AnalyticsSummary. Never raises for record content: bad dates
        only drop the record from the weekly series, missing work types only
        drop it from the work-type distribution.
    """
    if today is None:
        today = date.today()
    elif isinstance(today, datetime):
        today = today.date()
    if weeks is None:
        weeks = settings.analytics_weeks

    week_starts = trailing_week_starts(today, weeks)
    weekly_counts = {monday: 0 for monday in week_starts}

    total = 0
    interviews = 0
    offers = 0
    responses = 0
    status_counts: dict[str, int] = {}
    work_type_counts: dict[str, int] = {}

    for record in records:
        total += 1
        status = record.status or ""

        in_interview = status in INTERVIEW_STATUSES
        in_offer = status in OFFER_STATUSES
        if in_interview:
            interviews += 1
        if in_offer:
            offers += 1
        if in_interview or in_offer:
            responses += 1

        label = status_label(status)
        status_counts[label] = status_counts.get(label, 0) + 1

        activity = _activity_date(record)
        if activity is not None:
            monday = week_start(activity)
            if monday in weekly_counts:
                weekly_counts[monday] += 1

        work_type = work_type_label(record.work_type)
        if work_type is not None:
            work_type_counts[work_type] = work_type_counts.get(work_type, 0) + 1

    # sorted() is stable, so ties keep first-seen order
    status_distribution = sorted(
        (
            ChartSlice(name=label, value=count, color=_color_for(label, STATUS_COLORS))
            for label, count in status_counts.items()
        ),
        key=lambda item: item.value,
        reverse=True,
    )

    return AnalyticsSummary(
        total_applications=total,
        total_interviews=interviews,
        total_offers=offers,
        response_rate=_response_rate(responses, total),
        status_distribution=status_distribution,
        weekly_activity=[
            WeeklyActivityPoint(name=week_label(monday), applications=weekly_counts[monday])
            for monday in week_starts
        ],
        work_type_distribution=[
            ChartSlice(name=label, value=count, color=_color_for(label, WORK_TYPE_COLORS))
            for label, count in work_type_counts.items()
        ],
    )


@with_retry
def fetch_analytics_records(db: Session, user) -> list[ApplicationRecord]:
    """Snapshot the columns the aggregator needs for one user's applications."""
    rows = db.query(
        Application.id,
        Application.status,
        Application.work_type,
        Application.application_date,
        Application.created_at,
    ).filter(Application.user_id == user.id).all()
    return [record_from_row(row) for row in rows]


def get_analytics_data(db: Session, user, today: Optional[date] = None) -> AnalyticsSummary:
    """
    Fetch the user's applications and aggregate them.

    A failed fetch is logged and replaced by the zero summary; the dashboard
    then simply renders empty.
    """
    try:
        records = fetch_analytics_records(db, user)
    except SQLAlchemyError as exc:
        logger.error("Error fetching analytics data for user %s: %s", user.id, exc)
        db.rollback()
        return empty_summary(today)

    logger.debug("Aggregating %d applications for user %s", len(records), user.id)
    return aggregate(records, today=today)
