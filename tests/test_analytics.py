from datetime import date, datetime, timedelta

from jobtrack.services.analytics import (
    ApplicationRecord,
    COLORS,
    NEUTRAL_COLOR,
    aggregate,
    empty_summary,
    record_from_row,
    status_label,
    week_label,
    week_start,
    work_type_label,
)

TODAY = date(2025, 3, 12)  # a Wednesday; its week starts Monday 10/3


def _record(status: str, work_type: str = None, application_date=TODAY, created_at=None, id=None) -> ApplicationRecord:
    return ApplicationRecord(
        id=id if id is not None else f"{status}-{application_date}",
        status=status,
        work_type=work_type,
        application_date=application_date,
        created_at=created_at,
    )


def _slices(items):
    return [(item.name, item.value) for item in items]


def test_empty_input_gives_zero_summary_with_twelve_weeks():
    summary = aggregate([], today=TODAY)

    assert summary.total_applications == 0
    assert summary.total_interviews == 0
    assert summary.total_offers == 0
    assert summary.response_rate == 0
    assert summary.status_distribution == []
    assert summary.work_type_distribution == []
    assert len(summary.weekly_activity) == 12
    assert all(point.applications == 0 for point in summary.weekly_activity)
    assert summary.weekly_activity[0].name == "23/12"
    assert summary.weekly_activity[-1].name == "10/3"


def test_empty_summary_matches_aggregate_of_nothing():
    assert empty_summary(TODAY) == aggregate([], today=TODAY)


def test_mixed_statuses_all_dated_today():
    records = [_record("applied"), _record("hr_interview"), _record("offer")]

    summary = aggregate(records, today=TODAY)

    assert summary.total_applications == 3
    assert summary.total_interviews == 1
    assert summary.total_offers == 1
    assert summary.response_rate == 67
    assert _slices(summary.status_distribution) == [("applied", 1), ("Hr Interview", 1), ("offer", 1)]
    assert summary.weekly_activity[-1].applications == 3
    assert sum(point.applications for point in summary.weekly_activity[:-1]) == 0


def test_legacy_and_snake_case_labels_stay_distinct():
    records = [_record("hr_interview"), _record("HR Interview")]

    summary = aggregate(records, today=TODAY)

    assert summary.total_interviews == 2
    assert _slices(summary.status_distribution) == [("Hr Interview", 1), ("HR Interview", 1)]
    colors = {item.name: item.color for item in summary.status_distribution}
    assert colors["HR Interview"] == COLORS["orange"]
    assert colors["Hr Interview"] == NEUTRAL_COLOR


def test_response_rate_counts_each_record_once():
    records = [_record("offer"), _record("technical_interview"), _record("rejected"), _record("applied")]

    summary = aggregate(records, today=TODAY)

    assert summary.total_interviews + summary.total_offers == 2
    assert summary.response_rate == 50


def test_response_rate_is_100_when_every_record_responded():
    records = [_record("Accepted"), _record("management_interview"), _record("Offer")]

    assert aggregate(records, today=TODAY).response_rate == 100


def test_response_rate_rounds_half_up():
    # 1 of 8 = 12.5%
    records = [_record("offer")] + [_record("applied") for _ in range(7)]

    assert aggregate(records, today=TODAY).response_rate == 13


def test_status_matching_is_case_sensitive():
    summary = aggregate([_record("OFFER"), _record("Hr_interview")], today=TODAY)

    assert summary.total_offers == 0
    assert summary.total_interviews == 0


def test_status_distribution_sorted_by_count_with_stable_ties():
    records = [
        _record("applied"),
        _record("rejected"),
        _record("rejected"),
        _record("test_case"),
        _record("offer"),
    ]

    summary = aggregate(records, today=TODAY)

    assert _slices(summary.status_distribution) == [
        ("rejected", 2), ("applied", 1), ("Test Case", 1), ("offer", 1),
    ]


def test_status_distribution_sums_to_total_including_blank_status():
    records = [_record("applied"), _record(""), _record(None)]

    summary = aggregate(records, today=TODAY)

    assert sum(item.value for item in summary.status_distribution) == 3
    assert ("", 2) in _slices(summary.status_distribution)


def test_colors_come_from_lookup_tables():
    records = [
        _record("Applied", "remote"),
        _record("Rejected", "hybrid"),
        _record("Withdrawn", "onsite"),
        _record("Ghosted", "freelance"),
    ]

    summary = aggregate(records, today=TODAY)

    status_colors = {item.name: item.color for item in summary.status_distribution}
    assert status_colors == {
        "Applied": COLORS["blue"],
        "Rejected": COLORS["red"],
        "Withdrawn": COLORS["gray"],
        "Ghosted": NEUTRAL_COLOR,
    }
    work_type_colors = {item.name: item.color for item in summary.work_type_distribution}
    assert work_type_colors == {
        "Remote": COLORS["blue"],
        "Hybrid": COLORS["purple"],
        "Onsite": COLORS["orange"],
        "Freelance": NEUTRAL_COLOR,
    }


def test_work_type_distribution_skips_blank_and_keeps_first_seen_order():
    records = [
        _record("applied", "onsite"),
        _record("applied", " remote "),
        _record("applied", None),
        _record("applied", "   "),
        _record("applied", "onsite"),
    ]

    summary = aggregate(records, today=TODAY)

    assert _slices(summary.work_type_distribution) == [("Onsite", 2), ("Remote", 1)]


def test_legacy_hypbrid_spelling_gets_hybrid_color():
    summary = aggregate([_record("applied", "hypbrid")], today=TODAY)

    assert summary.work_type_distribution[0].name == "Hypbrid"
    assert summary.work_type_distribution[0].color == COLORS["purple"]


def test_weekly_buckets_use_application_date_then_created_at():
    records = [
        _record("applied", application_date=date(2025, 3, 3)),  # previous week
        _record("applied", application_date=None, created_at=datetime(2025, 3, 11, 9, 30)),
        _record("applied", application_date="2025-02-24"),
        _record("applied", application_date="2025-03-10T08:00:00.000Z"),
    ]

    summary = aggregate(records, today=TODAY)
    counts = {point.name: point.applications for point in summary.weekly_activity}

    assert counts["10/3"] == 2
    assert counts["3/3"] == 1
    assert counts["24/2"] == 1


def test_records_outside_window_or_with_bad_dates_only_leave_weekly_series():
    records = [
        _record("applied", application_date=date(2024, 6, 1)),
        _record("offer", application_date="not-a-date", created_at="also bad"),
        _record("applied", application_date=date(2025, 3, 20)),  # next week
    ]

    summary = aggregate(records, today=TODAY)

    assert summary.total_applications == 3
    assert summary.total_offers == 1
    assert sum(point.applications for point in summary.weekly_activity) == 0
    assert len(summary.weekly_activity) == 12


def test_unparseable_application_date_falls_back_to_created_at():
    record = _record("applied", application_date="31/02/2025", created_at="2025-03-12")

    summary = aggregate([record], today=TODAY)

    assert summary.weekly_activity[-1].applications == 1


def test_weekly_series_length_follows_weeks_argument():
    summary = aggregate([_record("applied")], today=TODAY, weeks=4)

    assert [point.name for point in summary.weekly_activity] == ["17/2", "24/2", "3/3", "10/3"]


def test_zero_weeks_gives_an_empty_weekly_series():
    summary = aggregate([_record("applied")], today=TODAY, weeks=0)

    assert summary.weekly_activity == []
    assert summary.total_applications == 1


def test_today_may_be_a_datetime():
    summary = aggregate([_record("applied")], today=datetime(2025, 3, 12, 10, 30))

    assert len(summary.weekly_activity) == 12
    assert summary.weekly_activity[-1].name == "10/3"
    assert summary.weekly_activity[-1].applications == 1


def test_large_input_keeps_totals_consistent():
    statuses = ["applied", "hr_interview", "technical_interview", "offer", "rejected", "accepted", ""]
    records = [
        _record(
            statuses[i % len(statuses)],
            work_type=["remote", "hybrid", "onsite", None][i % 4],
            application_date=date(2024, 1, 1) + timedelta(days=i % 500),
            id=i,
        )
        for i in range(10_000)
    ]

    summary = aggregate(records, today=TODAY)

    assert summary.total_applications == 10_000
    assert len(summary.weekly_activity) == 12
    assert 0 < sum(point.applications for point in summary.weekly_activity) <= 10_000
    assert sum(item.value for item in summary.status_distribution) == 10_000
    assert sum(item.value for item in summary.work_type_distribution) == 7_500


def test_aggregate_does_not_mutate_input():
    records = [_record("applied", "remote"), _record("offer", "hybrid")]
    snapshot = list(records)

    aggregate(records, today=TODAY)

    assert records == snapshot


def test_aggregate_accepts_a_generator():
    summary = aggregate((_record("applied") for _ in range(5)), today=TODAY)

    assert summary.total_applications == 5


def test_summary_serializes_with_camel_case_keys():
    data = aggregate([_record("offer", "remote")], today=TODAY).model_dump(by_alias=True)

    assert set(data) == {
        "totalApplications", "totalInterviews", "totalOffers", "responseRate",
        "statusDistribution", "weeklyActivity", "workTypeDistribution",
    }
    assert data["statusDistribution"] == [{"name": "offer", "value": 1, "color": COLORS["green"]}]


def test_status_label():
    assert status_label("hr_interview") == "Hr Interview"
    assert status_label("technical_interview") == "Technical Interview"
    assert status_label("HR Interview") == "HR Interview"
    assert status_label("applied") == "applied"
    assert status_label("") == ""
    assert status_label(None) == ""


def test_work_type_label():
    assert work_type_label("remote") == "Remote"
    assert work_type_label("  onsite ") == "Onsite"
    assert work_type_label("") is None
    assert work_type_label("   ") is None
    assert work_type_label(None) is None


def test_week_start_and_label():
    assert week_start(date(2025, 3, 16)) == date(2025, 3, 10)  # Sunday
    assert week_start(date(2025, 3, 10)) == date(2025, 3, 10)
    assert week_start(date(2025, 1, 1)) == date(2024, 12, 30)
    assert week_label(date(2025, 1, 6)) == "6/1"
    assert week_label(date(2024, 12, 30)) == "30/12"


def test_record_from_row_accepts_mappings_and_objects():
    class Row:
        id = 7
        status = "offer"
        work_type = "remote"
        application_date = TODAY
        created_at = None

    from_dict = record_from_row({"id": 7, "status": "offer", "work_type": "remote", "application_date": TODAY})

    assert from_dict == record_from_row(Row())
