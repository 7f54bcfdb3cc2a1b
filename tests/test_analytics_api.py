from sqlalchemy.exc import OperationalError

import jobtrack.services.analytics as analytics_service


def test_analytics_endpoint_returns_camel_case_summary(client, make_application):
    make_application(status="offer", work_type="remote", application_date="2025-03-11")
    make_application(status="hr_interview", work_type="hybrid", application_date="2025-03-03")
    make_application(status="applied", work_type="remote", application_date="2024-01-01")

    response = client.get("/api/analytics", params={"today": "2025-03-12"})

    assert response.status_code == 200
    data = response.json()
    assert data["totalApplications"] == 3
    assert data["totalInterviews"] == 1
    assert data["totalOffers"] == 1
    assert data["responseRate"] == 67
    assert len(data["weeklyActivity"]) == 12
    assert data["weeklyActivity"][-1] == {"name": "10/3", "applications": 1}
    assert data["weeklyActivity"][-2] == {"name": "3/3", "applications": 1}
    assert {s["name"]: s["value"] for s in data["workTypeDistribution"]} == {"Remote": 2, "Hybrid": 1}


def test_analytics_endpoint_with_no_applications(client):
    response = client.get("/api/analytics", params={"today": "2025-03-12"})

    data = response.json()
    assert data["totalApplications"] == 0
    assert data["responseRate"] == 0
    assert data["statusDistribution"] == []
    assert [w["applications"] for w in data["weeklyActivity"]] == [0] * 12


def test_analytics_falls_back_to_zero_summary_on_database_error(client, make_application, monkeypatch, caplog):
    make_application(status="offer")

    def _broken_fetch(db, user):
        raise OperationalError("SELECT ...", {}, Exception("database is locked"))

    monkeypatch.setattr(analytics_service, "fetch_analytics_records", _broken_fetch)

    with caplog.at_level("ERROR", logger="jobtrack.analytics"):
        response = client.get("/api/analytics", params={"today": "2025-03-12"})

    assert response.status_code == 200
    data = response.json()
    assert data["totalApplications"] == 0
    assert len(data["weeklyActivity"]) == 12
    assert "Error fetching analytics data" in caplog.text


def test_analytics_only_counts_the_callers_applications(client, db, make_application):
    from jobtrack.auth.models import User
    from jobtrack.models import Application

    other = User(email="other@example.com", name="Other")
    db.add(other)
    db.commit()
    db.add(Application(user_id=other.id, company_name="Else", position="Dev", status="offer"))
    db.commit()

    make_application(status="applied")

    data = client.get("/api/analytics").json()

    assert data["totalApplications"] == 1
    assert data["totalOffers"] == 0


def test_analytics_rejects_malformed_today(client):
    response = client.get("/api/analytics", params={"today": "12-03-2025"})

    assert response.status_code == 422
