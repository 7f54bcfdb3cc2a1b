from jobtrack.services.user_settings import DEFAULT_INDUSTRIES, DEFAULT_SOURCES


def test_default_settings(client):
    data = client.get("/api/settings").json()

    assert data["language"] == "en"
    assert data["custom_sources"] == []
    assert data["all_sources"] == DEFAULT_SOURCES
    assert data["all_industries"] == DEFAULT_INDUSTRIES


def test_update_language_and_lists(client):
    response = client.patch(
        "/api/settings",
        json={"language": "tr", "custom_sources": [" Wellfound ", "", "Wellfound"]},
    )

    data = response.json()
    assert data["language"] == "tr"
    assert data["custom_sources"] == ["Wellfound"]
    assert data["all_sources"] == DEFAULT_SOURCES + ["Wellfound"]
    assert client.patch("/api/settings", json={"language": "de"}).status_code == 422


def test_add_and_remove_custom_source(client):
    data = client.post("/api/settings/sources/Hacker News").json()
    assert data["custom_sources"] == ["Hacker News"]
    assert data["all_sources"][-1] == "Hacker News"

    # duplicates and built-ins are ignored
    assert client.post("/api/settings/sources/Hacker News").json()["custom_sources"] == ["Hacker News"]
    assert client.post("/api/settings/sources/LinkedIn").json()["custom_sources"] == ["Hacker News"]
    assert client.post("/api/settings/sources/%20%20").json()["custom_sources"] == ["Hacker News"]

    assert client.delete("/api/settings/sources/Hacker News").json()["custom_sources"] == []


def test_add_custom_industry(client):
    data = client.post("/api/settings/industries/Gaming").json()

    assert data["custom_industries"] == ["Gaming"]
    assert data["all_industries"] == DEFAULT_INDUSTRIES + ["Gaming"]


def test_unknown_list_is_404(client):
    assert client.post("/api/settings/colors/Blue").status_code == 404


def test_export_contains_applications_and_settings(client, make_application):
    make_application(company_name="Acme", contacts=[{"name": "Jane"}], skills=["Go"])
    client.post("/api/settings/industries/Gaming")

    response = client.get("/api/export")

    assert response.status_code == 200
    assert "job-apply-track-backup-" in response.headers["content-disposition"]
    data = response.json()
    assert set(data) == {"applications", "settings", "exportedAt"}
    assert data["applications"][0]["company_name"] == "Acme"
    assert data["applications"][0]["contacts"][0]["name"] == "Jane"
    assert "salary_range" not in data["applications"][0]
    assert data["settings"]["custom_industries"] == ["Gaming"]


def test_export_then_import_restores_data(client, make_application):
    make_application(company_name="Acme", status="offer", notes="hello")
    backup = client.get("/api/export").json()
    client.delete("/api/applications")

    response = client.post("/api/import", json=backup)

    assert response.json() == {"applications_imported": 1, "settings_imported": True, "errors": []}
    restored = client.get("/api/applications/").json()
    assert [(a["company_name"], a["status"], a["notes"]) for a in restored] == [("Acme", "offer", "hello")]


def test_import_requires_applications_and_settings(client):
    assert client.post("/api/import", json={"applications": []}).status_code == 422
    assert client.post("/api/import", json={"settings": {}}).status_code == 422


def test_import_keeps_legacy_status_and_reports_bad_entries(client):
    backup = {
        "applications": [
            {"company_name": "Old Co", "position": "Dev", "status": "HR Interview", "work_type": "Hypbrid"},
            {"position": "No company"},
        ],
        "settings": {"language": "tr", "custom_sources": ["Wellfound"]},
    }

    result = client.post("/api/import", json=backup).json()

    assert result["applications_imported"] == 1
    assert len(result["errors"]) == 1
    assert result["errors"][0].startswith("Application 2")
    assert client.get("/api/settings").json()["custom_sources"] == ["Wellfound"]

    analytics = client.get("/api/analytics").json()
    assert analytics["totalInterviews"] == 1
    assert analytics["statusDistribution"][0]["name"] == "HR Interview"
    assert analytics["workTypeDistribution"][0]["name"] == "Hypbrid"


def test_import_formats_structured_salary_fields(client):
    backup = {
        "applications": [
            {"company_name": "A", "position": "B", "salary_range_min": "100"},
            {
                "company_name": "C", "position": "D",
                "salary_expectation_currency": "EUR", "salary_expectation_amount": "70000",
            },
        ],
        "settings": {},
    }

    response = client.post("/api/import", json=backup)

    assert response.status_code == 200
    assert response.json()["applications_imported"] == 2
    by_company = {a["company_name"]: a for a in client.get("/api/applications/").json()}
    assert by_company["A"]["company_salary_range"] == "USD 100"
    assert by_company["C"]["salary_expectation"] == "EUR 70000"


def test_import_converts_created_at_offsets_to_utc(client):
    backup = {
        "applications": [
            {"company_name": "Offset", "position": "Dev", "created_at": "2025-03-12T23:30:00-05:00"},
            {"company_name": "Zulu", "position": "Dev", "created_at": "2025-03-12T08:00:00.000Z"},
            {"company_name": "Naive", "position": "Dev", "created_at": "2025-03-12T08:00:00"},
        ],
        "settings": {},
    }

    client.post("/api/import", json=backup)

    created = {a["company_name"]: a["created_at"] for a in client.get("/api/applications/").json()}
    assert created["Offset"] == "2025-03-13T04:30:00"
    assert created["Zulu"] == "2025-03-12T08:00:00"
    assert created["Naive"] == "2025-03-12T08:00:00"
