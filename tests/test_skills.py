from jobtrack.models import SkillSuggestion
from jobtrack.services.skills import DEFAULT_SKILLS, fetch_skill_suggestions, seed_default_skills


def _add(db, label, locale="en", popularity=0):
    db.add(SkillSuggestion(label=label, locale=locale, popularity=popularity))
    db.commit()


def test_seed_default_skills_only_once(db):
    expected = sum(len(entries) for entries in DEFAULT_SKILLS.values())

    assert seed_default_skills(db) == expected
    assert seed_default_skills(db) == 0
    assert db.query(SkillSuggestion).count() == expected


def test_prefix_match_is_case_insensitive_and_ranked_by_popularity(db):
    _add(db, "Python", popularity=100)
    _add(db, "PyTorch", popularity=60)
    _add(db, "Pandas", popularity=80)
    _add(db, "Typescript", popularity=90)

    labels = [s.label for s in fetch_skill_suggestions(db, "py")]

    assert labels == ["Python", "PyTorch"]


def test_ties_are_ordered_by_label(db):
    _add(db, "Go", popularity=10)
    _add(db, "Git", popularity=10)

    assert [s.label for s in fetch_skill_suggestions(db, "g")] == ["Git", "Go"]


def test_blank_query_returns_nothing(db):
    _add(db, "Python", popularity=100)

    assert fetch_skill_suggestions(db, "") == []
    assert fetch_skill_suggestions(db, "   ") == []


def test_wildcards_in_query_match_literally(db):
    _add(db, "C#", popularity=50)
    _add(db, "C++", popularity=40)
    _add(db, "Communication", popularity=30)
    _add(db, "100%_coverage", popularity=5)
    _add(db, "100xcoverage", popularity=5)

    assert fetch_skill_suggestions(db, "%") == []
    assert [s.label for s in fetch_skill_suggestions(db, "c#")] == ["C#"]
    assert [s.label for s in fetch_skill_suggestions(db, "100%_")] == ["100%_coverage"]


def test_locale_and_limit(db):
    _add(db, "Proje Yönetimi", locale="tr", popularity=80)
    _add(db, "Project Management", locale="en", popularity=70)
    for i in range(12):
        _add(db, f"Skill {i:02d}", popularity=i)

    assert [s.label for s in fetch_skill_suggestions(db, "proj", locale="tr")] == ["Proje Yönetimi"]
    assert [s.label for s in fetch_skill_suggestions(db, "proj", locale="en")] == ["Project Management"]
    assert len(fetch_skill_suggestions(db, "skill")) == 8
    assert len(fetch_skill_suggestions(db, "skill", limit=3)) == 3


def test_suggestions_endpoint(client, db):
    _add(db, "FastAPI", popularity=64)
    _add(db, "Figma", popularity=60)

    response = client.get("/api/skills/suggestions", params={"q": "f", "limit": 1})

    assert response.status_code == 200
    assert response.json() == [{"label": "FastAPI"}]
    assert client.get("/api/skills/suggestions", params={"q": "f", "locale": "de"}).status_code == 422
