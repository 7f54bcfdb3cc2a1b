import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobtrack.config import settings
from jobtrack.database import create_app_engine, init_db, get_db
from jobtrack.main import app
from jobtrack.rate_limit import limiter


@pytest.fixture
def engine():
    # One shared connection keeps the in-memory database alive across sessions
    test_engine = create_app_engine("sqlite://", poolclass=StaticPool)
    init_db(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory, monkeypatch):
    def _get_test_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    monkeypatch.setattr(settings.auth, "single_user_mode", True)
    monkeypatch.setattr(limiter, "enabled", False)
    app.dependency_overrides[get_db] = _get_test_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def multi_user(client, monkeypatch):
    """A client running with authentication switched on."""
    monkeypatch.setattr(settings.auth, "single_user_mode", False)
    return client


@pytest.fixture
def make_application(client):
    """Create an application through the API and return its JSON."""
    def _make(**overrides):
        payload = {"company_name": "Acme", "position": "Backend Engineer"}
        payload.update(overrides)
        response = client.post("/api/applications/", json=payload)
        assert response.status_code == 201, response.text
        return response.json()
    return _make
