import pytest
import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["CORPORATE_EMAIL_DOMAIN"] = "@ielektron.com"
os.environ.pop("SKILL_TAXONOMY_FILE", None)

from skillgap.database import Base, get_db
from skillgap.main import app
from skillgap.services.skillgap_client import SkillGapClient
from skillgap.services.taxonomy import SkillTaxonomy
from fastapi.testclient import TestClient

# SQLite in-memory database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Create tables once for the whole test session."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture(scope="function")
def db_session():
    """Get a clean database session for each test function with rollback safety."""
    connection = engine.connect()
    transaction = connection.begin()
    # Use sessionmaker with the active connection
    session = TestingSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()

@pytest.fixture(scope="function")
def client(db_session):
    """Get a TestClient that uses the test database session via dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()

@pytest.fixture(scope="function")
def api_client(client):
    """SkillGapClient talking to the in-process app through the TestClient."""
    return SkillGapClient(base_url="http://testserver", session=client)

@pytest.fixture
def taxonomy():
    return SkillTaxonomy.default()

@pytest.fixture
def submission():
    """Builder for intake payloads in the camelCase shape the web form posts."""
    def _submission(employee_id="E100", email=None, ratings=None, selected=None, **extra):
        ratings = {"Python": 4, "SQL": 2} if ratings is None else ratings
        payload = {
            "name": extra.pop("name", "Asha Rao"),
            "employeeId": employee_id,
            "email": email or f"{employee_id.lower()}@ielektron.com",
            "selectedSkills": list(ratings) if selected is None else selected,
            "skillRatings": [{"skill": s, "rating": r} for s, r in ratings.items()],
            "additionalSkills": extra.pop("additional_skills", ""),
        }
        payload.update(extra)
        return payload
    return _submission

@pytest.fixture
def created_response(client, submission):
    """Create one response (Python:4, SQL:2) through the API and return its id."""
    resp = client.post("/api/responses", json=submission())
    assert resp.status_code == 200, resp.text
    return resp.json()["id"]
