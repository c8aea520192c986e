# tests/conftest.py
"""
Shared fixtures: settings, an in-memory store, a wired app and sample content.
"""

import pytest
from fastapi.testclient import TestClient

from portfolio_api.core.config import Settings
from portfolio_api.core.rate_limit_config import limiter
from portfolio_api.main import create_app
from portfolio_api.services.kv_store import InMemoryStore

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse-battery"


class FakeClock:
    """Manually advanced clock returning epoch milliseconds"""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def test_settings():
    return Settings(
        ADMIN_EMAIL=ADMIN_EMAIL,
        ADMIN_PASSWORD=ADMIN_PASSWORD,
        STORE_BACKEND="memory",
        RATE_LIMIT_ENABLED=False,
        _env_file=None,
    )


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def client(test_settings, store):
    """TestClient around a fresh app (lifespan runs inside the context)"""
    limiter.reset()
    with TestClient(create_app(test_settings, store)) as test_client:
        yield test_client


@pytest.fixture
def admin_client(client):
    """Client whose cookie jar holds a valid admin session"""
    response = client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client


# ===========================================
# SAMPLE CONTENT
# ===========================================

@pytest.fixture
def personal_info():
    return {
        "name": "Jane Doe",
        "title": "Software Engineer",
        "description": "Builds backends.",
        "contact": {"email": "jane@example.com", "phone": "+1 555 0100"},
        "highlights": ["10 years of Python"],
    }


@pytest.fixture
def experiences():
    return [
        {
            "id": "exp-old",
            "company": "Old Corp",
            "role": "Developer",
            "period": {"start": "2015-01", "end": "2018-06"},
            "achievements": ["Shipped v1"],
        },
        {
            "id": "exp-current",
            "company": "Now Inc",
            "role": "Lead",
            "period": {"start": "2021-03", "end": "Present"},
            "achievements": ["Leads the platform team"],
            "technologies": ["Python", "Redis"],
        },
        {
            "id": "exp-mid",
            "company": "Mid LLC",
            "role": "Senior Developer",
            "period": {"start": "2018-07", "end": "2021-02"},
            "achievements": ["Migrated to the cloud"],
        },
    ]


@pytest.fixture
def projects():
    return [
        {
            "id": "proj-undated",
            "title": "Side Project",
            "description": "Weekend hack",
            "technologies": ["Go"],
        },
        {
            "id": "proj-2020",
            "title": "Data Pipeline",
            "description": "Batch ETL",
            "technologies": ["Python"],
            "category": "Data",
            "endDate": "2020-05",
        },
        {
            "id": "proj-featured",
            "title": "Portfolio",
            "description": "This site",
            "technologies": ["TypeScript", "Python"],
            "category": "Web",
            "featured": True,
        },
        {
            "id": "proj-2023",
            "title": "API Gateway",
            "description": "Edge routing",
            "technologies": ["Rust"],
            "category": "Web",
            "endDate": "2023-01-15",
        },
    ]


@pytest.fixture
def skills():
    return [
        {
            "id": "tools",
            "name": "Tools",
            "order": 2,
            "skills": [
                {"id": "docker", "name": "Docker", "categoryId": "tools", "proficiency": "advanced"},
            ],
        },
        {
            "id": "languages",
            "name": "Languages",
            "order": 1,
            "skills": [
                {"id": "go", "name": "Go", "categoryId": "languages", "proficiency": "intermediate"},
                {"id": "python", "name": "Python", "categoryId": "languages", "proficiency": "expert", "priority": 2},
                {"id": "sql", "name": "SQL", "categoryId": "languages", "proficiency": "expert", "priority": 1},
            ],
        },
    ]


@pytest.fixture
def contact_payload():
    return {
        "name": "Visitor",
        "email": "visitor@example.org",
        "subject": "Hello",
        "message": "I would like to talk about a project.",
    }
