# tests/services/test_portfolio_service.py
"""
Tests for the public portfolio views and dashboard statistics.
"""
from datetime import date, datetime, timezone

import pytest

from portfolio_api.services.contact_service import CONTACT_MESSAGES_KEY, ContactService
from portfolio_api.services.content_service import ContentService
from portfolio_api.services.portfolio_service import (
    PortfolioService,
    parse_date,
    sort_experiences,
    sort_projects,
    sort_skill_categories,
)

NOW = datetime(2024, 6, 30, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def content(store):
    return ContentService(store)


@pytest.fixture
def portfolio(store, content):
    return PortfolioService(content, ContactService(store), clock=lambda: NOW)


class TestParseDate:

    @pytest.mark.parametrize("value, expected", [
        ("2023-01-15", date(2023, 1, 15)),
        ("2023-04", date(2023, 4, 1)),
        ("2019", date(2019, 1, 1)),
        ("2024-02-03T10:00:00.000Z", date(2024, 2, 3)),
    ])
    def test_supported_formats(self, value, expected):
        assert parse_date(value) == expected

    @pytest.mark.parametrize("value", [None, "", "Present", "soon"])
    def test_unparseable(self, value):
        assert parse_date(value) is None


class TestSorting:

    def test_experiences_current_first_then_latest_end(self, experiences):
        ordered = sort_experiences(experiences)

        assert [e["id"] for e in ordered] == ["exp-current", "exp-mid", "exp-old"]

    def test_experiences_unparseable_end_last(self, experiences):
        experiences[0]["period"]["end"] = "someday"

        ordered = sort_experiences(experiences)

        assert ordered[-1]["id"] == "exp-old"

    def test_projects_featured_then_dated_then_undated(self, projects):
        ordered = sort_projects(projects)

        assert [p["id"] for p in ordered] == ["proj-featured", "proj-2023", "proj-2020", "proj-undated"]

    def test_sorting_returns_stored_documents(self, projects):
        ordered = sort_projects(projects)

        assert "endDate" in ordered[1]
        assert "end_date" not in ordered[1]

    def test_skill_categories_and_skills(self, skills):
        ordered = sort_skill_categories(skills)

        assert [c["id"] for c in ordered] == ["languages", "tools"]
        assert [s["id"] for s in ordered[0]["skills"]] == ["sql", "python", "go"]

    def test_skills_tie_broken_by_name(self):
        category = {
            "id": "c",
            "name": "C",
            "skills": [
                {"id": "b", "name": "beta", "categoryId": "c"},
                {"id": "a", "name": "Alpha", "categoryId": "c"},
            ],
        }

        ordered = sort_skill_categories([category])

        assert [s["id"] for s in ordered[0]["skills"]] == ["a", "b"]


class TestPublicViews:

    async def test_missing_sections_are_none(self, portfolio):
        assert await portfolio.personal_info() is None
        assert await portfolio.skills() is None
        assert await portfolio.experiences() is None
        assert await portfolio.projects() is None

    async def test_views_are_sorted(self, portfolio, content, projects, experiences):
        await content.update_projects(projects)
        await content.update_experiences(experiences)

        assert (await portfolio.projects())[0]["id"] == "proj-featured"
        assert (await portfolio.experiences())[0]["id"] == "exp-current"

    async def test_stored_order_is_untouched(self, portfolio, content, projects):
        await content.update_projects(projects)

        await portfolio.projects()

        assert await content.get_projects() == projects

    async def test_personal_info(self, portfolio, content, personal_info):
        await content.update_personal_info(personal_info)

        assert await portfolio.personal_info() == personal_info


class TestDashboardStats:

    async def test_empty_store(self, portfolio):
        stats = await portfolio.dashboard_stats()

        assert stats["contactMessages"]["total"] == 0
        assert stats["projects"] == {"total": 0, "featured": 0, "categories": {}}
        assert stats["experiences"] == {"total": 0, "current": 0}
        assert stats["skills"]["total"] == 0
        assert stats["skills"]["byProficiency"] == {"expert": 0, "advanced": 0, "intermediate": 0, "beginner": 0}

    async def test_counts(self, portfolio, content, store, projects, experiences, skills):
        await content.update_projects(projects)
        await content.update_experiences(experiences)
        await content.update_skills(skills)

        base = {"name": "n", "email": "e@x.io", "subject": "s", "message": "m" * 10}
        await store.write(CONTACT_MESSAGES_KEY, [
            {**base, "id": "c1", "createdAt": "2024-06-29T08:00:00.000Z", "status": "unread", "isImportant": True},
            {**base, "id": "c2", "createdAt": "2024-06-10T08:00:00.000Z", "status": "read", "isImportant": False},
            {**base, "id": "c3", "createdAt": "2024-01-01T08:00:00.000Z", "status": "unread", "isImportant": False},
        ])

        stats = await portfolio.dashboard_stats()

        assert stats["contactMessages"] == {
            "total": 3,
            "unread": 2,
            "important": 1,
            "recent7Days": 1,
            "recent30Days": 2,
        }
        assert stats["projects"]["total"] == 4
        assert stats["projects"]["featured"] == 1
        assert stats["projects"]["categories"] == {"Uncategorized": 1, "Data": 1, "Web": 2}
        assert stats["experiences"] == {"total": 3, "current": 1}
        assert stats["skills"]["total"] == 4
        assert stats["skills"]["categories"] == 2
        assert stats["skills"]["byProficiency"]["expert"] == 2
