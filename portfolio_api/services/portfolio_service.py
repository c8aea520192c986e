# portfolio_api/services/portfolio_service.py
"""
Public, sorted views of the portfolio and dashboard statistics.

Sorting works on the typed models but returns the stored documents, so
public readers see exactly the fields the admin saved.
"""
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from portfolio_api.models.content_models import (
    ContactMessage,
    Experience,
    PersonalInfo,
    Project,
    Skill,
    SkillCategory,
)
from portfolio_api.services.contact_service import ContactService, utc_now
from portfolio_api.services.content_service import ContentService

logger = logging.getLogger(__name__)

PROFICIENCY_RANK = {"expert": 4, "advanced": 3, "intermediate": 2, "beginner": 1}
DEFAULT_PRIORITY = 999
DATE_FORMATS = ("%Y-%m-%d", "%Y-%m", "%Y")

Document = Dict[str, Any]


def parse_date(value: Optional[str]) -> Optional[date]:
    """Parse YYYY, YYYY-MM, YYYY-MM-DD or a full ISO timestamp; None if unparseable"""
    if not value:
        return None

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue

    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def _skill_key(skill: Skill) -> Tuple[int, float, str]:
    rank = PROFICIENCY_RANK[skill.proficiency or "beginner"]
    priority = skill.priority if skill.priority is not None else DEFAULT_PRIORITY
    return (-rank, priority, skill.name.casefold())


def sort_skill_categories(documents: List[Document]) -> List[Document]:
    """Categories by order; skills by proficiency, then priority, then name"""
    categories = [(SkillCategory.model_validate(doc), doc) for doc in documents]
    categories.sort(key=lambda pair: pair[0].order or 0)

    result = []
    for category, doc in categories:
        skills = sorted(
            zip(category.skills, doc.get("skills", [])),
            key=lambda pair: _skill_key(pair[0])
        )
        result.append({**doc, "skills": [skill_doc for _, skill_doc in skills]})

    return result


def _experience_key(experience: Experience) -> Tuple[int, int]:
    if experience.is_current:
        return (0, 0)

    end = parse_date(experience.period.end)
    if end is None:
        return (2, 0)

    return (1, -end.toordinal())


def sort_experiences(documents: List[Document]) -> List[Document]:
    """Current positions first, then most recent end date first"""
    pairs = [(Experience.model_validate(doc), doc) for doc in documents]
    pairs.sort(key=lambda pair: _experience_key(pair[0]))
    return [doc for _, doc in pairs]


def _project_key(project: Project) -> Tuple[int, int, int]:
    featured = 0 if project.featured else 1
    end = parse_date(project.end_date)
    if end is None:
        return (featured, 1, 0)
    return (featured, 0, -end.toordinal())


def sort_projects(documents: List[Document]) -> List[Document]:
    """Featured first; dated projects latest first, undated keep stored order"""
    pairs = [(Project.model_validate(doc), doc) for doc in documents]
    pairs.sort(key=lambda pair: _project_key(pair[0]))
    return [doc for _, doc in pairs]


class PortfolioService:
    """Read-only portfolio views for visitors and the admin dashboard"""

    def __init__(
        self,
        content: ContentService,
        contacts: ContactService,
        clock: Callable[[], datetime] = utc_now
    ):
        self.content = content
        self.contacts = contacts
        self._clock = clock

    async def personal_info(self) -> Optional[Document]:
        doc = await self.content.get_personal_info()
        if doc is None:
            return None
        # Validates the stored shape before it goes public
        PersonalInfo.model_validate(doc)
        return doc

    async def skills(self) -> Optional[List[Document]]:
        docs = await self.content.get_skills()
        return None if docs is None else sort_skill_categories(docs)

    async def experiences(self) -> Optional[List[Document]]:
        docs = await self.content.get_experiences()
        return None if docs is None else sort_experiences(docs)

    async def projects(self) -> Optional[List[Document]]:
        docs = await self.content.get_projects()
        return None if docs is None else sort_projects(docs)

    async def dashboard_stats(self) -> Dict[str, Any]:
        """Counts for the admin dashboard. Missing sections count as empty."""
        messages = [ContactMessage.model_validate(m) for m in await self.contacts.list_messages()]
        projects = [Project.model_validate(p) for p in await self.content.get_projects() or []]
        experiences = [Experience.model_validate(e) for e in await self.content.get_experiences() or []]
        categories = [SkillCategory.model_validate(c) for c in await self.content.get_skills() or []]

        now = self._clock()

        project_categories: Dict[str, int] = {}
        for project in projects:
            name = project.category or "Uncategorized"
            project_categories[name] = project_categories.get(name, 0) + 1

        by_proficiency = {level: 0 for level in ("expert", "advanced", "intermediate", "beginner")}
        for category in categories:
            for skill in category.skills:
                if skill.proficiency:
                    by_proficiency[skill.proficiency] += 1

        return {
            "contactMessages": {
                "total": len(messages),
                "unread": sum(1 for m in messages if m.status == "unread"),
                "important": sum(1 for m in messages if m.is_important),
                "recent7Days": self._count_since(messages, now - timedelta(days=7)),
                "recent30Days": self._count_since(messages, now - timedelta(days=30)),
            },
            "projects": {
                "total": len(projects),
                "featured": sum(1 for p in projects if p.featured),
                "categories": project_categories,
            },
            "experiences": {
                "total": len(experiences),
                "current": sum(1 for e in experiences if e.is_current),
            },
            "skills": {
                "total": sum(len(c.skills) for c in categories),
                "categories": len(categories),
                "byProficiency": by_proficiency,
            },
        }

    @staticmethod
    def _count_since(messages: List[ContactMessage], cutoff: datetime) -> int:
        count = 0
        for message in messages:
            if not message.created_at:
                continue
            try:
                created = datetime.fromisoformat(message.created_at.replace("Z", "+00:00"))
            except ValueError:
                continue
            if created.tzinfo is None:
                created = created.replace(tzinfo=timezone.utc)
            if created >= cutoff:
                count += 1
        return count
