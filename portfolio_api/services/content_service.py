# portfolio_api/services/content_service.py
"""
Content Service for the portfolio API.

Reads and replaces the wholesale-updated sections of the site. Each
section is one JSON document under a fixed key; an update validates the
full payload and replaces the previous value with a single write
(last writer wins).
"""
import logging
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter
from pydantic import ValidationError as SchemaError

from portfolio_api.core.exceptions import validation_error
from portfolio_api.models.content_models import Experience, PersonalInfo, Project, SkillCategory
from portfolio_api.services.kv_store import KeyValueStore
from portfolio_api.services.validation_service import ContentValidator, ValidationResult

logger = logging.getLogger(__name__)

PERSONAL_INFO_KEY = "personal-info"
EXPERIENCES_KEY = "experiences"
PROJECTS_KEY = "projects"
SKILLS_KEY = "skills"

# Shapes the public views read back; a write must satisfy them too
SCHEMAS = {
    PERSONAL_INFO_KEY: TypeAdapter(PersonalInfo),
    EXPERIENCES_KEY: TypeAdapter(List[Experience]),
    PROJECTS_KEY: TypeAdapter(List[Project]),
    SKILLS_KEY: TypeAdapter(List[SkillCategory]),
}


def _schema_message(key: str, error: SchemaError) -> str:
    """First schema violation, e.g. 'Invalid projects[0].endDate: Input should be a valid string'"""
    first = error.errors()[0]
    path = key
    for part in first["loc"]:
        path += f"[{part}]" if isinstance(part, int) else f".{part}"
    return f"Invalid {path}: {first['msg']}"


class ContentService:
    """
    Read/replace access to personal info, experiences, projects and skills.

    Reads return None when a section was never written; callers turn that
    into a 404. Store failures propagate.
    """

    def __init__(self, store: KeyValueStore, validator: Optional[ContentValidator] = None):
        self.store = store
        self.validator = validator or ContentValidator()

    async def _replace(self, key: str, data: Any, result: ValidationResult) -> Any:
        """Write data under key if it passed validation"""
        if not result.valid:
            logger.warning(f"Rejected update of '{key}': {result.message}")
            raise validation_error(result.message, field=key)

        try:
            SCHEMAS[key].validate_python(data)
        except SchemaError as e:
            message = _schema_message(key, e)
            logger.warning(f"Rejected update of '{key}': {message}")
            raise validation_error(message, field=key)

        await self.store.write(key, data)

        count = f" ({len(data)} records)" if isinstance(data, list) else ""
        logger.info(f"📝 Updated '{key}'{count}")
        return data

    async def get_personal_info(self) -> Optional[Dict[str, Any]]:
        return await self.store.read(PERSONAL_INFO_KEY)

    async def update_personal_info(self, data: Any) -> Dict[str, Any]:
        return await self._replace(PERSONAL_INFO_KEY, data, self.validator.validate_personal_info(data))

    async def get_experiences(self) -> Optional[List[Dict[str, Any]]]:
        return await self.store.read(EXPERIENCES_KEY)

    async def update_experiences(self, data: Any) -> List[Dict[str, Any]]:
        return await self._replace(EXPERIENCES_KEY, data, self.validator.validate_experiences(data))

    async def get_projects(self) -> Optional[List[Dict[str, Any]]]:
        return await self.store.read(PROJECTS_KEY)

    async def update_projects(self, data: Any) -> List[Dict[str, Any]]:
        return await self._replace(PROJECTS_KEY, data, self.validator.validate_projects(data))

    async def get_skills(self) -> Optional[List[Dict[str, Any]]]:
        return await self.store.read(SKILLS_KEY)

    async def update_skills(self, data: Any) -> List[Dict[str, Any]]:
        return await self._replace(SKILLS_KEY, data, self.validator.validate_skills(data))
