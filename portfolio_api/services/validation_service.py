# portfolio_api/services/validation_service.py
"""
Content validation for the portfolio API.

Every admin write passes through here before it reaches the store.
Batches are checked record by record and rejected as a whole on the
first violation, so the store never holds a partially valid list.
"""

from typing import Optional, Dict, Any, List
from dataclasses import dataclass
import logging
import re

logger = logging.getLogger(__name__)

PROFICIENCY_LEVELS = ("beginner", "intermediate", "advanced", "expert")
MESSAGE_STATUSES = ("unread", "read")
PRESENT = "Present"
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
MIN_MESSAGE_LENGTH = 10


@dataclass
class ValidationResult:
    """Result of input validation"""
    valid: bool
    error_type: Optional[str] = None
    message: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


OK = ValidationResult(valid=True)


def _invalid(error_type: str, message: str, **details: Any) -> ValidationResult:
    return ValidationResult(valid=False, error_type=error_type, message=message, details=details or None)


def _has_text(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def _all_text(values: List[Any]) -> bool:
    return all(_has_text(v) for v in values)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ContentValidator:
    """
    Schema checks for each stored entity type.

    Messages are specific: only authenticated admins see them, except
    for the public contact form where they describe the caller's own input.
    """

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.ContentValidator")

    # ===========================================
    # PERSONAL INFO
    # ===========================================

    def validate_personal_info(self, data: Any) -> ValidationResult:
        if not isinstance(data, dict):
            return _invalid("invalid_type", "Personal info must be an object")

        if not all(_has_text(data.get(f)) for f in ("name", "title", "description")):
            return _invalid("missing_field", "Name, title, and description are required")

        contact = data.get("contact")
        if not isinstance(contact, dict) or not _has_text(contact.get("email")) or not _has_text(contact.get("phone")):
            return _invalid("missing_field", "Email and phone are required")

        return OK

    # ===========================================
    # EXPERIENCES
    # ===========================================

    def validate_experiences(self, data: Any) -> ValidationResult:
        if not isinstance(data, list):
            return _invalid("invalid_type", "Experiences must be an array")

        for index, experience in enumerate(data):
            result = self._validate_experience(experience)
            if not result.valid:
                result.details = {**(result.details or {}), "index": index}
                return result

        return OK

    def _validate_experience(self, experience: Any) -> ValidationResult:
        if not isinstance(experience, dict):
            return _invalid("invalid_type", "Each experience must be an object")

        if not all(_has_text(experience.get(f)) for f in ("id", "company", "role")):
            return _invalid("missing_field", "Experience id, company, and role are required")

        period = experience.get("period")
        if not isinstance(period, dict) or not _has_text(period.get("start")) or not period.get("end"):
            return _invalid("missing_field", "Experience period start and end are required")

        if not _has_text(period["end"]):
            return _invalid("invalid_type", f'Experience period end must be a string or "{PRESENT}"')

        achievements = experience.get("achievements")
        if not isinstance(achievements, list) or not achievements:
            return _invalid("invalid_type", "Experience achievements must be a non-empty array")

        if not _all_text(achievements):
            return _invalid("invalid_value", "All achievements must be non-empty strings")

        technologies = experience.get("technologies")
        if technologies is not None:
            if not isinstance(technologies, list):
                return _invalid("invalid_type", "Experience technologies must be an array")
            if not _all_text(technologies):
                return _invalid("invalid_value", "All technologies must be non-empty strings")

        return OK

    # ===========================================
    # PROJECTS
    # ===========================================

    def validate_projects(self, data: Any) -> ValidationResult:
        if not isinstance(data, list):
            return _invalid("invalid_type", "Projects must be an array")

        for index, project in enumerate(data):
            result = self._validate_project(project)
            if not result.valid:
                result.details = {**(result.details or {}), "index": index}
                return result

        return OK

    def _validate_project(self, project: Any) -> ValidationResult:
        if not isinstance(project, dict):
            return _invalid("invalid_type", "Each project must be an object")

        if not all(_has_text(project.get(f)) for f in ("id", "title", "description")):
            return _invalid("missing_field", "Project id, title, and description are required")

        technologies = project.get("technologies")
        if not isinstance(technologies, list) or not technologies:
            return _invalid("invalid_type", "Project technologies must be a non-empty array")

        if not _all_text(technologies):
            return _invalid("invalid_value", "All technologies must be non-empty strings")

        images = project.get("images")
        if images is not None:
            if not isinstance(images, list):
                return _invalid("invalid_type", "Project images must be an array")
            for image in images:
                if not isinstance(image, dict) or not _has_text(image.get("url")):
                    return _invalid("invalid_value", "All images must have a valid URL")

        achievements = project.get("achievements")
        if achievements is not None:
            if not isinstance(achievements, list):
                return _invalid("invalid_type", "Project achievements must be an array")
            if not _all_text(achievements):
                return _invalid("invalid_value", "All achievements must be non-empty strings")

        metrics = project.get("metrics")
        if metrics is not None:
            if not isinstance(metrics, list):
                return _invalid("invalid_type", "Project metrics must be an array")
            for metric in metrics:
                if not isinstance(metric, dict) or not _has_text(metric.get("label")) or not _has_text(metric.get("value")):
                    return _invalid("invalid_value", "All metrics must have label and value as strings")

        if "featured" in project and not isinstance(project["featured"], bool):
            return _invalid("invalid_type", "Featured must be a boolean")

        return OK

    # ===========================================
    # SKILLS
    # ===========================================

    def validate_skills(self, data: Any) -> ValidationResult:
        if not isinstance(data, list):
            return _invalid("invalid_type", "Skills must be an array of categories")

        for category in data:
            result = self._validate_category(category)
            if not result.valid:
                return result

        return OK

    def _validate_category(self, category: Any) -> ValidationResult:
        if not isinstance(category, dict):
            return _invalid("invalid_type", "Each skill category must be an object")

        if not _has_text(category.get("id")) or not _has_text(category.get("name")):
            return _invalid("missing_field", "Category id and name are required")

        skills = category.get("skills")
        if not isinstance(skills, list):
            return _invalid("invalid_type", "Category skills must be an array")

        for skill in skills:
            if not isinstance(skill, dict):
                return _invalid("invalid_type", "Each skill must be an object")

            if not all(_has_text(skill.get(f)) for f in ("id", "name", "categoryId")):
                return _invalid("missing_field", "Skill id, name, and categoryId are required")

            # Referential integrity: a skill belongs to the category it is listed in
            if skill["categoryId"] != category["id"]:
                return _invalid(
                    "reference_mismatch",
                    f"Skill categoryId ({skill['categoryId']}) must match category id ({category['id']})",
                    skill_id=skill["id"]
                )

            proficiency = skill.get("proficiency")
            if proficiency is not None and proficiency not in PROFICIENCY_LEVELS:
                return _invalid("invalid_value", f"Invalid proficiency: {proficiency}")

            priority = skill.get("priority")
            if priority is not None and (not _is_number(priority) or priority < 0):
                return _invalid("invalid_value", "Priority must be >= 0")

        return OK

    # ===========================================
    # CONTACT MESSAGES
    # ===========================================

    def validate_contact_message(self, data: Any) -> ValidationResult:
        """Public contact form submission"""
        if not isinstance(data, dict):
            return _invalid("invalid_type", "Contact message must be an object")

        if not _has_text(data.get("name")):
            return _invalid("missing_field", "Name is required")

        email = data.get("email")
        if not isinstance(email, str) or not EMAIL_PATTERN.fullmatch(email):
            return _invalid("invalid_value", "Valid email is required")

        if not _has_text(data.get("subject")):
            return _invalid("missing_field", "Subject is required")

        message = data.get("message")
        if not isinstance(message, str) or len(message.strip()) < MIN_MESSAGE_LENGTH:
            return _invalid(
                "input_too_short",
                f"Message must be at least {MIN_MESSAGE_LENGTH} characters",
                min_length=MIN_MESSAGE_LENGTH,
                actual_length=len(message.strip()) if isinstance(message, str) else 0
            )

        return OK

    def validate_status(self, status: Any) -> ValidationResult:
        if status not in MESSAGE_STATUSES:
            return _invalid("invalid_value", "Invalid status. Must be unread or read")
        return OK

    def validate_important_flag(self, flag: Any) -> ValidationResult:
        if not isinstance(flag, bool):
            return _invalid("invalid_type", "isImportant must be a boolean")
        return OK
