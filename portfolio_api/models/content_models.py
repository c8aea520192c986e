# portfolio_api/models/content_models.py
"""
Typed shapes of the stored portfolio content.

The store keeps the JSON exactly as the admin submitted it; these models
are read-side views used for sorting and statistics. Unknown fields are
kept so a model dumps back to the document it was built from.
"""

from typing import List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class ContentModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class ContactInfo(ContentModel):
    email: str
    phone: str
    github: Optional[str] = None
    website: Optional[str] = None
    linkedin: Optional[str] = None
    twitter: Optional[str] = None


class PersonalInfo(ContentModel):
    id: Optional[str] = None
    name: str
    title: str
    description: str
    highlights: List[str] = Field(default_factory=list)
    avatar_url: Optional[str] = Field(default=None, alias="avatarUrl")
    resume_url: Optional[str] = Field(default=None, alias="resumeUrl")
    contact: ContactInfo
    location: Optional[str] = None
    years_of_experience: Optional[Union[int, float]] = Field(default=None, alias="yearsOfExperience")


class Period(ContentModel):
    start: str
    end: str  # date string or "Present"


class Experience(ContentModel):
    id: str
    company: str
    role: str
    period: Period
    achievements: List[str]
    technologies: Optional[List[str]] = None
    location: Optional[str] = None

    @property
    def is_current(self) -> bool:
        return self.period.end == "Present"


class ProjectImage(ContentModel):
    url: str
    alt: Optional[str] = None
    caption: Optional[str] = None
    order: Optional[int] = None


class ProjectMetric(ContentModel):
    label: str
    value: str


class Project(ContentModel):
    id: str
    title: str
    description: str
    technologies: List[str]
    long_description: Optional[str] = Field(default=None, alias="longDescription")
    thumbnail_url: Optional[str] = Field(default=None, alias="thumbnailUrl")
    images: Optional[List[ProjectImage]] = None
    github_url: Optional[str] = Field(default=None, alias="githubUrl")
    demo_url: Optional[str] = Field(default=None, alias="demoUrl")
    achievements: Optional[List[str]] = None
    metrics: Optional[List[ProjectMetric]] = None
    category: Optional[str] = None
    featured: Optional[bool] = None
    start_date: Optional[str] = Field(default=None, alias="startDate")
    end_date: Optional[str] = Field(default=None, alias="endDate")


Proficiency = Literal["beginner", "intermediate", "advanced", "expert"]


class Skill(ContentModel):
    id: str
    name: str
    category_id: str = Field(alias="categoryId")
    icon: Optional[str] = None
    proficiency: Optional[Proficiency] = None
    priority: Optional[Union[int, float]] = None


class SkillCategory(ContentModel):
    id: str
    name: str
    skills: List[Skill] = Field(default_factory=list)
    icon: Optional[str] = None
    order: Optional[Union[int, float]] = None


class ContactMessage(ContentModel):
    id: str
    name: str
    email: str
    subject: str
    message: str
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    status: Literal["unread", "read"] = "unread"
    is_important: bool = Field(default=False, alias="isImportant")
