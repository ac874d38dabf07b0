"""
Content Catalog Data Structures

Defines the structured profile a user maintains: personal info, experience,
projects, education, skills and the pool of reusable bullet points.

These structures are the interface between the Catalog, Intake and Targeting
contexts. Field names are snake_case in Python; from_dict()/to_dict() speak
the camelCase wire shape that profiles are stored in and that renderers
consume.

Identifiers:
    Entry ids (experience/project) and bullet ids are plain strings wrapped in
    NewTypes. Numeric ids found in stored profiles are normalized with
    entry_id(), so 7 and "7" refer to the same entry. Bullets embedded in an
    entry have no stored id; they are addressed as "{entryId}-{index}" via
    native_bullet_id().
"""

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterable, List, NewType, Optional

from quiver.contexts.catalog.exceptions import InvalidProfileStructureError

EntryId = NewType("EntryId", str)
BulletId = NewType("BulletId", str)

# Separators used in free-text technology lists ("Python, FastAPI  Docker")
TECHNOLOGY_SEPARATORS = re.compile(r"[,\s]+")


def entry_id(value: Any) -> EntryId:
    """Normalize a stored entry id (int or str) to an EntryId."""
    return EntryId(str(value).strip())


def native_bullet_id(owner: EntryId, index: int) -> BulletId:
    """Id of the index-th bullet embedded in an experience or project entry."""
    return BulletId(f"{owner}-{index}")


class BulletCategory(Enum):
    """Category tag of a pooled bullet point."""

    TECHNICAL = "technical"
    LEADERSHIP = "leadership"
    ACHIEVEMENT = "achievement"
    PROJECT = "project"
    SOFT_SKILL = "soft-skill"


class SkillCategory(Enum):
    """The six fixed skill categories. Values are the wire keys."""

    PROGRAMMING_LANGUAGES = "programmingLanguages"
    FRAMEWORKS_AND_LIBRARIES = "frameworksAndLibraries"
    SOFTWARE_AND_TOOLS = "softwareAndTools"
    CLOUD_AND_DEVOPS = "cloudAndDevOps"
    MACHINE_LEARNING = "machineLearning"
    SOFT_SKILLS = "softSkills"

    @property
    def display_name(self) -> str:
        return SKILL_DISPLAY_NAMES[self]


SKILL_DISPLAY_NAMES = {
    SkillCategory.PROGRAMMING_LANGUAGES: "Programming Languages",
    SkillCategory.FRAMEWORKS_AND_LIBRARIES: "Frameworks & Libraries",
    SkillCategory.SOFTWARE_AND_TOOLS: "Software & Tools",
    SkillCategory.CLOUD_AND_DEVOPS: "Cloud & DevOps",
    SkillCategory.MACHINE_LEARNING: "Machine Learning",
    SkillCategory.SOFT_SKILLS: "Soft Skills",
}


def _string_list(value: Any) -> List[str]:
    """Coerce a stored list to a list of strings; anything else becomes []."""
    if not isinstance(value, (list, tuple)):
        return []
    return [str(item) for item in value if item is not None]


def _require_id(data: Dict[str, Any], kind: str) -> EntryId:
    if data.get("id") is None:
        raise InvalidProfileStructureError(f"{kind} entry is missing its 'id'", field_name="id")
    return entry_id(data["id"])


@dataclass
class BulletRecord:
    """
    A reusable achievement statement from the bullet pool.

    Attributes:
        id: Unique bullet identifier
        content: Bullet text
        skills: Skill tags
        category: Category tag
        impact: Optional impact annotation (e.g., "40% latency reduction")
        owner_id: Experience/project the bullet belongs to (wire key 'experienceId')
        relevance_score: Optional stored relevance score
    """

    id: BulletId
    content: str
    skills: List[str] = field(default_factory=list)
    category: BulletCategory = BulletCategory.ACHIEVEMENT
    impact: Optional[str] = None
    owner_id: Optional[EntryId] = None
    relevance_score: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BulletRecord":
        if data.get("id") is None:
            raise InvalidProfileStructureError("Bullet record is missing its 'id'", field_name="id")

        raw_category = data.get("category", BulletCategory.ACHIEVEMENT.value)
        try:
            category = BulletCategory(raw_category)
        except ValueError:
            allowed = [c.value for c in BulletCategory]
            raise InvalidProfileStructureError(
                f"Unknown bullet category '{raw_category}'. Allowed: {allowed}",
                field_name="category",
            )

        owner = data.get("experienceId", data.get("ownerId"))
        score = data.get("relevanceScore")

        return cls(
            id=BulletId(str(data["id"])),
            content=str(data.get("content", "")),
            skills=_string_list(data.get("skills")),
            category=category,
            impact=data.get("impact"),
            owner_id=entry_id(owner) if owner not in (None, "") else None,
            relevance_score=float(score) if isinstance(score, (int, float)) else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "category": self.category.value,
            "content": self.content,
            "skills": list(self.skills),
        }
        if self.impact is not None:
            data["impact"] = self.impact
        if self.relevance_score is not None:
            data["relevanceScore"] = self.relevance_score
        if self.owner_id is not None:
            data["experienceId"] = self.owner_id
        return data


@dataclass
class ExperienceEntry:
    """Work experience entry with its currently selected bullets (most recent first in a resume)."""

    id: EntryId
    organization: str
    position: str = ""
    dates: str = ""
    bullets: List[str] = field(default_factory=list)

    def native_bullet_ids(self) -> List[BulletId]:
        return [native_bullet_id(self.id, index) for index in range(len(self.bullets))]

    def with_bullets(self, bullets: Iterable[str]) -> "ExperienceEntry":
        """Copy of this entry with a different bullet list."""
        return replace(self, bullets=list(bullets))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExperienceEntry":
        return cls(
            id=_require_id(data, "Experience"),
            organization=str(data.get("organization", "")),
            position=str(data.get("position", "")),
            dates=str(data.get("dates", "")),
            bullets=_string_list(data.get("bullets")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "organization": self.organization,
            "position": self.position,
            "dates": self.dates,
            "bullets": list(self.bullets),
        }


@dataclass
class ProjectEntry:
    """Project entry; technologies is free text separated by commas or whitespace."""

    id: EntryId
    name: str
    technologies: str = ""
    bullets: List[str] = field(default_factory=list)

    def technology_tags(self) -> List[str]:
        return [tag for tag in TECHNOLOGY_SEPARATORS.split(self.technologies or "") if tag]

    def with_bullets(self, bullets: Iterable[str]) -> "ProjectEntry":
        return replace(self, bullets=list(bullets))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProjectEntry":
        return cls(
            id=_require_id(data, "Project"),
            name=str(data.get("name", "")),
            technologies=str(data.get("technologies") or ""),
            bullets=_string_list(data.get("bullets")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "technologies": self.technologies,
            "bullets": list(self.bullets),
        }


@dataclass
class EducationEntry:
    """Education entry. Never altered by targeting."""

    id: EntryId
    degree: str
    institution: str = ""
    graduation_date: str = ""
    courses: List[str] = field(default_factory=list)
    bullets: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EducationEntry":
        return cls(
            id=_require_id(data, "Education"),
            degree=str(data.get("degree", "")),
            institution=str(data.get("institution", "")),
            graduation_date=str(data.get("graduationDate", "")),
            courses=_string_list(data.get("courses")),
            bullets=_string_list(data.get("bullets")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "degree": self.degree,
            "institution": self.institution,
            "graduationDate": self.graduation_date,
            "courses": list(self.courses),
            "bullets": list(self.bullets),
        }


@dataclass
class PersonalInfo:
    """Contact block at the top of the resume."""

    name: str = ""
    title: str = ""
    email: str = ""
    linkedin: str = ""
    github: str = ""
    portfolio: str = ""
    phone: Optional[str] = None
    location: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PersonalInfo":
        return cls(
            name=str(data.get("name", "")),
            title=str(data.get("title", "")),
            email=str(data.get("email", "")),
            linkedin=str(data.get("linkedin", "")),
            github=str(data.get("github", "")),
            portfolio=str(data.get("portfolio", "")),
            phone=data.get("phone"),
            location=data.get("location"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "name": self.name,
            "title": self.title,
            "email": self.email,
            "linkedin": self.linkedin,
            "github": self.github,
            "portfolio": self.portfolio,
        }
        if self.phone is not None:
            data["phone"] = self.phone
        if self.location is not None:
            data["location"] = self.location
        return data


@dataclass
class SkillSet:
    """
    Skills keyed by the fixed SkillCategory enum.

    Every category is always present; missing ones are filled with empty lists.
    Skills never move across categories.
    """

    categories: Dict[SkillCategory, List[str]] = field(default_factory=dict)

    def __post_init__(self):
        self.categories = {
            category: list(self.categories.get(category, [])) for category in SkillCategory
        }

    def __getitem__(self, category: SkillCategory) -> List[str]:
        return self.categories[category]

    def with_category(self, category: SkillCategory, skills: Iterable[str]) -> "SkillSet":
        """Copy of this skill set with one category replaced."""
        updated = dict(self.categories)
        updated[category] = list(skills)
        return SkillSet(updated)

    def all_skills(self) -> List[str]:
        """Every skill in category order."""
        return [skill for category in SkillCategory for skill in self.categories[category]]

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "SkillSet":
        data = data or {}
        return cls({category: _string_list(data.get(category.value)) for category in SkillCategory})

    def to_dict(self) -> Dict[str, List[str]]:
        return {category.value: list(skills) for category, skills in self.categories.items()}


@dataclass
class ResumeData:
    """Complete resume: the shape handed to renderers."""

    personal_info: PersonalInfo = field(default_factory=PersonalInfo)
    experience: List[ExperienceEntry] = field(default_factory=list)
    projects: List[ProjectEntry] = field(default_factory=list)
    skills: SkillSet = field(default_factory=SkillSet)
    education: List[EducationEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResumeData":
        if not isinstance(data, dict):
            raise InvalidProfileStructureError("Resume data must be a mapping")

        return cls(
            personal_info=PersonalInfo.from_dict(data.get("personalInfo") or {}),
            experience=[ExperienceEntry.from_dict(e) for e in data.get("experience") or []],
            projects=[ProjectEntry.from_dict(p) for p in data.get("projects") or []],
            skills=SkillSet.from_dict(data.get("skills")),
            education=[EducationEntry.from_dict(e) for e in data.get("education") or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "personalInfo": self.personal_info.to_dict(),
            "experience": [e.to_dict() for e in self.experience],
            "projects": [p.to_dict() for p in self.projects],
            "skills": self.skills.to_dict(),
            "education": [e.to_dict() for e in self.education],
        }

    def total_bullets(self) -> int:
        return sum(len(e.bullets) for e in self.experience) + sum(
            len(p.bullets) for p in self.projects
        )

    def __repr__(self):
        return (
            f"<ResumeData: {self.personal_info.name or 'unnamed'} | "
            f"{len(self.experience)} jobs, {len(self.projects)} projects, "
            f"{self.total_bullets()} bullets>"
        )


@dataclass
class Profile:
    """A user's catalog: full resume data plus the supplementary bullet pool."""

    resume: ResumeData
    bullet_pool: List[BulletRecord] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Profile":
        return cls(
            resume=ResumeData.from_dict(data["resume"]),
            bullet_pool=[BulletRecord.from_dict(b) for b in data.get("bulletPool") or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resume": self.resume.to_dict(),
            "bulletPool": [b.to_dict() for b in self.bullet_pool],
        }
