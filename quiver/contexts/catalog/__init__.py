"""
Catalog Context

Responsibilities:
- Defines the profile data model (resume data and bullet pool)
- Loads profiles from YAML/JSON files
- Persists the profile under fixed key-value storage keys

Owns: Content catalog structures, identifiers, profile persistence
Never: Scores, selects or reorders content
"""

from quiver.contexts.catalog.exceptions import InvalidProfileStructureError
from quiver.contexts.catalog.loader import load_profile
from quiver.contexts.catalog.models import (
    BulletCategory,
    BulletId,
    BulletRecord,
    EducationEntry,
    EntryId,
    ExperienceEntry,
    PersonalInfo,
    Profile,
    ProjectEntry,
    ResumeData,
    SkillCategory,
    SkillSet,
    entry_id,
    native_bullet_id,
)
from quiver.contexts.catalog.storage import ProfileStore

__all__ = [
    # Identifiers
    "BulletId",
    "EntryId",
    "entry_id",
    "native_bullet_id",
    # Data structures
    "BulletCategory",
    "BulletRecord",
    "EducationEntry",
    "ExperienceEntry",
    "PersonalInfo",
    "Profile",
    "ProjectEntry",
    "ResumeData",
    "SkillCategory",
    "SkillSet",
    # Loading and persistence
    "load_profile",
    "ProfileStore",
    "InvalidProfileStructureError",
]
