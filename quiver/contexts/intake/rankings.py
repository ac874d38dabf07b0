"""
Relevance Rankings

Structured form of the relevance oracle's output: a job analysis summary,
per-bullet relevance scores and per-category skill scores.

The oracle is a best-effort language model, so parsing is tolerant:
- entries without an id (or skill name) are dropped
- non-numeric scores drop the entry; numeric scores are clamped to [0, 100]
- unknown keys are ignored, wrongly typed containers read as empty
- ids that match nothing in the catalog are kept here and ignored by targeting
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from quiver.contexts.catalog.models import BulletId, SkillCategory

MIN_SCORE = 0.0
MAX_SCORE = 100.0
DEFAULT_MATCH_SCORE = 50.0

# Categories the oracle ranks. Soft skills are never scored.
RANKED_SKILL_CATEGORIES = tuple(c for c in SkillCategory if c is not SkillCategory.SOFT_SKILLS)

# The oracle reports skills in four coarse groups; "others" covers two categories.
ORACLE_SKILL_GROUPS: Dict[str, Tuple[SkillCategory, ...]] = {
    "programmingLanguages": (SkillCategory.PROGRAMMING_LANGUAGES,),
    "frameworks": (SkillCategory.FRAMEWORKS_AND_LIBRARIES,),
    "tools": (SkillCategory.SOFTWARE_AND_TOOLS,),
    "others": (SkillCategory.CLOUD_AND_DEVOPS, SkillCategory.MACHINE_LEARNING),
}


def parse_score(value: Any) -> Optional[float]:
    """
    Read a relevance score, clamped to [0, 100].

    Returns None for anything that is not a finite number (booleans included).
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return None
    return min(max(float(value), MIN_SCORE), MAX_SCORE)


def _list_of(value: Any) -> List[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


def _string_list(value: Any) -> List[str]:
    return [str(item) for item in _list_of(value) if item is not None]


@dataclass
class JobAnalysis:
    """Summary of the target job as understood by the oracle."""

    id: str = ""
    job_title: str = "Unknown Position"
    company: str = "Unknown Company"
    description: str = ""
    required_skills: List[str] = field(default_factory=list)
    preferred_skills: List[str] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)
    seniority: str = "mid"
    industry: str = "Technology"
    technical_focus: List[str] = field(default_factory=list)
    leadership_level: str = "individual"

    @property
    def job_skills(self) -> List[str]:
        """Required then preferred skills."""
        return self.required_skills + self.preferred_skills

    @classmethod
    def from_dict(cls, data: Dict[str, Any], analysis_id: str = "", description: str = "") -> "JobAnalysis":
        data = data if isinstance(data, dict) else {}
        return cls(
            id=str(data.get("id") or analysis_id),
            job_title=str(data.get("jobTitle") or "Unknown Position"),
            company=str(data.get("company") or "Unknown Company"),
            description=str(data.get("description") or description),
            required_skills=_string_list(data.get("requiredSkills")),
            preferred_skills=_string_list(data.get("preferredSkills")),
            keywords=_string_list(data.get("keywords")),
            seniority=str(data.get("seniority") or "mid"),
            industry=str(data.get("industry") or "Technology"),
            technical_focus=_string_list(data.get("technicalFocus")),
            leadership_level=str(data.get("leadershipLevel") or "individual"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "jobTitle": self.job_title,
            "company": self.company,
            "description": self.description,
            "requiredSkills": list(self.required_skills),
            "preferredSkills": list(self.preferred_skills),
            "keywords": list(self.keywords),
            "seniority": self.seniority,
            "industry": self.industry,
            "technicalFocus": list(self.technical_focus),
            "leadershipLevel": self.leadership_level,
        }


@dataclass(frozen=True)
class RankedBullet:
    """Oracle relevance score for one bullet."""

    bullet_id: BulletId
    relevance_score: float
    reasoning: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> Optional["RankedBullet"]:
        """Parse one entry; returns None if it has no id or no usable score."""
        if not isinstance(data, dict) or data.get("bulletId") in (None, ""):
            return None
        score = parse_score(data.get("relevanceScore"))
        if score is None:
            return None
        return cls(
            bullet_id=BulletId(str(data["bulletId"])),
            relevance_score=score,
            reasoning=str(data.get("reasoning") or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bulletId": self.bullet_id,
            "relevanceScore": self.relevance_score,
            "reasoning": self.reasoning,
        }


@dataclass(frozen=True)
class RankedSkill:
    """Oracle relevance score for one skill."""

    skill: str
    relevance_score: float

    @classmethod
    def from_dict(cls, data: Any) -> Optional["RankedSkill"]:
        if not isinstance(data, dict) or not str(data.get("skill") or "").strip():
            return None
        score = parse_score(data.get("relevanceScore"))
        if score is None:
            return None
        return cls(skill=str(data["skill"]).strip(), relevance_score=score)

    def to_dict(self) -> Dict[str, Any]:
        return {"skill": self.skill, "relevanceScore": self.relevance_score}


@dataclass
class RankedSkillCategories:
    """Skill rankings keyed by SkillCategory (soft skills excluded)."""

    rankings: Dict[SkillCategory, List[RankedSkill]] = field(default_factory=dict)

    def __post_init__(self):
        self.rankings = {
            category: list(self.rankings.get(category, [])) for category in RANKED_SKILL_CATEGORIES
        }

    def for_category(self, category: SkillCategory) -> List[RankedSkill]:
        """Rankings for a category; always empty for soft skills."""
        return self.rankings.get(category, [])

    @classmethod
    def from_dict(cls, data: Any) -> "RankedSkillCategories":
        """
        Parse skill rankings keyed either by the oracle's four groups
        (programmingLanguages, frameworks, tools, others) or by SkillSet keys.
        """
        rankings: Dict[SkillCategory, List[RankedSkill]] = {c: [] for c in RANKED_SKILL_CATEGORIES}
        if not isinstance(data, dict):
            return cls(rankings)

        for key, entries in data.items():
            if key in ORACLE_SKILL_GROUPS:
                targets = ORACLE_SKILL_GROUPS[key]
            else:
                targets = tuple(c for c in RANKED_SKILL_CATEGORIES if c.value == key)

            parsed = [s for s in (RankedSkill.from_dict(e) for e in _list_of(entries)) if s]
            for category in targets:
                rankings[category].extend(parsed)

        return cls(rankings)

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            category.value: [s.to_dict() for s in skills]
            for category, skills in self.rankings.items()
        }


@dataclass
class RankedContent:
    """Everything the oracle returns for one job description."""

    analysis: JobAnalysis = field(default_factory=JobAnalysis)
    ranked_bullets: List[RankedBullet] = field(default_factory=list)
    ranked_skills: RankedSkillCategories = field(default_factory=RankedSkillCategories)
    match_score: float = DEFAULT_MATCH_SCORE
    recommendations: List[str] = field(default_factory=list)
    optimization_suggestions: List[str] = field(default_factory=list)

    def score_index(self) -> Dict[BulletId, float]:
        """Bullet id -> score. The first entry wins when an id is ranked twice."""
        index: Dict[BulletId, float] = {}
        for ranked in self.ranked_bullets:
            index.setdefault(ranked.bullet_id, ranked.relevance_score)
        return index

    def score_for(self, bullet_id: BulletId) -> Optional[float]:
        return self.score_index().get(bullet_id)

    @classmethod
    def from_dict(cls, data: Any, analysis_id: str = "", description: str = "") -> "RankedContent":
        """
        Parse oracle output.

        The analysis block may be nested under 'analysis' or spread over the
        top level of the reply.
        """
        data = data if isinstance(data, dict) else {}
        analysis_data = data["analysis"] if isinstance(data.get("analysis"), dict) else data
        match_score = parse_score(data.get("matchScore"))

        return cls(
            analysis=JobAnalysis.from_dict(analysis_data, analysis_id=analysis_id, description=description),
            ranked_bullets=[
                b for b in (RankedBullet.from_dict(e) for e in _list_of(data.get("rankedBullets"))) if b
            ],
            ranked_skills=RankedSkillCategories.from_dict(data.get("rankedSkills")),
            match_score=DEFAULT_MATCH_SCORE if match_score is None else match_score,
            recommendations=_string_list(data.get("recommendations")),
            optimization_suggestions=_string_list(data.get("optimizationSuggestions")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "analysis": self.analysis.to_dict(),
            "rankedBullets": [b.to_dict() for b in self.ranked_bullets],
            "rankedSkills": self.ranked_skills.to_dict(),
            "matchScore": self.match_score,
            "recommendations": list(self.recommendations),
            "optimizationSuggestions": list(self.optimization_suggestions),
        }
