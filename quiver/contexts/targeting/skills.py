"""Reorder skills within their categories by oracle relevance."""

from typing import Dict, List

from quiver.contexts.catalog.models import SkillCategory, SkillSet
from quiver.contexts.intake.rankings import RankedSkill, RankedSkillCategories


def reorder_category(skills: List[str], rankings: List[RankedSkill]) -> List[str]:
    """
    Stable sort of one category by descending ranked score.

    Names match case-insensitively and exactly; unranked skills score 0. When a
    skill is ranked twice, the later entry wins.
    """
    score_map: Dict[str, float] = {r.skill.lower(): r.relevance_score for r in rankings}
    return sorted(skills, key=lambda skill: score_map.get(skill.lower(), 0.0), reverse=True)


def reorder_skills(skills: SkillSet, ranked_skills: RankedSkillCategories) -> SkillSet:
    """
    Reorder every category except soft skills.

    No skill is added, removed or moved to another category. Soft skills keep
    their original order.
    """
    reordered = skills
    for category in SkillCategory:
        if category is SkillCategory.SOFT_SKILLS:
            continue
        reordered = reordered.with_category(
            category, reorder_category(skills[category], ranked_skills.for_category(category))
        )
    return reordered
