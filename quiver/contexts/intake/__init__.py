"""
Intake Context

Responsibilities:
- Validates and sanitizes job analysis requests
- Queries the relevance oracle (LLM) for bullet and skill scores
- Parses oracle output tolerantly into RankedContent

Owns: Job analysis requests, oracle prompts, ranking data structures
Never: Decides what goes on the page
"""

from quiver.contexts.intake.exceptions import InvalidAnalysisRequestError, OracleResponseError
from quiver.contexts.intake.oracle import (
    AnalysisRequest,
    RelevanceOracle,
    build_analysis_prompt,
    load_ranked_content,
    sanitize_job_description,
    user_skills_from,
)
from quiver.contexts.intake.rankings import (
    JobAnalysis,
    RankedBullet,
    RankedContent,
    RankedSkill,
    RankedSkillCategories,
)

__all__ = [
    # Oracle access
    "AnalysisRequest",
    "RelevanceOracle",
    "build_analysis_prompt",
    "load_ranked_content",
    "sanitize_job_description",
    "user_skills_from",
    # Ranking data structures
    "JobAnalysis",
    "RankedBullet",
    "RankedContent",
    "RankedSkill",
    "RankedSkillCategories",
    # Errors
    "InvalidAnalysisRequestError",
    "OracleResponseError",
]
