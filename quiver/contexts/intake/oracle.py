"""
Relevance oracle client.

Sends a job description, the user's skills and the available bullets to an LLM
and turns its JSON reply into RankedContent. The LLM is treated as an opaque
oracle: its reply is parsed tolerantly, and only a reply with no JSON object at
all is an error.
"""

import json
import re
import time
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from quiver.contexts.catalog.models import BulletRecord, SkillSet
from quiver.contexts.intake.exceptions import InvalidAnalysisRequestError, OracleResponseError
from quiver.contexts.intake.logger import _log_debug, _log_error, _log_info, log_analysis_result
from quiver.contexts.intake.rankings import RankedContent
from quiver.utils.llm import LLMProvider, get_provider, parse_object_response
from quiver.utils.timestamp import now

MAX_JOB_DESCRIPTION_LENGTH = 50000

# =============================================================================
# PROMPT TEMPLATES
# =============================================================================

_SYSTEM_PROMPT = """\
You are a resume tailoring assistant. You score how relevant each of a candidate's
resume bullet points and skills is to a job description.
Return ONLY a JSON object in the requested format. Scores are integers from 0 to 100.
Only use bullet ids that appear in the provided list."""

_USER_PROMPT_TEMPLATE = """\
Analyze this job description and rank the candidate's content against it.

Job Description:
{description}

Candidate Skills: {skills}

Available Bullet Points:
{bullets}

Return a JSON object in this format:
{{
  "analysis": {{
    "jobTitle": "extracted job title",
    "company": "company name if mentioned",
    "requiredSkills": ["skill1", "skill2"],
    "preferredSkills": ["skill1", "skill2"],
    "keywords": ["keyword1", "keyword2"],
    "seniority": "entry|junior|mid|senior|lead|principal",
    "industry": "industry name",
    "technicalFocus": ["area1", "area2"],
    "leadershipLevel": "individual|team-lead|manager|director"
  }},
  "rankedBullets": [
    {{"bulletId": "id from the list", "relevanceScore": 85, "reasoning": "one sentence"}}
  ],
  "rankedSkills": {{
    "programmingLanguages": [{{"skill": "Python", "relevanceScore": 90}}],
    "frameworks": [{{"skill": "FastAPI", "relevanceScore": 80}}],
    "tools": [{{"skill": "Git", "relevanceScore": 60}}],
    "others": [{{"skill": "AWS", "relevanceScore": 70}}]
  }},
  "matchScore": 75,
  "recommendations": ["recommendation1"],
  "optimizationSuggestions": ["suggestion1"]
}}

Rank every bullet point and every candidate skill. Put cloud, DevOps and machine
learning skills under "others"."""


# =============================================================================
# REQUEST
# =============================================================================


def sanitize_job_description(text: str) -> str:
    """Strip angle brackets, trim, and cap the description length."""
    return re.sub(r"[<>]", "", text).strip()[:MAX_JOB_DESCRIPTION_LENGTH]


def user_skills_from(skills: SkillSet) -> List[str]:
    """Flatten a skill set into the skill list sent with an analysis request."""
    return skills.all_skills()


@dataclass
class AnalysisRequest:
    """Input for one oracle analysis."""

    job_description: str
    user_skills: List[str] = field(default_factory=list)
    available_bullets: List[BulletRecord] = field(default_factory=list)

    def validate(self) -> None:
        """
        Raises:
            InvalidAnalysisRequestError: If any field is missing or malformed
        """
        if not isinstance(self.job_description, str) or not self.job_description.strip():
            raise InvalidAnalysisRequestError("Job description is required", "job_description")
        if len(self.job_description) >= MAX_JOB_DESCRIPTION_LENGTH:
            raise InvalidAnalysisRequestError("Job description is too long", "job_description")
        if not isinstance(self.user_skills, list):
            raise InvalidAnalysisRequestError("User skills must be provided", "user_skills")
        if not isinstance(self.available_bullets, list):
            raise InvalidAnalysisRequestError(
                "Available bullet points must be provided", "available_bullets"
            )


def _format_bullet_line(bullet: BulletRecord) -> str:
    skills = ", ".join(bullet.skills) if bullet.skills else "none"
    return f"- id={bullet.id} [{bullet.category.value}] {bullet.content} (Skills: {skills})"


def build_analysis_prompt(request: AnalysisRequest) -> Tuple[str, str]:
    """
    Build the system and user prompts for an analysis request.

    Args:
        request: Validated analysis request

    Returns:
        (system_prompt, user_prompt)
    """
    bullets = "\n".join(_format_bullet_line(b) for b in request.available_bullets) or "(none)"
    user_prompt = _USER_PROMPT_TEMPLATE.format(
        description=sanitize_job_description(request.job_description),
        skills=", ".join(request.user_skills) or "(none)",
        bullets=bullets,
    )
    return _SYSTEM_PROMPT, user_prompt


# =============================================================================
# ORACLE
# =============================================================================


class RelevanceOracle:
    """
    Scores catalog content against a job description using an LLM.

    Attributes:
        provider: LLM provider; created from LLM_PROVIDER on first use if not given
    """

    def __init__(self, provider: Optional[LLMProvider] = None):
        self._provider = provider

    @property
    def provider(self) -> LLMProvider:
        if self._provider is None:
            self._provider = get_provider()
        return self._provider

    def analyze(self, request: AnalysisRequest) -> RankedContent:
        """
        Rank the request's bullets and skills against its job description.

        No retries happen here; provider-level transient retries aside, any
        failure is terminal for this request.

        Raises:
            InvalidAnalysisRequestError: If the request fails validation
            OracleResponseError: If the reply contains no JSON object
        """
        request.validate()
        system_prompt, user_prompt = build_analysis_prompt(request)
        provider = self.provider

        _log_info(
            f"Requesting analysis from {provider.name} "
            f"({len(request.available_bullets)} bullets, {len(request.user_skills)} skills)"
        )
        start = time.time()
        response = provider.generate(system_prompt=system_prompt, user_prompt=user_prompt)
        elapsed = time.time() - start
        _log_debug(f"Oracle used {response.input_tokens} input / {response.output_tokens} output tokens")

        data = parse_object_response(response.content)
        if data is None:
            _log_error(f"No JSON object in reply from {provider.name}")
            raise OracleResponseError(
                "Failed to analyze job description: reply is not a JSON object",
                provider_name=provider.name,
                response_snippet=response.content,
            )

        ranked = RankedContent.from_dict(
            data,
            analysis_id=f"analysis_{now()}",
            description=sanitize_job_description(request.job_description),
        )
        log_analysis_result(provider.name, ranked, elapsed)
        return ranked


def load_ranked_content(text: str) -> RankedContent:
    """
    Parse previously saved oracle output (JSON text).

    Raises:
        OracleResponseError: If text is not a JSON object
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise OracleResponseError(f"Rankings are not valid JSON: {e}", response_snippet=text) from e
    if not isinstance(data, dict):
        raise OracleResponseError("Rankings must be a JSON object", response_snippet=text)
    return RankedContent.from_dict(data)
