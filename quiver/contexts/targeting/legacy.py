"""
Legacy single-pass optimizer.

Bullet-count heuristic kept for callers that have no oracle rankings: every
job gets a floor of bullets, a fixed total is shared out by recency, and pool
bullets are ordered by a crude impact heuristic. It neither selects a project
nor reorders skills, and it does not use the line-based page model.
"""

import copy
from dataclasses import dataclass
from typing import List, Sequence

from quiver.contexts.catalog.models import BulletRecord, ExperienceEntry, ResumeData
from quiver.contexts.targeting.candidates import CandidateIndex
from quiver.contexts.targeting.logger import _log_debug, _log_info

MAX_TOTAL_BULLETS = 18
MIN_BULLETS_PER_JOB = 4
MAX_EXTRA_BULLETS_PER_JOB = 3
MAX_PROJECT_BULLETS = 4


@dataclass(frozen=True)
class BulletAllocation:
    experience_id: str
    bullet_count: int
    priority: int
    available: int


def impact_score(record: BulletRecord) -> int:
    """3 for a percentage impact, 2 for a lowercase improvement/reduction, else 1."""
    impact = record.impact or ""
    if "%" in impact:
        return 3
    if "improvement" in impact or "reduction" in impact:
        return 2
    return 1


def calculate_allocation(
    experience: Sequence[ExperienceEntry], index: CandidateIndex
) -> List[BulletAllocation]:
    """
    Share MAX_TOTAL_BULLETS out across jobs, most recent first.

    Each job gets MIN_BULLETS_PER_JOB, then up to MAX_EXTRA_BULLETS_PER_JOB
    extra while the shared extra allowance lasts and the job has that many
    bullets available.
    """
    extra_left = max(0, MAX_TOTAL_BULLETS - len(experience) * MIN_BULLETS_PER_JOB)
    allocations = []

    for position, job in enumerate(experience):
        available = len(job.bullets) + len(index.pool_bullets_for(job.id))
        extra = max(0, min(extra_left, available - MIN_BULLETS_PER_JOB, MAX_EXTRA_BULLETS_PER_JOB))
        extra_left -= extra
        allocations.append(
            BulletAllocation(
                experience_id=job.id,
                bullet_count=MIN_BULLETS_PER_JOB + extra,
                priority=len(experience) - position,
                available=available,
            )
        )

    return allocations


def select_best_bullets(
    job: ExperienceEntry, pool_bullets: Sequence[BulletRecord], target_count: int
) -> ExperienceEntry:
    """Native bullets in order, then pool bullets by impact, cut to target_count."""
    ranked_pool = sorted(pool_bullets, key=impact_score, reverse=True)
    bullets = list(job.bullets) + [record.content for record in ranked_pool]
    return job.with_bullets(bullets[:target_count])


def optimize_for_single_page(
    resume_data: ResumeData, bullet_pool: Sequence[BulletRecord]
) -> ResumeData:
    """
    Trim a resume to the legacy bullet budget.

    Args:
        resume_data: Resume to trim (not modified)
        bullet_pool: Supplementary bullets, attached to jobs by owner id

    Returns:
        New ResumeData with every job and project kept
    """
    index = CandidateIndex(bullet_pool)
    allocations = calculate_allocation(resume_data.experience, index)

    experience = []
    for job, allocation in zip(resume_data.experience, allocations):
        trimmed = select_best_bullets(job, index.pool_bullets_for(job.id), allocation.bullet_count)
        _log_debug(f"Job {job.id}: {len(trimmed.bullets)} of {allocation.available} bullets")
        experience.append(trimmed)

    projects = [p.with_bullets(p.bullets[:MAX_PROJECT_BULLETS]) for p in resume_data.projects]

    optimized = ResumeData(
        personal_info=copy.deepcopy(resume_data.personal_info),
        experience=experience,
        projects=projects,
        skills=copy.deepcopy(resume_data.skills),
        education=copy.deepcopy(resume_data.education),
    )
    _log_info(f"Legacy optimizer kept {optimized.total_bullets()} bullets")
    return optimized


def estimate_page_fit(resume_data: ResumeData) -> bool:
    """True if experience, project and first-education bullets total at most MAX_TOTAL_BULLETS."""
    total = resume_data.total_bullets()
    if resume_data.education:
        total += len(resume_data.education[0].bullets)
    return total <= MAX_TOTAL_BULLETS
