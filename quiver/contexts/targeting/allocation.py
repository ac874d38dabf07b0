"""
Dynamic Allocation Engine

Assembles a single-page resume from a full catalog and oracle rankings:

1. Select at most one project (technology overlap with the job's skills)
2. Include the most recent jobs, each guaranteed its best few bullets
3. Greedily fill the remaining lines into the two most recent jobs
4. Reorder skills within their categories by relevance

Line accounting follows the page model in page_space. Every step takes a
LineBudget and returns a new one; nothing here mutates its inputs or performs
I/O, and incomplete rankings or a shortage of content are never errors.
"""

import copy
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from quiver.contexts.catalog.models import (
    BulletId,
    BulletRecord,
    EntryId,
    ExperienceEntry,
    ProjectEntry,
    ResumeData,
)
from quiver.contexts.intake.rankings import RankedContent
from quiver.contexts.targeting.candidates import CandidateBullet, CandidateIndex, rank_candidates
from quiver.contexts.targeting.logger import _log_debug, log_allocation_result
from quiver.contexts.targeting.page_space import LineBudget, PageLayout, PageSpaceEstimate
from quiver.contexts.targeting.skills import reorder_skills

DEFAULT_MAX_JOBS = 2
DEFAULT_MIN_BULLETS_PER_JOB = 3

# Only the most recent jobs receive fill bullets; the rest keep their minimum
FILLED_JOB_COUNT = 2


# =============================================================================
# RESULT STRUCTURES
# =============================================================================


@dataclass
class OptimizationDetails:
    """
    Summary flags of one allocation.

    Attributes:
        total_bullets_added: Experience bullets placed (guaranteed + fill)
        fill_bullets_added: Bullets placed by the greedy fill alone
        skills_reordered: True if any category order changed
        project_selected: True if a project was kept
        jobs_prioritized: True if at least one job was included
    """

    total_bullets_added: int = 0
    fill_bullets_added: int = 0
    skills_reordered: bool = False
    project_selected: bool = False
    jobs_prioritized: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalBulletsAdded": self.total_bullets_added,
            "fillBulletsAdded": self.fill_bullets_added,
            "skillsReordered": self.skills_reordered,
            "projectSelected": self.project_selected,
            "jobsPrioritized": self.jobs_prioritized,
        }


@dataclass
class AllocationResult:
    """Optimized resume plus the bookkeeping of how it was assembled."""

    resume_data: ResumeData
    used_bullets: List[BulletId] = field(default_factory=list)
    selected_project_id: Optional[EntryId] = None
    page_space_used: Optional[PageSpaceEstimate] = None
    optimization_details: OptimizationDetails = field(default_factory=OptimizationDetails)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resumeData": self.resume_data.to_dict(),
            "usedBullets": list(self.used_bullets),
            "selectedProjectId": self.selected_project_id,
            "pageSpaceUsed": self.page_space_used.to_dict() if self.page_space_used else None,
            "optimizationDetails": self.optimization_details.to_dict(),
        }


@dataclass(frozen=True)
class JobPlacement:
    """A job's ranked candidates and the bullets chosen for it so far."""

    job: ExperienceEntry
    candidates: Tuple[CandidateBullet, ...]
    selected: Tuple[CandidateBullet, ...] = ()

    def with_selected(self, selected: Iterable[CandidateBullet]) -> "JobPlacement":
        return JobPlacement(job=self.job, candidates=self.candidates, selected=tuple(selected))

    def to_entry(self) -> ExperienceEntry:
        return self.job.with_bullets(c.content for c in self.selected)


# =============================================================================
# PROJECT SELECTION
# =============================================================================


def score_project(project: ProjectEntry, job_skills: Sequence[str]) -> int:
    """
    Count technology tags that match any job skill.

    A tag matches when either string contains the other, ignoring case.
    """
    skills = [s.lower() for s in job_skills if s.strip()]
    score = 0
    for tag in project.technology_tags():
        tag = tag.lower()
        if any(tag in skill or skill in tag for skill in skills):
            score += 1
    return score


def select_best_project(
    projects: Sequence[ProjectEntry], job_skills: Sequence[str]
) -> Optional[ProjectEntry]:
    """Highest-scoring project; the first one wins ties. None if there are no projects."""
    if not projects:
        return None
    return max(projects, key=lambda p: score_project(p, job_skills))


def _place_project(
    projects: Sequence[ProjectEntry],
    job_skills: Sequence[str],
    budget: LineBudget,
    layout: PageLayout,
) -> Tuple[Optional[ProjectEntry], LineBudget]:
    project = select_best_project(projects, job_skills)
    if project is None:
        return None, budget

    _log_debug(f"Selected project {project.id} ({score_project(project, job_skills)} matching tags)")
    cost = layout.section_header_lines + layout.project_header_lines + len(project.bullets)
    return project.with_bullets(project.bullets), budget.add(cost)


# =============================================================================
# JOB INCLUSION AND FILL
# =============================================================================


def _include_jobs(
    jobs: Sequence[ExperienceEntry],
    index: CandidateIndex,
    scores: Mapping[BulletId, float],
    min_bullets_per_job: int,
    budget: LineBudget,
    layout: PageLayout,
) -> Tuple[List[JobPlacement], List[BulletId], LineBudget]:
    """Guarantee each included job its top-scoring bullets."""
    if not jobs:
        return [], [], budget

    guaranteed_count = min(min_bullets_per_job, layout.max_bullets_per_job)
    budget = budget.add(layout.section_header_lines)
    placements: List[JobPlacement] = []
    used: List[BulletId] = []

    for job in jobs:
        candidates = rank_candidates(job, index, scores, layout)
        guaranteed = [c for c in candidates if c.bullet_id not in used][:guaranteed_count]
        used.extend(c.bullet_id for c in guaranteed)
        budget = budget.add(layout.job_header_lines + len(guaranteed))
        placements.append(JobPlacement(job=job, candidates=tuple(candidates), selected=tuple(guaranteed)))
        _log_debug(
            f"Job {job.id}: {len(candidates)} candidates, {len(guaranteed)} guaranteed"
        )

    return placements, used, budget


def _fill_remaining(
    placements: Sequence[JobPlacement],
    used: Sequence[BulletId],
    budget: LineBudget,
    layout: PageLayout,
) -> Tuple[List[JobPlacement], List[BulletId], LineBudget]:
    """
    Spend remaining lines on the next-best bullets, one job at a time.

    Only the first FILLED_JOB_COUNT placements are filled; later ones are
    returned with their guaranteed bullets. A job is filled until it reaches
    the per-job cap or runs out of candidates; earlier jobs are never revisited.
    """
    used = list(used)
    filled: List[JobPlacement] = []

    for placement in placements[:FILLED_JOB_COUNT]:
        selected = list(placement.selected)
        for candidate in placement.candidates:
            if budget.remaining <= 0 or len(selected) >= layout.max_bullets_per_job:
                break
            if candidate.bullet_id in used:
                continue
            selected.append(candidate)
            used.append(candidate.bullet_id)
            budget = budget.add(1)
        filled.append(placement.with_selected(selected))

    filled.extend(placements[FILLED_JOB_COUNT:])
    return filled, used, budget


# =============================================================================
# ALLOCATION
# =============================================================================


def allocate(
    original_resume: ResumeData,
    ranked_content: RankedContent,
    bullet_pool: Sequence[BulletRecord],
    max_jobs: int = DEFAULT_MAX_JOBS,
    min_bullets_per_job: int = DEFAULT_MIN_BULLETS_PER_JOB,
    layout: Optional[PageLayout] = None,
) -> AllocationResult:
    """
    Assemble the best single-page resume for one job.

    Args:
        original_resume: Full catalog resume (experience most recent first)
        ranked_content: Oracle rankings; may be partial or empty
        bullet_pool: Supplementary bullets, attached to jobs by owner id
        max_jobs: Number of most recent jobs to include
        min_bullets_per_job: Bullets guaranteed to each included job when available
        layout: Page model (default: built-in PageLayout)

    Returns:
        AllocationResult whose usage report matches estimate_used_lines() of its resume

    Raises:
        ValueError: If max_jobs or min_bullets_per_job is negative
    """
    if max_jobs < 0 or min_bullets_per_job < 0:
        raise ValueError(
            f"max_jobs and min_bullets_per_job must be non-negative, "
            f"got {max_jobs} and {min_bullets_per_job}"
        )

    start = time.time()
    layout = layout or PageLayout()
    budget = LineBudget(total=layout.total_page_lines, used=layout.fixed_overhead_lines)

    project, budget = _place_project(
        original_resume.projects, ranked_content.analysis.job_skills, budget, layout
    )

    scores = ranked_content.score_index()
    index = CandidateIndex(bullet_pool)
    jobs = original_resume.experience[:max_jobs]

    placements, used, budget = _include_jobs(jobs, index, scores, min_bullets_per_job, budget, layout)
    guaranteed_total = len(used)

    if budget.remaining > 0:
        placements, used, budget = _fill_remaining(placements, used, budget, layout)

    skills = reorder_skills(original_resume.skills, ranked_content.ranked_skills)

    known_ids = index.bullet_ids() | {
        bullet_id for job in original_resume.experience for bullet_id in job.native_bullet_ids()
    }
    unknown = [bullet_id for bullet_id in scores if bullet_id not in known_ids]
    if unknown:
        _log_debug(f"Ignored {len(unknown)} ranked bullets not in the catalog")

    resume = ResumeData(
        personal_info=copy.deepcopy(original_resume.personal_info),
        experience=[p.to_entry() for p in placements],
        projects=[project] if project is not None else [],
        skills=skills,
        education=copy.deepcopy(original_resume.education),
    )

    result = AllocationResult(
        resume_data=resume,
        used_bullets=used,
        selected_project_id=project.id if project is not None else None,
        page_space_used=budget.estimate(layout),
        optimization_details=OptimizationDetails(
            total_bullets_added=len(used),
            fill_bullets_added=len(used) - guaranteed_total,
            skills_reordered=skills != original_resume.skills,
            project_selected=project is not None,
            jobs_prioritized=bool(placements),
        ),
    )
    log_allocation_result(result, time.time() - start)
    return result
