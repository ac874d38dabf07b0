"""
Targeting Context

Responsibilities:
- Models the page as a line budget and measures resumes against it
- Selects the project, jobs and bullets that fit one page
- Reorders skills within their categories by relevance
- Keeps the legacy bullet-count optimizer for unranked resumes

Owns: Page-space model, allocation algorithms, content selection logic
Never: Calls the relevance oracle or reads files
"""

from quiver.contexts.targeting.allocation import (
    AllocationResult,
    OptimizationDetails,
    allocate,
    score_project,
    select_best_project,
)
from quiver.contexts.targeting.candidates import CandidateBullet, CandidateIndex, rank_candidates
from quiver.contexts.targeting.legacy import estimate_page_fit, optimize_for_single_page
from quiver.contexts.targeting.page_space import (
    LineBudget,
    PageLayout,
    PageSpaceEstimate,
    estimate_page_space,
    estimate_remaining_space,
    estimate_used_lines,
    load_page_layout,
)
from quiver.contexts.targeting.report import format_space_report, format_usage_report
from quiver.contexts.targeting.skills import reorder_skills

__all__ = [
    # Allocation
    "AllocationResult",
    "OptimizationDetails",
    "allocate",
    "score_project",
    "select_best_project",
    "CandidateBullet",
    "CandidateIndex",
    "rank_candidates",
    "reorder_skills",
    # Legacy optimizer
    "estimate_page_fit",
    "optimize_for_single_page",
    # Page model
    "LineBudget",
    "PageLayout",
    "PageSpaceEstimate",
    "estimate_page_space",
    "estimate_remaining_space",
    "estimate_used_lines",
    "load_page_layout",
    # Reports
    "format_space_report",
    "format_usage_report",
]
