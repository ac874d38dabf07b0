"""
Page-space model for single-page resumes.

A page is approximated as a fixed number of text lines. Fixed overhead covers
the header/education block and the skills section; every section title, job
header, project header and bullet then costs a fixed number of lines.

The constants are calibrated against one compact template and font, so they
are configuration: PageLayout defaults can be overridden by named presets in a
YAML file (PAGE_LAYOUT_PATH, preset chosen with PAGE_LAYOUT_PRESET):

    default: {}
    dense:
      total_page_lines: 66
      max_bullets_per_job: 7

Each preset only lists the fields it overrides.
"""

import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

from dotenv import load_dotenv
from omegaconf import OmegaConf

from quiver.contexts.catalog.models import ResumeData

load_dotenv()
PAGE_LAYOUT_PATH = os.getenv("PAGE_LAYOUT_PATH")
PAGE_LAYOUT_PRESET = os.getenv("PAGE_LAYOUT_PRESET", "default")


@dataclass(frozen=True)
class PageLayout:
    """
    Line costs of the single-page template.

    Attributes:
        total_page_lines: Lines available on one page
        static_content_lines: Header + education block
        skills_section_lines: Skills section
        section_header_lines: Each section title (Experience, Projects)
        job_header_lines: Company + position lines of a job
        project_header_lines: Project title + technologies lines
        max_bullets_per_job: Hard per-job bullet ceiling
        fit_slack_lines: Remaining lines needed before more content "fits"
        default_native_score: Score of an unranked bullet embedded in a job
        default_pool_score: Score of an unranked bullet from the pool
    """

    total_page_lines: int = 62
    static_content_lines: int = 12
    skills_section_lines: int = 8
    section_header_lines: int = 1
    job_header_lines: int = 2
    project_header_lines: int = 2
    max_bullets_per_job: int = 6
    fit_slack_lines: int = 2
    default_native_score: float = 50.0
    default_pool_score: float = 30.0

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
                raise ValueError(f"PageLayout.{f.name} must be a non-negative number, got {value!r}")

    @property
    def fixed_overhead_lines(self) -> int:
        return self.static_content_lines + self.skills_section_lines

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_layout_presets(config_path: Union[str, Path]) -> Dict[str, Dict[str, Any]]:
    """
    Load layout presets from YAML.

    Args:
        config_path: Path to presets file (top-level keys are preset names)

    Returns:
        Dict mapping preset name -> field overrides
    """
    presets = OmegaConf.to_container(OmegaConf.load(Path(config_path)), resolve=True)
    if not isinstance(presets, dict):
        raise ValueError(f"Layout presets file must be a mapping: {config_path}")
    return {name: (overrides or {}) for name, overrides in presets.items()}


def load_page_layout(
    preset: Optional[str] = None,
    config_path: Optional[Union[str, Path]] = None,
) -> PageLayout:
    """
    Resolve a PageLayout from a preset file, falling back to built-in defaults.

    Args:
        preset: Preset name (default: PAGE_LAYOUT_PRESET env variable, then "default")
        config_path: Presets file (default: PAGE_LAYOUT_PATH env variable)

    Returns:
        PageLayout with preset overrides applied

    Raises:
        ValueError: If the preset is unknown or overrides an unknown field
    """
    preset = preset or PAGE_LAYOUT_PRESET
    config_path = config_path or PAGE_LAYOUT_PATH

    if config_path is None:
        if preset != "default":
            raise ValueError(f"Preset '{preset}' requested but no PAGE_LAYOUT_PATH is configured")
        return PageLayout()

    presets = load_layout_presets(config_path)
    if preset not in presets:
        raise ValueError(f"Preset '{preset}' not found. Available presets: {list(presets)}")

    overrides = presets[preset]
    known = {f.name for f in fields(PageLayout)}
    unknown = set(overrides) - known
    if unknown:
        raise ValueError(f"Preset '{preset}' sets unknown layout fields: {sorted(unknown)}")

    return PageLayout(**overrides)


@dataclass(frozen=True)
class PageSpaceEstimate:
    """Usage report of the page budget."""

    total_available_lines: int
    used_lines: int
    remaining_lines: int
    can_fit_more_content: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalAvailableLines": self.total_available_lines,
            "usedLines": self.used_lines,
            "remainingLines": self.remaining_lines,
            "canFitMoreContent": self.can_fit_more_content,
        }


@dataclass(frozen=True)
class LineBudget:
    """
    Immutable running tally of used lines.

    Each allocation step receives a budget and returns a new one, so steps stay
    pure and can be tested on their own.
    """

    total: int
    used: int = 0

    @property
    def remaining(self) -> int:
        return self.total - self.used

    def add(self, lines: int) -> "LineBudget":
        return LineBudget(total=self.total, used=self.used + lines)

    def estimate(self, layout: PageLayout) -> PageSpaceEstimate:
        return PageSpaceEstimate(
            total_available_lines=self.total,
            used_lines=self.used,
            remaining_lines=self.remaining,
            can_fit_more_content=self.remaining > layout.fit_slack_lines,
        )


def estimate_used_lines(resume: ResumeData, layout: Optional[PageLayout] = None) -> int:
    """
    Lines an assembled resume occupies under the page model.

    Independent of how the resume was assembled; an allocation result always
    measures exactly the used lines its usage report states.
    """
    layout = layout or PageLayout()
    used = layout.fixed_overhead_lines

    if resume.experience:
        used += layout.section_header_lines
        used += sum(layout.job_header_lines + len(job.bullets) for job in resume.experience)

    if resume.projects:
        used += layout.section_header_lines
        used += sum(layout.project_header_lines + len(p.bullets) for p in resume.projects)

    return used


def estimate_remaining_space(resume: ResumeData, layout: Optional[PageLayout] = None) -> int:
    """Remaining lines on the page, never negative."""
    layout = layout or PageLayout()
    return max(0, layout.total_page_lines - estimate_used_lines(resume, layout))


def estimate_page_space(resume: ResumeData, layout: Optional[PageLayout] = None) -> PageSpaceEstimate:
    """Full usage report for an arbitrary resume ("would this fit?")."""
    layout = layout or PageLayout()
    budget = LineBudget(total=layout.total_page_lines, used=estimate_used_lines(resume, layout))
    return budget.estimate(layout)
