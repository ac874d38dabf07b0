"""Unit tests for page usage reports and the table formatter."""

import pytest

from quiver.contexts.catalog.models import ExperienceEntry, ResumeData
from quiver.contexts.intake.rankings import RankedContent
from quiver.contexts.targeting.allocation import allocate
from quiver.contexts.targeting.page_space import PageSpaceEstimate
from quiver.contexts.targeting.report import format_space_report, format_usage_report
from quiver.utils.report_formatter import Column, TableFormatter, format_percentage


@pytest.mark.unit
def test_format_percentage():
    assert format_percentage(31, 62) == "50.0%"
    assert format_percentage(1, 0) == "0.0%"


@pytest.mark.unit
def test_table_formatter_rejects_wrong_row_width():
    formatter = TableFormatter(columns=[Column("A", 5), Column("B", 5)])

    with pytest.raises(ValueError):
        formatter.add_row(["only one"])


@pytest.mark.unit
def test_space_report_lists_usage():
    space = PageSpaceEstimate(total_available_lines=62, used_lines=31, remaining_lines=31, can_fit_more_content=True)

    report = format_space_report(space)

    assert "PAGE SPACE USAGE" in report
    assert "50.0%" in report
    assert "Room for more content" in report


@pytest.mark.unit
def test_usage_report_lists_jobs_and_project():
    resume = ResumeData(experience=[ExperienceEntry(id="1", organization="Slurm", bullets=["a", "b", "c"])])

    report = format_usage_report(allocate(resume, RankedContent(), []))

    assert "ALLOCATION SUMMARY" in report
    assert "Slurm" in report
    assert "Project: none" in report
    assert "Bullets placed: 3 (0 from fill)" in report
