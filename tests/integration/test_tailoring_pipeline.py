"""
Integration test for the tailoring pipeline.
Tests: profile file + saved rankings → allocation → wire shape, report and markdown.
"""

import importlib.util
import json
from pathlib import Path

import pytest
from loguru import logger
from typer.testing import CliRunner

from quiver.contexts.catalog import load_profile
from quiver.contexts.catalog.models import SkillCategory
from quiver.contexts.intake import load_ranked_content
from quiver.contexts.targeting import (
    allocate,
    estimate_page_fit,
    estimate_used_lines,
    format_usage_report,
    optimize_for_single_page,
)
from quiver.contexts.templating import format_resume_markdown

FIXTURES_PATH = Path(__file__).parent.parent / "fixtures"
SCRIPT_PATH = Path(__file__).parent.parent.parent / "scripts" / "tailor_resume.py"


def load_inputs():
    profile = load_profile(FIXTURES_PATH / "profile.yaml")
    ranked = load_ranked_content((FIXTURES_PATH / "rankings.json").read_text(encoding="utf-8"))
    return profile, ranked


def load_cli():
    spec = importlib.util.spec_from_file_location("tailor_resume", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module.app


@pytest.mark.integration
def test_allocation_of_fixture_profile():
    """Best project, two most recent jobs, filled to the per-job cap in score order."""
    profile, ranked = load_inputs()

    result = allocate(profile.resume, ranked, profile.bullet_pool)

    assert result.selected_project_id == "p2"
    assert [job.id for job in result.resume_data.experience] == ["1", "2"]
    assert result.used_bullets == [
        "b1", "1-0", "1-2",  # job 1 guaranteed
        "b5", "2-0", "2-1",  # job 2 guaranteed
        "1-1", "b4", "b2",   # job 1 fill up to the cap
        "2-2", "b6",         # job 2 fill, out of candidates
    ]

    job1, job2 = result.resume_data.experience
    assert len(job1.bullets) == 6
    assert job1.bullets[0] == "Cut route planning latency by 40% with batched inference"
    assert "Won the company chili cook-off" not in job1.bullets
    assert len(job2.bullets) == 5

    # 20 fixed + project (1 + 2 + 3) + jobs (1 + 2+6 + 2+5)
    assert result.page_space_used.used_lines == 42
    assert result.page_space_used.remaining_lines == 20
    assert estimate_used_lines(result.resume_data) == 42

    details = result.optimization_details
    assert details.total_bullets_added == 11
    assert details.fill_bullets_added == 5
    assert details.project_selected and details.jobs_prioritized and details.skills_reordered


@pytest.mark.integration
def test_skills_reordered_within_categories():
    profile, ranked = load_inputs()

    skills = allocate(profile.resume, ranked, profile.bullet_pool).resume_data.skills

    assert skills[SkillCategory.PROGRAMMING_LANGUAGES] == ["Python", "Go", "Java"]
    assert skills[SkillCategory.CLOUD_AND_DEVOPS] == ["AWS", "Docker", "Kubernetes"]
    assert skills[SkillCategory.SOFTWARE_AND_TOOLS] == ["Git", "Airflow"]
    assert skills[SkillCategory.SOFT_SKILLS] == ["Mentoring", "Delivery under pressure"]
    assert sorted(skills.all_skills()) == sorted(profile.resume.skills.all_skills())


@pytest.mark.integration
def test_result_is_json_serializable_and_renders():
    profile, ranked = load_inputs()
    result = allocate(profile.resume, ranked, profile.bullet_pool)

    data = json.loads(json.dumps(result.to_dict()))
    markdown = format_resume_markdown(result.resume_data)
    report = format_usage_report(result)

    assert data["resumeData"]["projects"][0]["name"] == "Pathfinder"
    assert data["resumeData"]["education"] == profile.resume.to_dict()["education"]
    assert "### Planet Express" in markdown
    assert "Applied Cryogenics" not in markdown
    assert "Project: p2" in report


@pytest.mark.integration
def test_legacy_optimizer_on_fixture_profile():
    profile, _ = load_inputs()

    optimized = optimize_for_single_page(profile.resume, profile.bullet_pool)

    assert [len(job.bullets) for job in optimized.experience] == [7, 5, 2]
    assert len(optimized.projects) == 2
    assert estimate_page_fit(optimized) is False


@pytest.mark.integration
def test_cli_allocate_writes_outputs(tmp_path, monkeypatch):
    monkeypatch.setenv("LOGS_PATH", str(tmp_path / "logs"))
    monkeypatch.setattr("quiver.utils.logger.LOGS_PATH", tmp_path / "logs")
    output = tmp_path / "resume.json"
    markdown = tmp_path / "resume.md"

    result = CliRunner().invoke(
        load_cli(),
        [
            "allocate",
            str(FIXTURES_PATH / "profile.yaml"),
            str(FIXTURES_PATH / "rankings.json"),
            "--output", str(output),
            "--markdown", str(markdown),
        ],
    )
    # console sink is bound to the runner's captured stream
    logger.remove()

    assert result.exit_code == 0, result.output
    assert "ALLOCATION SUMMARY" in result.output
    assert json.loads(output.read_text())["selectedProjectId"] == "p2"
    assert markdown.read_text().startswith("# Philip J. Fry")


@pytest.mark.integration
def test_cli_reports_missing_profile(tmp_path):
    result = CliRunner().invoke(load_cli(), ["estimate", str(tmp_path / "missing.yaml")])

    assert result.exit_code == 1
