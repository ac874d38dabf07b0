"""Unit tests for the dynamic allocation engine."""

import copy

import pytest

from quiver.contexts.catalog.models import (
    BulletRecord,
    EntryId,
    ExperienceEntry,
    ProjectEntry,
    ResumeData,
    SkillCategory,
    SkillSet,
)
from quiver.contexts.intake.rankings import JobAnalysis, RankedBullet, RankedContent
from quiver.contexts.targeting.allocation import allocate, score_project, select_best_project
from quiver.contexts.targeting.page_space import PageLayout, estimate_used_lines


def make_job(job_id, count, prefix=None):
    prefix = prefix or f"job{job_id}"
    return ExperienceEntry(
        id=EntryId(str(job_id)),
        organization=f"Company {job_id}",
        position="Engineer",
        bullets=[f"{prefix} bullet {i}" for i in range(count)],
    )


def ranked(scores, required=None):
    return RankedContent(
        analysis=JobAnalysis(required_skills=list(required or [])),
        ranked_bullets=[RankedBullet(bullet_id, score) for bullet_id, score in scores.items()],
    )


def pool_bullet(bullet_id, owner, content=None):
    return BulletRecord(id=bullet_id, content=content or f"pool {bullet_id}", owner_id=EntryId(owner))


@pytest.mark.unit
def test_fill_exhausts_first_job_before_second():
    """Two spare lines go to job 1 in score order; job 2 keeps its minimum."""
    resume = ResumeData(experience=[make_job(1, 5), make_job(2, 3)])
    rankings = ranked({
        "1-0": 90, "1-1": 80, "1-2": 70, "1-3": 60, "1-4": 50,
        "2-0": 95, "2-1": 40, "2-2": 10,
    })
    # 12 static + 8 skills + 1 header + (2 + 3) * 2 jobs = 31 used, 2 spare
    layout = PageLayout(total_page_lines=33)

    result = allocate(resume, rankings, [], layout=layout)

    job1, job2 = result.resume_data.experience
    assert job1.bullets == [f"job1 bullet {i}" for i in range(5)]
    assert job2.bullets == ["job2 bullet 0", "job2 bullet 1", "job2 bullet 2"]
    assert result.page_space_used.used_lines == 33
    assert result.page_space_used.remaining_lines == 0
    assert result.page_space_used.can_fit_more_content is False
    assert result.optimization_details.fill_bullets_added == 2


@pytest.mark.unit
def test_pool_bullet_with_unknown_owner_is_never_selected():
    resume = ResumeData(experience=[make_job(1, 2)])
    pool = [pool_bullet("orphan", "99")]

    result = allocate(resume, ranked({"orphan": 100}), pool)

    assert "orphan" not in result.used_bullets
    assert result.page_space_used.used_lines == 12 + 8 + 1 + 2 + 2


@pytest.mark.unit
def test_ranked_id_missing_from_catalog_is_ignored():
    resume = ResumeData(experience=[make_job(1, 3)])

    result = allocate(resume, ranked({"ghost-1": 99, "1-2": 80}), [])

    assert "ghost-1" not in result.used_bullets
    assert result.used_bullets[0] == "1-2"
    assert len(result.resume_data.experience[0].bullets) == 3


@pytest.mark.unit
def test_no_projects_costs_nothing():
    resume = ResumeData(experience=[make_job(1, 3)])

    result = allocate(resume, ranked({}), [])

    assert result.resume_data.projects == []
    assert result.selected_project_id is None
    assert result.optimization_details.project_selected is False
    assert result.page_space_used.used_lines == 12 + 8 + 1 + 2 + 3


@pytest.mark.unit
def test_short_job_is_not_padded_and_does_not_block_others():
    resume = ResumeData(experience=[make_job(1, 2), make_job(2, 4)])

    result = allocate(resume, ranked({}), [], min_bullets_per_job=3)

    job1, job2 = result.resume_data.experience
    assert job1.bullets == ["job1 bullet 0", "job1 bullet 1"]
    assert len(job2.bullets) == 4


@pytest.mark.unit
def test_per_job_cap_is_a_hard_ceiling():
    resume = ResumeData(experience=[make_job(1, 4)])
    pool = [pool_bullet(f"p{i}", "1") for i in range(6)]

    result = allocate(resume, ranked({}), pool, min_bullets_per_job=10)

    assert len(result.resume_data.experience[0].bullets) == 6


@pytest.mark.unit
def test_minimum_guarantee_holds_when_budget_is_exhausted():
    """Guaranteed bullets are placed even when they overrun the page."""
    resume = ResumeData(experience=[make_job(1, 5), make_job(2, 5)])
    layout = PageLayout(total_page_lines=25)

    result = allocate(resume, ranked({}), [], layout=layout)

    assert [len(job.bullets) for job in result.resume_data.experience] == [3, 3]
    assert result.page_space_used.remaining_lines < 0
    assert result.optimization_details.fill_bullets_added == 0


@pytest.mark.unit
def test_fill_never_overcommits_budget():
    resume = ResumeData(experience=[make_job(1, 6), make_job(2, 6)])
    layout = PageLayout(total_page_lines=40)

    result = allocate(resume, ranked({}), [], layout=layout)

    assert result.page_space_used.used_lines <= 40
    assert result.page_space_used.remaining_lines >= 0


@pytest.mark.unit
def test_fill_spills_to_second_job_after_first_hits_cap():
    """Job 1 reaches the cap of 6 with lines to spare; the rest go to job 2."""
    resume = ResumeData(experience=[make_job(1, 8), make_job(2, 8)])
    # 20 fixed + 1 header + (2 + 3) * 2 jobs = 31 used, 9 spare
    layout = PageLayout(total_page_lines=40)

    result = allocate(resume, ranked({}), [], layout=layout)

    assert [len(job.bullets) for job in result.resume_data.experience] == [6, 6]
    assert result.used_bullets[6:] == ["1-3", "1-4", "1-5", "2-3", "2-4", "2-5"]
    assert result.page_space_used.used_lines == 37
    assert result.page_space_used.remaining_lines == 3
    assert result.optimization_details.fill_bullets_added == 6


@pytest.mark.unit
def test_fill_moves_on_when_first_job_runs_out():
    """Job 1 has one spare candidate; job 2 takes what is left of a tight budget."""
    resume = ResumeData(experience=[make_job(1, 4), make_job(2, 6)])
    # 31 used after the minimums, 3 spare: one for job 1, two for job 2
    layout = PageLayout(total_page_lines=34)

    result = allocate(resume, ranked({}), [], layout=layout)

    job1, job2 = result.resume_data.experience
    assert len(job1.bullets) == 4
    assert job2.bullets == [f"job2 bullet {i}" for i in range(5)]
    assert result.used_bullets[6:] == ["1-3", "2-3", "2-4"]
    assert result.page_space_used.remaining_lines == 0


@pytest.mark.unit
def test_jobs_beyond_the_second_keep_only_their_minimum():
    resume = ResumeData(experience=[make_job(1, 3), make_job(2, 3), make_job(3, 6)])

    result = allocate(resume, ranked({}), [], max_jobs=3)

    job3 = result.resume_data.experience[2]
    assert job3.bullets == ["job3 bullet 0", "job3 bullet 1", "job3 bullet 2"]
    assert result.optimization_details.fill_bullets_added == 0
    # 20 fixed + 1 header + (2 + 3) * 3 jobs
    assert result.page_space_used.used_lines == 36
    assert estimate_used_lines(result.resume_data) == 36


@pytest.mark.unit
def test_unranked_native_bullets_outrank_unranked_pool_bullets():
    resume = ResumeData(experience=[make_job(1, 2)])
    pool = [pool_bullet("p0", "1"), pool_bullet("p1", "1")]

    result = allocate(resume, ranked({}), pool, min_bullets_per_job=3)

    assert result.used_bullets[:3] == ["1-0", "1-1", "p0"]


@pytest.mark.unit
def test_explicit_zero_score_is_honoured():
    resume = ResumeData(experience=[make_job(1, 2)])
    pool = [pool_bullet("p0", "1")]

    result = allocate(resume, ranked({"1-0": 0}), pool, min_bullets_per_job=2)

    # 1-1 defaults to 50, p0 to 30, 1-0 explicitly 0
    assert result.used_bullets[:2] == ["1-1", "p0"]


@pytest.mark.unit
def test_only_most_recent_jobs_are_included():
    resume = ResumeData(experience=[make_job(1, 3), make_job(2, 3), make_job(3, 3)])

    result = allocate(resume, ranked({}), [], max_jobs=2)

    assert [job.id for job in result.resume_data.experience] == ["1", "2"]
    assert result.optimization_details.jobs_prioritized is True


@pytest.mark.unit
def test_zero_jobs_skips_experience_section():
    resume = ResumeData(experience=[make_job(1, 3)])

    result = allocate(resume, ranked({}), [], max_jobs=0)

    assert result.resume_data.experience == []
    assert result.used_bullets == []
    assert result.optimization_details.jobs_prioritized is False
    assert result.page_space_used.used_lines == 20


@pytest.mark.unit
def test_negative_parameters_are_rejected():
    with pytest.raises(ValueError):
        allocate(ResumeData(), ranked({}), [], max_jobs=-1)


@pytest.mark.unit
def test_best_project_is_kept_verbatim():
    projects = [
        ProjectEntry(id=EntryId("a"), name="Ledger", technologies="Go, PostgreSQL", bullets=["x"]),
        ProjectEntry(id=EntryId("b"), name="Planner", technologies="Python PyTorch", bullets=["y", "z"]),
    ]
    resume = ResumeData(experience=[make_job(1, 3)], projects=projects)

    result = allocate(resume, ranked({}, required=["pytorch", "AWS"]), [])

    assert result.selected_project_id == "b"
    assert [p.name for p in result.resume_data.projects] == ["Planner"]
    assert result.resume_data.projects[0].bullets == ["y", "z"]


@pytest.mark.unit
def test_zero_score_project_is_still_selected_first_wins():
    projects = [
        ProjectEntry(id=EntryId("a"), name="A", technologies="Rust"),
        ProjectEntry(id=EntryId("b"), name="B", technologies="Haskell"),
    ]

    assert select_best_project(projects, ["Python"]).id == "a"
    assert select_best_project([], ["Python"]) is None


@pytest.mark.unit
def test_project_score_matches_substrings_both_ways():
    project = ProjectEntry(id=EntryId("a"), name="A", technologies="React, node.js,  AWS")

    assert score_project(project, ["React Native", "Node"]) == 2
    assert score_project(project, ["", "  "]) == 0


@pytest.mark.unit
def test_usage_report_matches_independent_estimate():
    projects = [ProjectEntry(id=EntryId("a"), name="A", technologies="Python", bullets=["x", "y"])]
    resume = ResumeData(experience=[make_job(1, 5), make_job(2, 2)], projects=projects)
    pool = [pool_bullet("p0", "2"), pool_bullet("p1", "2")]

    result = allocate(resume, ranked({"p1": 99}, required=["python"]), pool)

    assert estimate_used_lines(result.resume_data) == result.page_space_used.used_lines


@pytest.mark.unit
def test_inputs_are_not_mutated():
    skills = SkillSet({SkillCategory.PROGRAMMING_LANGUAGES: ["Go", "Python"]})
    resume = ResumeData(experience=[make_job(1, 5)], skills=skills)
    pool = [pool_bullet("p0", "1")]
    before = copy.deepcopy((resume, pool))

    allocate(resume, ranked({"1-4": 99}), pool)

    assert (resume, pool) == before


@pytest.mark.unit
def test_result_serializes_to_wire_shape():
    resume = ResumeData(experience=[make_job(1, 3)])

    data = allocate(resume, ranked({}), []).to_dict()

    assert set(data) == {
        "resumeData", "usedBullets", "selectedProjectId", "pageSpaceUsed", "optimizationDetails",
    }
    assert data["pageSpaceUsed"]["totalAvailableLines"] == 62
    assert data["optimizationDetails"]["totalBulletsAdded"] == 3
