"""Unit tests for the legacy single-pass optimizer."""

import pytest

from quiver.contexts.catalog.models import (
    BulletRecord,
    EducationEntry,
    EntryId,
    ExperienceEntry,
    ProjectEntry,
    ResumeData,
)
from quiver.contexts.targeting.candidates import CandidateIndex
from quiver.contexts.targeting.legacy import (
    calculate_allocation,
    estimate_page_fit,
    impact_score,
    optimize_for_single_page,
)


def make_job(job_id, count):
    return ExperienceEntry(
        id=EntryId(str(job_id)),
        organization=f"Company {job_id}",
        bullets=[f"job{job_id} bullet {i}" for i in range(count)],
    )


@pytest.mark.unit
def test_impact_heuristic():
    def record(impact):
        return BulletRecord(id="x", content="x", impact=impact)

    assert impact_score(record("40% faster")) == 3
    assert impact_score(record("cost reduction")) == 2
    assert impact_score(record("Cost Reduction")) == 1
    assert impact_score(record("big improvement")) == 2
    assert impact_score(record("shipped it")) == 1
    assert impact_score(record(None)) == 1


@pytest.mark.unit
def test_extra_bullets_go_to_most_recent_jobs():
    jobs = [make_job(1, 8), make_job(2, 8), make_job(3, 8), make_job(4, 8)]

    allocations = calculate_allocation(jobs, CandidateIndex([]))

    # 18 - 4 * 4 = 2 extra, all to the first job
    assert [a.bullet_count for a in allocations] == [6, 4, 4, 4]
    assert [a.priority for a in allocations] == [4, 3, 2, 1]


@pytest.mark.unit
def test_extra_limited_by_available_bullets():
    jobs = [make_job(1, 5), make_job(2, 8)]

    allocations = calculate_allocation(jobs, CandidateIndex([]))

    assert [a.bullet_count for a in allocations] == [5, 7]


@pytest.mark.unit
def test_native_bullets_first_then_pool_by_impact():
    resume = ResumeData(experience=[make_job(1, 4)])
    pool = [
        BulletRecord(id="plain", content="plain", owner_id=EntryId("1")),
        BulletRecord(id="pct", content="pct", impact="30% more", owner_id=EntryId("1")),
        BulletRecord(id="red", content="red", impact="latency reduction", owner_id=EntryId("1")),
        BulletRecord(id="other", content="other", impact="99%", owner_id=EntryId("2")),
    ]

    optimized = optimize_for_single_page(resume, pool)

    assert optimized.experience[0].bullets == [
        "job1 bullet 0", "job1 bullet 1", "job1 bullet 2", "job1 bullet 3", "pct", "red", "plain",
    ]


@pytest.mark.unit
def test_never_exceeds_total_and_never_fabricates():
    resume = ResumeData(experience=[make_job(1, 10), make_job(2, 10), make_job(3, 2)])

    optimized = optimize_for_single_page(resume, [])

    counts = [len(job.bullets) for job in optimized.experience]
    assert counts == [7, 7, 2]
    assert sum(counts) <= 18


@pytest.mark.unit
def test_projects_all_kept_and_trimmed():
    projects = [
        ProjectEntry(id=EntryId("a"), name="A", bullets=["1", "2", "3", "4", "5"]),
        ProjectEntry(id=EntryId("b"), name="B", bullets=["1"]),
    ]
    resume = ResumeData(projects=projects)

    optimized = optimize_for_single_page(resume, [])

    assert [len(p.bullets) for p in optimized.projects] == [4, 1]
    assert len(resume.projects[0].bullets) == 5


@pytest.mark.unit
def test_estimate_page_fit_counts_first_education_entry():
    education = [
        EducationEntry(id=EntryId("e1"), degree="BS", bullets=["a", "b"]),
        EducationEntry(id=EntryId("e2"), degree="MS", bullets=["c"] * 10),
    ]

    assert estimate_page_fit(ResumeData(experience=[make_job(1, 16)], education=education))
    assert not estimate_page_fit(ResumeData(experience=[make_job(1, 17)], education=education))
