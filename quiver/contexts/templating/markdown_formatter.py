"""
Markdown Utilities

Helper functions for formatting resume data as a markdown preview.
"""

from typing import List

from quiver.contexts.catalog.models import (
    EducationEntry,
    ExperienceEntry,
    PersonalInfo,
    ProjectEntry,
    ResumeData,
    SkillSet,
)


def format_header_markdown(info: PersonalInfo) -> str:
    """Name as # header, title in bold, contact details on one line."""
    parts = [f"# {info.name or 'Unnamed'}\n"]
    if info.title:
        parts.append(f"**{info.title}**\n")

    contact = [
        value
        for value in (info.email, info.phone, info.location, info.linkedin, info.github, info.portfolio)
        if value
    ]
    if contact:
        parts.append(" | ".join(contact))

    return "\n".join(parts)


def format_experience_markdown(job: ExperienceEntry) -> str:
    """
    Format single work experience entry as markdown.

    Organization is formatted as ### (section header added separately by caller).

    Args:
        job: Experience entry

    Returns:
        Markdown-formatted work experience (without section header)
    """
    parts = [f"### {job.organization or 'Unknown Company'}\n"]

    if job.position:
        parts.append(f"**{job.position}**")
    if job.dates:
        parts.append(f"*{job.dates}*")

    parts.append("")  # Blank line before bullets

    for bullet in job.bullets:
        parts.append(f"- {bullet}")

    return "\n".join(parts)


def format_project_markdown(project: ProjectEntry) -> str:
    parts = [f"### {project.name}\n"]
    if project.technologies:
        parts.append(f"*{project.technologies}*\n")
    for bullet in project.bullets:
        parts.append(f"- {bullet}")
    return "\n".join(parts)


def format_skills_markdown(skills: SkillSet) -> str:
    """
    Format non-empty skill categories as one line each.

    Returns:
        Markdown-formatted skills section
    """
    parts = ["## Skills\n"]
    for category, items in skills.categories.items():
        if items:
            parts.append(f"- **{category.display_name}:** {', '.join(items)}")
    return "\n".join(parts)


def format_education_markdown(entry: EducationEntry) -> str:
    parts = [f"### {entry.institution or entry.degree}\n"]

    if entry.degree and entry.institution:
        parts.append(f"**{entry.degree}**")
    if entry.graduation_date:
        parts.append(f"*{entry.graduation_date}*")

    parts.append("")

    if entry.courses:
        parts.append(f"- Coursework: {', '.join(entry.courses)}")
    for bullet in entry.bullets:
        parts.append(f"- {bullet}")

    return "\n".join(parts)


def format_resume_markdown(resume: ResumeData) -> str:
    """
    Format a complete resume as markdown.

    Empty sections are omitted.

    Args:
        resume: Resume to format (typically an allocation result)

    Returns:
        Markdown document
    """
    sections: List[str] = [format_header_markdown(resume.personal_info)]

    if resume.experience:
        sections.append("## Experience\n")
        sections.extend(format_experience_markdown(job) for job in resume.experience)

    if resume.projects:
        sections.append("## Projects\n")
        sections.extend(format_project_markdown(p) for p in resume.projects)

    if resume.skills.all_skills():
        sections.append(format_skills_markdown(resume.skills))

    if resume.education:
        sections.append("## Education\n")
        sections.extend(format_education_markdown(e) for e in resume.education)

    return "\n\n".join(sections) + "\n"
