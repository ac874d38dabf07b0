"""
Templating Context

Responsibilities:
- Formats resume data for human review (markdown preview)

Owns: Presentation of assembled resumes
Never: Makes content prioritization decisions
"""

from quiver.contexts.templating.markdown_formatter import (
    format_education_markdown,
    format_experience_markdown,
    format_resume_markdown,
    format_skills_markdown,
)

__all__ = [
    "format_education_markdown",
    "format_experience_markdown",
    "format_resume_markdown",
    "format_skills_markdown",
]
