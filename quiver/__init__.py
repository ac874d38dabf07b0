"""
QUIVER - Quick Update of Individual Vitae for Employer Requirements

A resume tailoring system that ranks a structured profile against a job
description and packs the best-matching content onto a single page.

Architecture:
- Catalog Context: Profile data model, loading and key-value storage
- Intake Context: Job analysis requests and relevance oracle rankings
- Targeting Context: Space-constrained content allocation
- Templating Context: Preview formatting of assembled resumes
"""

__version__ = "0.1.0"
