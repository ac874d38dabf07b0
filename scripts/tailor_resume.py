#!/usr/bin/env python3
"""
Resume Tailoring CLI

Ranks a profile's content against a job description and assembles a
single-page resume from it.

Commands:
    analyze  - Rank profile bullets and skills against a job description (LLM)
    allocate - Build a single-page resume from a profile and saved rankings
    optimize - Trim a profile with the legacy bullet-count optimizer
    estimate - Report line usage of a profile's resume
    save     - Store a profile in the profile store

Examples:\n

    tailor_resume.py analyze profile.yaml job.txt -o rankings.json

    tailor_resume.py allocate profile.yaml rankings.json -o resume.json --markdown resume.md

    tailor_resume.py allocate profile.yaml rankings.json --preset dense

    tailor_resume.py estimate profile.yaml
"""

import json
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from quiver.contexts.catalog import InvalidProfileStructureError, ProfileStore, load_profile
from quiver.contexts.catalog.storage import PROFILE_STORE_PATH
from quiver.contexts.intake import (
    AnalysisRequest,
    InvalidAnalysisRequestError,
    OracleResponseError,
    RelevanceOracle,
    load_ranked_content,
    user_skills_from,
)
from quiver.contexts.targeting import (
    allocate,
    estimate_page_fit,
    estimate_page_space,
    format_space_report,
    format_usage_report,
    load_page_layout,
    optimize_for_single_page,
)
from quiver.contexts.targeting.logger import setup_targeting_logger
from quiver.contexts.templating import format_resume_markdown
from quiver.utils.llm import get_provider
from quiver.utils.logger import setup_logger

app = typer.Typer(
    help="Tailor a resume profile to a job description within a single page",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _fail(message: str) -> None:
    typer.secho(f"Error: {message}\n", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _load_profile_or_exit(profile_path: Path):
    try:
        return load_profile(profile_path)
    except (FileNotFoundError, InvalidProfileStructureError) as e:
        _fail(str(e))


def _load_layout_or_exit(preset: Optional[str], layout_config: Optional[Path]):
    try:
        return load_page_layout(preset=preset, config_path=layout_config)
    except (FileNotFoundError, ValueError) as e:
        _fail(f"Invalid page layout: {e}")


def _write_json(data, output: Optional[Path]) -> None:
    text = json.dumps(data, indent=2)
    if output is None:
        typer.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    typer.echo(f"  Wrote: {output}")


PresetOption = Annotated[
    Optional[str],
    typer.Option("--preset", help="Page layout preset (default: PAGE_LAYOUT_PRESET or 'default')"),
]
LayoutConfigOption = Annotated[
    Optional[Path],
    typer.Option("--layout-config", help="Page layout presets file (default: PAGE_LAYOUT_PATH)"),
]


@app.command("analyze")
def analyze_command(
    profile_path: Annotated[Path, typer.Argument(help="Profile YAML/JSON file")],
    job_path: Annotated[Path, typer.Argument(help="Job description text file")],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write rankings JSON here (default: stdout)"),
    ] = None,
    provider_name: Annotated[
        Optional[str],
        typer.Option("--provider", help="LLM provider: anthropic or openai (default: LLM_PROVIDER)"),
    ] = None,
    model: Annotated[Optional[str], typer.Option("--model", help="Model name override")] = None,
    record: Annotated[
        bool,
        typer.Option("--record/--no-record", help="Keep the analysis in the profile store"),
    ] = True,
):
    """
    Rank profile content against a job description with the relevance oracle.

    Examples:\n

        $ tailor_resume.py analyze profile.yaml job.txt -o rankings.json

        $ tailor_resume.py analyze profile.yaml job.txt --provider openai
    """
    setup_logger("intake")
    profile = _load_profile_or_exit(profile_path)
    if not job_path.exists():
        _fail(f"Job description not found: {job_path}")

    typer.secho(f"\nAnalyzing: {job_path.name}", fg=typer.colors.BLUE, bold=True)

    request = AnalysisRequest(
        job_description=job_path.read_text(encoding="utf-8"),
        user_skills=user_skills_from(profile.resume.skills),
        available_bullets=list(profile.bullet_pool),
    )
    try:
        oracle = RelevanceOracle(get_provider(provider_name, model))
        ranked = oracle.analyze(request)
    except (InvalidAnalysisRequestError, OracleResponseError, ValueError, ImportError) as e:
        _fail(f"Analysis failed: {e}")

    typer.secho(
        f"✓ {ranked.analysis.job_title} at {ranked.analysis.company}: match score {ranked.match_score:.0f}",
        fg=typer.colors.GREEN,
        bold=True,
    )
    if record:
        ProfileStore().record_analysis(ranked.to_dict())
        typer.echo(f"  Recorded in: {PROFILE_STORE_PATH}")
    _write_json(ranked.to_dict(), output)


@app.command("allocate")
def allocate_command(
    profile_path: Annotated[Path, typer.Argument(help="Profile YAML/JSON file")],
    rankings_path: Annotated[Path, typer.Argument(help="Rankings JSON from 'analyze'")],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write optimized resume JSON here (default: stdout)"),
    ] = None,
    markdown: Annotated[
        Optional[Path],
        typer.Option("--markdown", "-m", help="Also write a markdown preview"),
    ] = None,
    max_jobs: Annotated[
        int, typer.Option("--max-jobs", help="Most recent jobs to include", min=0)
    ] = 2,
    min_bullets: Annotated[
        int, typer.Option("--min-bullets", help="Bullets guaranteed per included job", min=0)
    ] = 3,
    preset: PresetOption = None,
    layout_config: LayoutConfigOption = None,
):
    """
    Assemble a single-page resume from a profile and saved rankings.

    Examples:\n

        $ tailor_resume.py allocate profile.yaml rankings.json -o resume.json

        $ tailor_resume.py allocate profile.yaml rankings.json --max-jobs 3 --preset dense
    """
    layout = _load_layout_or_exit(preset, layout_config)
    setup_targeting_logger(layout=layout)
    profile = _load_profile_or_exit(profile_path)

    if not rankings_path.exists():
        _fail(f"Rankings file not found: {rankings_path}")
    try:
        ranked = load_ranked_content(rankings_path.read_text(encoding="utf-8"))
    except OracleResponseError as e:
        _fail(str(e))

    result = allocate(
        profile.resume,
        ranked,
        profile.bullet_pool,
        max_jobs=max_jobs,
        min_bullets_per_job=min_bullets,
        layout=layout,
    )

    typer.echo("")
    typer.echo(format_usage_report(result))
    typer.echo("")
    _write_json(result.to_dict(), output)

    if markdown is not None:
        markdown.parent.mkdir(parents=True, exist_ok=True)
        markdown.write_text(format_resume_markdown(result.resume_data), encoding="utf-8")
        typer.echo(f"  Wrote: {markdown}")


@app.command("optimize")
def optimize_command(
    profile_path: Annotated[Path, typer.Argument(help="Profile YAML/JSON file")],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write trimmed resume JSON here (default: stdout)"),
    ] = None,
):
    """
    Trim a profile with the legacy bullet-count optimizer (no rankings needed).
    """
    setup_logger("target")
    profile = _load_profile_or_exit(profile_path)
    optimized = optimize_for_single_page(profile.resume, profile.bullet_pool)

    if estimate_page_fit(optimized):
        typer.secho("✓ Fits the legacy bullet budget", fg=typer.colors.GREEN, bold=True)
    else:
        typer.secho("✗ Exceeds the legacy bullet budget", fg=typer.colors.YELLOW, bold=True)
    _write_json(optimized.to_dict(), output)


@app.command("estimate")
def estimate_command(
    profile_path: Annotated[Path, typer.Argument(help="Profile YAML/JSON file")],
    preset: PresetOption = None,
    layout_config: LayoutConfigOption = None,
):
    """
    Report how many page lines a profile's resume uses as-is.
    """
    layout = _load_layout_or_exit(preset, layout_config)
    profile = _load_profile_or_exit(profile_path)
    space = estimate_page_space(profile.resume, layout)

    typer.echo(format_space_report(space, title=f"PAGE SPACE: {profile_path.name}"))
    if space.remaining_lines < 0:
        typer.secho(f"\n✗ Overflows by {-space.remaining_lines} lines", fg=typer.colors.RED)
        raise typer.Exit(code=1)


@app.command("save")
def save_command(
    profile_path: Annotated[Path, typer.Argument(help="Profile YAML/JSON file")],
):
    """
    Store a profile (resume data and bullet pool) in the profile store.
    """
    profile = _load_profile_or_exit(profile_path)
    store = ProfileStore()
    store.save_profile(profile)
    typer.secho(f"✓ Saved {profile.resume!r}", fg=typer.colors.GREEN)
    typer.echo(f"  Store: {store.store_path}")


if __name__ == "__main__":
    app()
