"""Text reports of page-space usage."""

from quiver.contexts.targeting.page_space import PageSpaceEstimate
from quiver.utils.report_formatter import Column, TableFormatter, format_percentage


def format_space_report(space: PageSpaceEstimate, title: str = "PAGE SPACE USAGE") -> str:
    """
    Format a usage estimate as a two-column table.

    Returns:
        Formatted string report
    """
    formatter = TableFormatter(
        columns=[Column("Metric", 30, "<"), Column("Value", 15, ">")],
        total_width=46,
    )

    formatter.add_section_header(title)
    formatter.add_table_header()
    formatter.add_separator("-")
    formatter.add_row(["Total lines", space.total_available_lines])
    formatter.add_row(["Used lines", space.used_lines])
    formatter.add_row(["Remaining lines", space.remaining_lines])
    formatter.add_row(
        ["Page used", format_percentage(space.used_lines, space.total_available_lines)]
    )
    formatter.add_row(["Room for more content", "yes" if space.can_fit_more_content else "no"])
    return formatter.render()


def format_usage_report(result) -> str:
    """
    Format an AllocationResult's usage and selection summary.

    Args:
        result: AllocationResult from allocate()

    Returns:
        Formatted string report
    """
    details = result.optimization_details
    lines = [format_space_report(result.page_space_used, title="ALLOCATION SUMMARY")]

    formatter = TableFormatter(
        columns=[Column("Job", 30, "<"), Column("Bullets", 15, ">")],
        total_width=46,
    )
    formatter.add_blank_line()
    formatter.add_table_header()
    formatter.add_separator("-")
    for job in result.resume_data.experience:
        formatter.add_row([job.organization or job.id, len(job.bullets)])
    formatter.add_blank_line()
    formatter.add_text(f"Project: {result.selected_project_id or 'none'}")
    formatter.add_text(
        f"Bullets placed: {details.total_bullets_added} ({details.fill_bullets_added} from fill)"
    )
    formatter.add_text(f"Skills reordered: {'yes' if details.skills_reordered else 'no'}")
    lines.append(formatter.render())

    return "\n".join(lines)
