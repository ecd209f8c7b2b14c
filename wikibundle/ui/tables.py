"""Table rendering utilities for CLI output."""

from collections import Counter

from rich.table import Table

from wikibundle.domain.models import FileResult, RunReport, TransformOutcome

OUTCOME_COLORS = {
    TransformOutcome.MINIFIED: "green",
    TransformOutcome.COPIED: "white",
    TransformOutcome.FALLBACK: "yellow",
    TransformOutcome.FAILED: "red",
}


def create_result_table(results: list[FileResult], title_suffix: str = "") -> Table:
    """Create a table for displaying per-file results.

    Args:
        results: File results to display
        title_suffix: Optional suffix for table title

    Returns:
        Rich Table object ready for display
    """
    table = Table(title=f"Files ({len(results)} total){title_suffix}")
    table.add_column("Path", style="white")
    table.add_column("Kind", style="cyan")
    table.add_column("Outcome")
    table.add_column("Error", style="dim")

    for result in results:
        color = OUTCOME_COLORS[result.outcome]
        table.add_row(
            result.path,
            result.kind.value,
            f"[{color}]{result.outcome.value}[/{color}]",
            result.error or "-",
        )

    return table


def create_run_table(report: RunReport) -> Table:
    """Create a table summarizing a run.

    Args:
        report: Run report to summarize

    Returns:
        Rich Table object ready for display
    """
    table = Table(title="Last Run", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("Stage", report.stage.value)
    table.add_row("Job", report.job.job_id if report.job else "-")
    table.add_row("Artifact", (report.job.artifact_name or "-") if report.job else "-")
    table.add_row(
        "Started", report.started_at.strftime("%Y-%m-%d %H:%M:%S") if report.started_at else "-"
    )
    table.add_row(
        "Finished", report.finished_at.strftime("%Y-%m-%d %H:%M:%S") if report.finished_at else "-"
    )

    table.add_section()
    for outcome, color in OUTCOME_COLORS.items():
        count = report.count(outcome)
        table.add_row(outcome.value, f"[{color}]{count}[/{color}]" if count else "-")

    return table


def format_outcome_summary(results: list[FileResult]) -> str:
    """Create a summary string of file counts by outcome.

    Args:
        results: File results to count

    Returns:
        Formatted summary string like "2 copied, 3 minified"
    """
    counts = Counter(result.outcome.value for result in results)
    return ", ".join(f"{count} {outcome}" for outcome, count in sorted(counts.items()))
