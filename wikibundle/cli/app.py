"""Typer-based CLI for wiki space exports."""

import logging

import orjson
import typer
from pydantic import ValidationError
from rich.logging import RichHandler

from wikibundle.config import Settings
from wikibundle.domain.models import AssetKind, TransformOutcome
from wikibundle.domain.services import ReportQueryService
from wikibundle.errors import ExportError
from wikibundle.orchestrators import SiteExport
from wikibundle.state.manager import RunReportManager
from wikibundle.ui import Reporter
from wikibundle.ui.tables import create_result_table, create_run_table, format_outcome_summary

app = typer.Typer(help="Export a wiki space into a minified static bundle")


def _configure_logging(verbose: bool) -> None:
    """Route log records through rich, INFO when verbose and WARNING otherwise."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


def _load_settings(reporter: Reporter, **overrides) -> Settings:
    """Build settings, turning validation errors into a clean exit."""
    try:
        return Settings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        reporter.report_error(f"Invalid configuration:\n{e}")
        raise typer.Exit(2) from e


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """Show help when no subcommand is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command()
def run(
    max_attempts: int = typer.Option(
        None, "--max-attempts", help="Give up after this many status checks"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show info-level logs"),
):
    """Export the space, stage the archive and build the output tree."""
    _configure_logging(verbose)
    reporter = Reporter()
    config = _load_settings(reporter, max_poll_attempts=max_attempts)
    orchestrator = SiteExport(config)

    with RunReportManager(config.report_file, load=False) as manager:
        try:
            manager.data = orchestrator.run(reporter=reporter)
        except ExportError as e:
            reporter.report_error(str(e))
            raise typer.Exit(1) from e


@app.command()
def process(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show info-level logs"),
):
    """Rebuild the output tree from the current staging tree."""
    _configure_logging(verbose)
    reporter = Reporter()
    config = _load_settings(reporter)

    if not config.staging_dir.is_dir():
        reporter.report_error(f"Staging directory {config.staging_dir} does not exist")
        raise typer.Exit(1)

    orchestrator = SiteExport(config)
    with RunReportManager(config.report_file, load=False) as manager:
        manager.data = orchestrator.process_staged(reporter=reporter)


@app.command()
def report(
    outcome: str = typer.Option(
        None,
        "--outcome",
        "-o",
        help="Filter by outcome: minified, copied, copied-fallback, failed",
    ),
    kind: str = typer.Option(None, "--kind", "-k", help="Filter by kind: script, style, other"),
    limit: int = typer.Option(None, "--limit", "-n", help="Limit number of results"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Show the results of the last run."""
    reporter = Reporter()
    config = _load_settings(reporter)

    valid_outcomes = {o.value for o in TransformOutcome}
    if outcome and outcome not in valid_outcomes:
        reporter.console.print(
            f"[red]Invalid outcome: {outcome}[/red]\n"
            f"Valid options: {', '.join(sorted(valid_outcomes))}"
        )
        raise typer.Exit(1)

    valid_kinds = {k.value for k in AssetKind}
    if kind and kind not in valid_kinds:
        reporter.console.print(
            f"[red]Invalid kind: {kind}[/red]\nValid options: {', '.join(sorted(valid_kinds))}"
        )
        raise typer.Exit(1)

    if not config.report_file.exists():
        reporter.console.print("[dim]No run recorded yet[/dim]")
        return

    with RunReportManager(config.report_file) as manager:
        results = ReportQueryService.get_results_by_filter(
            manager.data, outcome=outcome, kind=kind, limit=limit
        )

        if json_output:
            payload = [result.model_dump(mode="json") for result in results]
            typer.echo(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode())
            return

        reporter.console.print(create_run_table(manager.data))

        if not results:
            reporter.console.print("[dim]No matching files found[/dim]")
            return

        reporter.console.print(create_result_table(results))
        reporter.console.print(f"\n[bold]Summary:[/bold] {format_outcome_summary(results)}")


if __name__ == "__main__":
    app()
