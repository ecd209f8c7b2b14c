"""Reporter for pipeline output and progress tracking."""

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)

from wikibundle.domain.models import ExportJob, FileResult, RunReport, TransformOutcome


class _NoOpContext:
    def __enter__(self):
        return self

    def __exit__(self, *args):
        pass


class _ProgressContext:
    """Installs a Progress display on the reporter for the duration of a block."""

    def __init__(self, reporter: "Reporter", attribute: str, progress: Progress):
        self.reporter = reporter
        self.attribute = attribute
        self.progress = progress

    def __enter__(self):
        setattr(self.reporter, self.attribute, self.progress)
        self.progress.__enter__()
        return self.progress

    def __exit__(self, *args):
        self.progress.__exit__(*args)
        setattr(self.reporter, self.attribute, None)
        self.reporter._task_id = None


class Reporter:
    """Pipeline reporter with rich progress bars and one line per processed file."""

    def __init__(self, silent: bool = False) -> None:
        """Initialize reporter.

        Args:
            silent: If True, suppress all output (for testing/automation).
        """
        self.silent = silent
        self.console = Console(quiet=silent)
        self._poll_progress: Progress | None = None
        self._staging_progress: Progress | None = None
        self._task_id: int | None = None

    # Export job

    def report_export_started(self, job: ExportJob) -> None:
        """Report that the remote export job was accepted."""
        if not self.silent:
            self.console.print(f"Started export job [bold]{job.job_id}[/bold]")

    def poll_context(self):
        """Context manager for the export progress display."""
        if self.silent:
            return _NoOpContext()

        progress = Progress(
            SpinnerColumn(),
            TextColumn("{task.description}"),
            BarColumn(),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            TimeElapsedColumn(),
            console=self.console,
        )
        return _ProgressContext(self, "_poll_progress", progress)

    def create_poll_progress_hook(self):
        """Create a progress hook receiving the job after each status check."""
        if self.silent:

            def hook(job: ExportJob) -> None:
                pass

            return hook

        if self._poll_progress is None:
            raise RuntimeError("Must be called within poll_context")

        self._task_id = self._poll_progress.add_task("Exporting", total=100)

        def hook(job: ExportJob) -> None:
            if self._poll_progress is None or self._task_id is None:
                return

            try:
                completed = float(job.progress) if job.progress is not None else None
            except ValueError:
                completed = None

            if job.artifact_name:
                completed = 100
            if completed is not None:
                self._poll_progress.update(self._task_id, completed=completed)

        return hook

    # Staging

    def staging_context(self):
        """Context manager for the download and extraction progress display."""
        if self.silent:
            return _NoOpContext()

        progress = Progress(
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            TimeRemainingColumn(),
            console=self.console,
            expand=True,
        )
        return _ProgressContext(self, "_staging_progress", progress)

    def create_download_progress_hook(self, filename: str):
        """Create a progress hook for downloading a specific file."""
        if self.silent:

            def hook(downloaded: int, total: int | None) -> None:
                pass

            return hook

        if self._staging_progress is None:
            raise RuntimeError("Must be called within staging_context")

        task_id = self._staging_progress.add_task(f"Downloading {filename}", total=None)

        def hook(downloaded: int, total: int | None) -> None:
            if self._staging_progress is None:
                return

            if total is not None and self._staging_progress.tasks[task_id].total != total:
                self._staging_progress.update(task_id, total=total)

            self._staging_progress.update(task_id, completed=downloaded)

        return hook

    def create_extraction_progress_hook(self, filename: str):
        """Create a progress hook for extracting a specific archive."""
        if self.silent:

            def hook(member: str, current: int, total: int) -> None:
                pass

            return hook

        if self._staging_progress is None:
            raise RuntimeError("Must be called within staging_context")

        task_id = self._staging_progress.add_task(f"Extracting {filename}", total=None, start=False)

        def hook(member: str, current: int, total: int) -> None:
            if self._staging_progress is None:
                return

            if self._staging_progress.tasks[task_id].total is None:
                self._staging_progress.update(task_id, total=total)
                self._staging_progress.start_task(task_id)
            self._staging_progress.update(task_id, completed=current)

        return hook

    # Processing

    def report_file(self, result: FileResult) -> None:
        """Print one line for a processed file."""
        if self.silent:
            return

        if result.outcome.is_success:
            self.console.print(f"[green]✓[/green] {result.path}", highlight=False)
        elif result.outcome == TransformOutcome.FALLBACK:
            self.console.print(f"[red]✗ {result.path}[/red]", highlight=False)
        else:
            self.console.print(
                f"[bold red]✗ {result.path}[/bold red] [dim]({escape(result.error or '')})[/dim]",
                highlight=False,
            )

    def report_overlay(self, source, count: int) -> None:
        """Report how many redirect files were overlaid."""
        if not self.silent:
            self.console.print(f"Copied {count} redirect files from {source}")

    def report_summary(self, report: RunReport) -> None:
        """Report the outcome counts of a run."""
        if self.silent:
            return

        self.console.print(
            f"\n[bold]Processed {len(report.results)} files[/bold]: "
            f"[green]{report.count(TransformOutcome.MINIFIED)} minified[/green], "
            f"{report.count(TransformOutcome.COPIED)} copied, "
            f"[yellow]{report.count(TransformOutcome.FALLBACK)} fallback[/yellow], "
            f"[red]{report.count(TransformOutcome.FAILED)} failed[/red]"
        )

    def report_warning(self, message: str) -> None:
        """Report a warning message."""
        if not self.silent:
            self.console.print(f"\n[yellow]Warning:[/yellow] {escape(message)}")

    def report_error(self, message: str) -> None:
        """Report an error message."""
        if not self.silent:
            self.console.print(f"\n[red]Error:[/red] {escape(message)}")
