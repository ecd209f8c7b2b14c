"""Site export orchestrator.

Coordinates the complete export, staging and processing workflow.
"""

import asyncio
import logging
from datetime import datetime

import httpx

from wikibundle.config import Settings
from wikibundle.domain.models import (
    ExportJob,
    FileResult,
    PipelineStage,
    RunReport,
    TransformOutcome,
)
from wikibundle.domain.services import StagingLayout
from wikibundle.domain.types import SleepFunc
from wikibundle.errors import AssetWriteError
from wikibundle.operations.client import ExportClient
from wikibundle.operations.overlay import overlay_directory
from wikibundle.operations.poll import poll_export
from wikibundle.operations.retrieve import retrieve_artifact
from wikibundle.operations.transform import AssetTransformer
from wikibundle.operations.walk import iter_files
from wikibundle.ui import Reporter

logger = logging.getLogger(__name__)


class SiteExport:
    """Orchestrates the complete site export workflow.

    This orchestrator moves through fixed stages:
    1. start: ask the service to export the root page
    2. exporting: poll until the job names its artifact
    3. staged: download and unpack the artifact into the staging root
    4. walking: minify or copy every staged file into the output root
    5. done: overlay redirect content onto the staging root

    Errors before walking abort the run. Errors while walking are recorded per
    file and never abort it.
    """

    def __init__(
        self,
        config: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        """Initialize the site export orchestrator.

        Args:
            config: Export configuration. If None, creates new Settings() from environment.
            transport: Optional HTTP transport override for the export client
            sleep: Awaitable sleep used for polling and the settle delay
        """
        self.config = config if config is not None else Settings()
        self.transport = transport
        self.sleep = sleep
        self.layout = StagingLayout(self.config.staging_dir, self.config.output_dir)
        self.transformer = AssetTransformer(self.layout)
        self.stage = PipelineStage.START

    def run(self, reporter: Reporter | None = None) -> RunReport:
        """Run the complete workflow.

        Args:
            reporter: Optional reporter for progress. Defaults to Reporter().

        Returns:
            Report with the job and every file's outcome

        Raises:
            ExportError: If exporting or staging fails
        """
        return asyncio.run(self.run_async(reporter))

    def process_staged(self, reporter: Reporter | None = None) -> RunReport:
        """Process the current staging tree without contacting the service."""
        return asyncio.run(self.process_staged_async(reporter))

    async def run_async(self, reporter: Reporter | None = None) -> RunReport:
        """Async variant of ``run``."""
        if reporter is None:
            reporter = Reporter()

        report = RunReport(started_at=datetime.now())
        self._advance(report, PipelineStage.START)

        async with ExportClient(self.config, transport=self.transport) as client:
            job = await self._export(client, report, reporter)
            await self._stage(client, job, report, reporter)

        await self._walk(report, reporter)
        self._finish(report, reporter)
        return report

    async def process_staged_async(self, reporter: Reporter | None = None) -> RunReport:
        """Async variant of ``process_staged``."""
        if reporter is None:
            reporter = Reporter()

        report = RunReport(started_at=datetime.now())
        self._advance(report, PipelineStage.STAGED)
        await self._walk(report, reporter)
        self._finish(report, reporter)
        return report

    def _advance(self, report: RunReport, stage: PipelineStage) -> None:
        """Move the run to the next stage."""
        if self.stage != stage:
            logger.info(f"Stage {self.stage.value} -> {stage.value}")
        self.stage = stage
        report.stage = stage

    async def _export(self, client: ExportClient, report: RunReport, reporter: Reporter) -> ExportJob:
        """Start the export job and wait for its artifact."""
        job = await client.start_export()
        report.job = job
        reporter.report_export_started(job)

        with reporter.poll_context():
            progress_hook = reporter.create_poll_progress_hook()

            def on_status(polled: ExportJob) -> None:
                self._advance(report, PipelineStage.EXPORTING)
                progress_hook(polled)

            job = await poll_export(
                client,
                job,
                interval=self.config.poll_interval,
                max_attempts=self.config.max_poll_attempts,
                sleep=self.sleep,
                progress_hook=on_status,
            )

        report.job = job
        return job

    async def _stage(
        self, client: ExportClient, job: ExportJob, report: RunReport, reporter: Reporter
    ) -> None:
        """Download and unpack the artifact, then let the filesystem settle."""
        with reporter.staging_context():
            await retrieve_artifact(
                client,
                job,
                staging_dir=self.config.staging_dir,
                archive_dir=self.config.archive_dir,
                download_hook=reporter.create_download_progress_hook(job.artifact_name),
                extraction_hook=reporter.create_extraction_progress_hook(job.artifact_name),
            )

        await self.sleep(self.config.settle_delay)
        self._advance(report, PipelineStage.STAGED)

    async def _walk(self, report: RunReport, reporter: Reporter) -> None:
        """Transform every staged file, one at a time."""
        self._advance(report, PipelineStage.WALKING)

        for source_path in iter_files(self.config.staging_dir):
            staged = self.layout.staged_file(source_path)
            try:
                result = await self.transformer.process(staged)
            except AssetWriteError as e:
                logger.error(f"Could not write {staged.relative_path}: {e.reason}")
                result = FileResult(
                    path=staged.relative_path.as_posix(),
                    kind=staged.kind,
                    outcome=TransformOutcome.FAILED,
                    error=e.reason,
                )

            reporter.report_file(result)
            report.results.append(result)

    def _finish(self, report: RunReport, reporter: Reporter) -> None:
        """Overlay redirect content and close the run."""
        copied = overlay_directory(self.config.redirects_dir, self.config.staging_dir)
        if copied:
            reporter.report_overlay(self.config.redirects_dir, len(copied))
        else:
            reporter.report_warning(f"No redirect content found in {self.config.redirects_dir}")

        report.finished_at = datetime.now()
        self._advance(report, PipelineStage.DONE)
        reporter.report_summary(report)
        logger.info(f"Run complete: {report!r}")
