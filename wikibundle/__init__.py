"""wikibundle.

Exports a wiki space through the Scroll HTML exporter and turns the result into
a static, minified documentation bundle.

Quick Start (High-Level API):
    >>> from wikibundle import export_site
    >>> export_site()  # Export, stage, minify and overlay redirects

Quick Start (SDK API):
    >>> from wikibundle import SiteExport, Settings
    >>> config = Settings(base_url="https://wiki.example.com", username="bot")
    >>> report = SiteExport(config).run()
    >>> report.count(TransformOutcome.FALLBACK)

Configuration:
    >>> import os
    >>> os.environ["WIKIBUNDLE_POLL_INTERVAL"] = "2"
    >>> config = Settings()  # Loads from environment

Public API:
    High-level functions:
        - export_site: Run the complete pipeline
        - process_staged: Rebuild the output tree from the staging tree

    Orchestrators:
        - SiteExport: Full pipeline orchestration

    Configuration:
        - Settings: Configuration model

    Domain Models:
        - ExportJob / JobStatus: Remote export job
        - StagedFile / AssetKind: Files waiting to be transformed
        - FileResult / TransformOutcome: Per-file result
        - RunReport / PipelineStage: Whole-run summary

    Reporters (for custom UIs):
        - Reporter: Progress reporter (use silent=True for headless mode)
"""

from wikibundle.config import Settings
from wikibundle.domain import (
    AssetKind,
    ExportJob,
    FileResult,
    JobStatus,
    PipelineStage,
    RunReport,
    StagedFile,
    TransformOutcome,
)
from wikibundle.errors import ExportError, WikiBundleError
from wikibundle.orchestrators import SiteExport
from wikibundle.state.manager import RunReportManager
from wikibundle.ui import Reporter

__all__ = [
    # High-level functions
    "export_site",
    "process_staged",
    # Orchestrators
    "SiteExport",
    # Configuration
    "Settings",
    # Domain models
    "AssetKind",
    "ExportJob",
    "FileResult",
    "JobStatus",
    "PipelineStage",
    "RunReport",
    "StagedFile",
    "TransformOutcome",
    # Errors
    "WikiBundleError",
    "ExportError",
    # Persistence
    "RunReportManager",
    # Reporters
    "Reporter",
]

__version__ = "0.1.0"


def export_site(config: Settings | None = None, reporter: Reporter | None = None) -> RunReport:
    """Run the complete pipeline and record the report.

    Args:
        config: Export configuration. If None, loads Settings() from environment.
        reporter: Progress reporter. If None, uses Reporter().

    Returns:
        Report of the run
    """
    config = config if config is not None else Settings()
    with RunReportManager(config.report_file, load=False) as manager:
        manager.data = SiteExport(config).run(reporter=reporter)
        return manager.data


def process_staged(config: Settings | None = None, reporter: Reporter | None = None) -> RunReport:
    """Rebuild the output tree from the existing staging tree.

    Args:
        config: Export configuration. If None, loads Settings() from environment.
        reporter: Progress reporter. If None, uses Reporter().

    Returns:
        Report of the run
    """
    config = config if config is not None else Settings()
    with RunReportManager(config.report_file, load=False) as manager:
        manager.data = SiteExport(config).process_staged(reporter=reporter)
        return manager.data
