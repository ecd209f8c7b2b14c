"""Domain models and business logic."""

from wikibundle.domain.models import (
    AssetKind,
    ExportJob,
    FileResult,
    JobStatus,
    PipelineStage,
    RunReport,
    StagedFile,
    TransformOutcome,
)
from wikibundle.domain.services import ReportQueryService, StagingLayout, classify_asset
from wikibundle.domain.types import (
    DownloadProgressHook,
    ExtractionProgressHook,
    PollProgressHook,
)

__all__ = [
    "AssetKind",
    "ExportJob",
    "FileResult",
    "JobStatus",
    "PipelineStage",
    "RunReport",
    "StagedFile",
    "TransformOutcome",
    "ReportQueryService",
    "StagingLayout",
    "classify_asset",
    "DownloadProgressHook",
    "ExtractionProgressHook",
    "PollProgressHook",
]
