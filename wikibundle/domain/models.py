"""Domain models for the export pipeline."""

from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class JobStatus(str, Enum):
    """Lifecycle of a remote export job."""

    PENDING = "pending"  # Started, no status response yet
    RUNNING = "running"  # Status received, no artifact yet
    COMPLETE = "complete"  # Artifact filename known


class ExportJob(BaseModel):
    """Remote export job as seen through its status responses."""

    job_id: str
    status: JobStatus = JobStatus.PENDING
    progress: str | None = None
    artifact_name: str | None = None
    attempts: int = 0  # Status checks issued so far


class AssetKind(str, Enum):
    """Kind of staged file, derived from its extension."""

    SCRIPT = "script"
    STYLE = "style"
    OTHER = "other"


class StagedFile(BaseModel):
    """A file in the staging tree waiting to be transformed."""

    model_config = ConfigDict(frozen=True)

    relative_path: Path  # Relative to the staging root
    source_path: Path
    kind: AssetKind


class TransformOutcome(str, Enum):
    """How a staged file ended up in the output tree."""

    MINIFIED = "minified"
    COPIED = "copied"
    FALLBACK = "copied-fallback"  # Minification failed, original bytes copied
    FAILED = "failed"  # Nothing could be written

    @property
    def is_success(self) -> bool:
        """Return True if the file was written without falling back."""
        return self in (TransformOutcome.MINIFIED, TransformOutcome.COPIED)


class FileResult(BaseModel):
    """Per-file result of the transform step."""

    path: str  # Relative path, POSIX separators
    kind: AssetKind
    outcome: TransformOutcome
    error: str | None = None


class PipelineStage(str, Enum):
    """Linear stages of a run."""

    START = "start"
    EXPORTING = "exporting"
    STAGED = "staged"
    WALKING = "walking"
    DONE = "done"


class RunReport(BaseModel):
    """Summary of one pipeline run."""

    job: ExportJob | None = None
    stage: PipelineStage = PipelineStage.START
    started_at: datetime | None = None
    finished_at: datetime | None = None
    results: list[FileResult] = Field(default_factory=list)

    def count(self, outcome: TransformOutcome) -> int:
        """Return the number of files with the given outcome."""
        return sum(1 for result in self.results if result.outcome == outcome)

    @property
    def succeeded(self) -> bool:
        """Return True if the run finished and every file was written."""
        return self.stage == PipelineStage.DONE and self.count(TransformOutcome.FAILED) == 0

    def __repr__(self) -> str:
        """Return string representation of the report."""
        return (
            f"RunReport("
            f"stage={self.stage.value}, "
            f"minified={self.count(TransformOutcome.MINIFIED)}, "
            f"copied={self.count(TransformOutcome.COPIED)}, "
            f"fallback={self.count(TransformOutcome.FALLBACK)}, "
            f"failed={self.count(TransformOutcome.FAILED)})"
        )
