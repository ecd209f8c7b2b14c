"""Error types for the export pipeline.

ExportError and its subclasses are fatal: they abort a run before any output is
considered usable. AssetError subclasses are scoped to a single file and never
abort a run.
"""


class WikiBundleError(Exception):
    """Base exception for all wikibundle failures."""


class ExportError(WikiBundleError):
    """Raised when exporting or staging the space fails."""


class ExportRequestError(ExportError):
    """Raised when a request to the export service cannot be built or fails."""

    def __init__(self, action: str, reason: str):
        self.action = action
        self.reason = reason
        super().__init__(f"Failed to {action}: {reason}")


class ExportResponseError(ExportError):
    """Raised when the export service returns an unexpected payload."""


class PollTimeoutError(ExportError):
    """Raised when an export job does not finish within the allowed attempts."""

    def __init__(self, job_id: str, attempts: int):
        self.job_id = job_id
        self.attempts = attempts
        super().__init__(f"Export job {job_id} did not finish after {attempts} status checks")


class ArchiveError(ExportError):
    """Raised when a downloaded artifact cannot be stored or extracted."""


class AssetError(WikiBundleError):
    """Base exception for failures processing a single staged file."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class MinifyError(AssetError):
    """Raised when a script or stylesheet cannot be minified."""


class AssetWriteError(AssetError):
    """Raised when a file cannot be written to the output tree."""
