"""Business logic services for the pipeline."""

from pathlib import Path

from wikibundle.domain.models import AssetKind, FileResult, RunReport, StagedFile

ASSET_SUFFIXES = {
    ".js": AssetKind.SCRIPT,
    ".css": AssetKind.STYLE,
}


def classify_asset(path: str | Path) -> AssetKind:
    """Classify a file by its extension.

    Matching is a case-sensitive test on the end of the file name, so
    ``app.JS`` is not a script and a file named ``.js`` is.
    """
    name = Path(path).name
    for suffix, kind in ASSET_SUFFIXES.items():
        if name.endswith(suffix):
            return kind
    return AssetKind.OTHER


class StagingLayout:
    """Maps files between the staging tree and the output tree."""

    def __init__(self, staging_root: Path, output_root: Path):
        self.staging_root = Path(staging_root)
        self.output_root = Path(output_root)

    def staged_file(self, source_path: Path) -> StagedFile:
        """Build a StagedFile for an absolute path inside the staging root."""
        relative_path = Path(source_path).relative_to(self.staging_root)
        return StagedFile(
            relative_path=relative_path,
            source_path=Path(source_path),
            kind=classify_asset(relative_path),
        )

    def output_path(self, staged: StagedFile) -> Path:
        """Return the mirrored destination of a staged file."""
        return self.output_root / staged.relative_path


class ReportQueryService:
    """Service for querying the results of a run."""

    @staticmethod
    def get_results_by_filter(
        report: RunReport,
        outcome: str | None = None,
        kind: str | None = None,
        limit: int | None = None,
    ) -> list[FileResult]:
        """Query file results with optional filters.

        Args:
            report: Report to query
            outcome: Filter by outcome (minified, copied, copied-fallback, failed)
            kind: Filter by asset kind (script, style, other)
            limit: Maximum number of results to return

        Returns:
            Matching file results in processing order
        """
        results = [
            result
            for result in report.results
            if (outcome is None or result.outcome.value == outcome)
            and (kind is None or result.kind.value == kind)
        ]

        if limit:
            results = results[:limit]

        return results
