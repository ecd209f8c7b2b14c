"""Per-file transform of staged files into the output tree."""

import asyncio
import logging
import shutil
from pathlib import Path

from atomicwrites import atomic_write

from wikibundle.domain.models import AssetKind, FileResult, StagedFile, TransformOutcome
from wikibundle.domain.services import StagingLayout
from wikibundle.errors import AssetWriteError, MinifyError
from wikibundle.operations.minify import DEFAULT_OPTIONS, MinifyOptions, minify_file

logger = logging.getLogger(__name__)


def copy_verbatim(source: Path, dest: Path) -> None:
    """Copy a file byte for byte, creating parent directories as needed.

    Raises:
        AssetWriteError: If the copy cannot be made
    """
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, dest)
    except OSError as e:
        raise AssetWriteError(source, f"copy to {dest} failed: {e}") from e


def write_minified(dest: Path, text: str, charset: str) -> None:
    """Atomically write minified text so a failed write never leaves partial output."""
    dest.parent.mkdir(parents=True, exist_ok=True)
    with atomic_write(dest, mode="wb", overwrite=True) as f:
        f.write(text.encode(charset))


class AssetTransformer:
    """Minifies scripts and stylesheets, copies everything else.

    Every call to ``process`` leaves exactly one file at the mirrored output
    path, unless the filesystem refuses the write, in which case
    AssetWriteError is raised.
    """

    def __init__(self, layout: StagingLayout, options: MinifyOptions = DEFAULT_OPTIONS):
        """Initialize the transformer.

        Args:
            layout: Mapping between staging and output trees
            options: Minification options applied to every asset
        """
        self.layout = layout
        self.options = options

    async def process(self, staged: StagedFile) -> FileResult:
        """Transform one staged file into the output tree.

        Raises:
            AssetWriteError: If neither the minified nor the verbatim copy can be written
        """
        dest = self.layout.output_path(staged)
        path = staged.relative_path.as_posix()

        if staged.kind == AssetKind.OTHER:
            await asyncio.to_thread(copy_verbatim, staged.source_path, dest)
            return FileResult(path=path, kind=staged.kind, outcome=TransformOutcome.COPIED)

        try:
            minified = await asyncio.to_thread(
                minify_file, staged.source_path, staged.kind, self.options
            )
            await asyncio.to_thread(write_minified, dest, minified, self.options.charset)
        except MinifyError as e:
            reason = e.reason
        except OSError as e:
            reason = f"write failed: {e}"
        else:
            return FileResult(path=path, kind=staged.kind, outcome=TransformOutcome.MINIFIED)

        logger.warning(f"Falling back to copy for {path}: {reason}")
        await asyncio.to_thread(copy_verbatim, staged.source_path, dest)
        return FileResult(
            path=path,
            kind=staged.kind,
            outcome=TransformOutcome.FALLBACK,
            error=reason,
        )
