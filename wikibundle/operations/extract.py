"""Archive extraction into the staging tree."""

import logging
import shutil
import zipfile
import zlib
from pathlib import Path

from wikibundle.domain.types import ExtractionProgressHook
from wikibundle.errors import ArchiveError

logger = logging.getLogger(__name__)


def _safe_extract_member(archive: zipfile.ZipFile, member: zipfile.ZipInfo, extract_dir: Path) -> Path:
    """Safely extract a member, preventing path traversal."""
    root = extract_dir.resolve()
    target = (extract_dir / member.filename).resolve()
    try:
        target.relative_to(root)
    except ValueError as exc:
        msg = f"Refusing to extract {member.filename}: outside {extract_dir}"
        raise ArchiveError(msg) from exc

    target.parent.mkdir(parents=True, exist_ok=True)
    with archive.open(member) as extracted, open(target, "wb") as dest:
        shutil.copyfileobj(extracted, dest)
    return target


def clear_directory(path: Path) -> None:
    """Remove a directory with all its contents and recreate it empty.

    Raises:
        ArchiveError: If the directory cannot be removed or recreated
    """
    try:
        if path.exists():
            logger.info(f"Clearing {path}")
            shutil.rmtree(path)
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ArchiveError(f"Cannot clear staging directory {path}: {e}") from e


def prune_archives(archive_dir: Path, keep: Path) -> list[Path]:
    """Delete every zip in ``archive_dir`` except ``keep``.

    Returns:
        The archives that were removed
    """
    removed = []
    for path in sorted(archive_dir.glob("*.zip")):
        if path.name == keep.name or not path.is_file():
            continue
        try:
            path.unlink()
        except OSError as e:
            logger.warning(f"Could not remove old archive {path}: {e}")
            continue
        removed.append(path)

    if removed:
        logger.info(f"Removed {len(removed)} old archives from {archive_dir}")
    return removed


def extract_zip(
    archive_path: Path,
    extract_dir: Path,
    progress_hook: ExtractionProgressHook | None = None,
) -> list[str]:
    """Extract every file of a zip archive.

    Args:
        archive_path: Path to the .zip archive
        extract_dir: Directory to extract files to
        progress_hook: Optional callback(filename, current, total) for progress tracking

    Returns:
        Relative paths of the extracted files, in archive order

    Raises:
        ArchiveError: If the archive is corrupt, a member escapes extract_dir,
            or a member cannot be written
    """
    extracted: list[str] = []

    logger.info(f"Extracting {archive_path} to {extract_dir}")

    try:
        extract_dir.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(archive_path) as archive:
            members = [m for m in archive.infolist() if not m.is_dir()]
            total_files = len(members)

            for file_count, member in enumerate(members, start=1):
                if progress_hook:
                    progress_hook(member.filename, file_count, total_files)

                _safe_extract_member(archive, member, extract_dir)
                extracted.append(member.filename)
    except (zipfile.BadZipFile, zlib.error, EOFError) as e:
        raise ArchiveError(f"Corrupt archive {archive_path}: {e}") from e
    except OSError as e:
        raise ArchiveError(f"Cannot extract {archive_path} to {extract_dir}: {e}") from e

    logger.info(f"Extraction complete: {len(extracted)} files")
    return extracted
