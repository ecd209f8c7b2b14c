"""Retrieval of finished export artifacts."""

import asyncio
import logging
from pathlib import Path

from wikibundle.domain.models import ExportJob
from wikibundle.domain.types import DownloadProgressHook, ExtractionProgressHook
from wikibundle.operations.client import ExportClient
from wikibundle.operations.extract import clear_directory, extract_zip, prune_archives

logger = logging.getLogger(__name__)


async def retrieve_artifact(
    client: ExportClient,
    job: ExportJob,
    staging_dir: Path,
    archive_dir: Path,
    download_hook: DownloadProgressHook | None = None,
    extraction_hook: ExtractionProgressHook | None = None,
) -> list[str]:
    """Download a job's artifact and unpack it into a fresh staging tree.

    The staging directory is emptied before extraction begins, and the call
    returns only after the last member has been written. Archives left over
    from earlier runs are removed once the new one has been extracted.

    Args:
        client: Export client used to stream the artifact
        job: Completed export job
        staging_dir: Directory that receives the extracted files
        archive_dir: Directory that keeps the downloaded archive
        download_hook: Optional callback(downloaded, total) for the transfer
        extraction_hook: Optional callback(filename, current, total) for extraction

    Returns:
        Relative paths of the staged files
    """
    archive_path = archive_dir / Path(job.artifact_name).name
    await client.download_artifact(job, archive_path, progress_hook=download_hook)

    await asyncio.to_thread(clear_directory, staging_dir)
    staged = await asyncio.to_thread(extract_zip, archive_path, staging_dir, extraction_hook)

    await asyncio.to_thread(prune_archives, archive_dir, keep=archive_path)

    logger.info(f"Staged {len(staged)} files from {archive_path.name}")
    return staged
