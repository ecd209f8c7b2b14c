"""Polling of remote export jobs."""

import asyncio
import logging
from typing import Protocol

from wikibundle.domain.models import ExportJob, JobStatus
from wikibundle.domain.types import PollProgressHook, SleepFunc
from wikibundle.errors import PollTimeoutError

logger = logging.getLogger(__name__)


class StatusSource(Protocol):
    """Anything that can refresh the status of an export job."""

    async def check_status(self, job: ExportJob) -> ExportJob: ...


async def poll_export(
    client: StatusSource,
    job: ExportJob,
    interval: float = 1.0,
    max_attempts: int | None = None,
    sleep: SleepFunc = asyncio.sleep,
    progress_hook: PollProgressHook | None = None,
) -> ExportJob:
    """Wait for an export job to produce its artifact.

    Sleeps ``interval`` seconds before each status check and stops at the first
    response carrying a filename.

    Args:
        client: Source of status responses (usually an ExportClient)
        job: Job returned by start_export
        interval: Delay in seconds before every status check
        max_attempts: Give up after this many checks (None = wait forever)
        sleep: Awaitable sleep, swapped out in tests
        progress_hook: Optional callback receiving the job after every check

    Returns:
        The completed job with ``artifact_name`` set

    Raises:
        PollTimeoutError: If max_attempts checks pass without an artifact
    """
    while job.status != JobStatus.COMPLETE:
        if max_attempts is not None and job.attempts >= max_attempts:
            raise PollTimeoutError(job.job_id, job.attempts)

        await sleep(interval)
        job = await client.check_status(job)

        if progress_hook:
            progress_hook(job)

    logger.info(f"Export job {job.job_id} finished after {job.attempts} checks: {job.artifact_name}")
    return job
