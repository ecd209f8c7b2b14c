"""Client for the remote Scroll HTML export service."""

import logging
from pathlib import Path
from urllib.parse import quote

import httpx
import orjson

from wikibundle.config import Settings
from wikibundle.domain.models import ExportJob, JobStatus
from wikibundle.domain.types import DownloadProgressHook
from wikibundle.errors import ArchiveError, ExportRequestError, ExportResponseError

logger = logging.getLogger(__name__)

API_PREFIX = "/rest/scroll-html/1.0"


class ExportClient:
    """Async wrapper around the export, status and download endpoints.

    Use as an async context manager so the underlying connection pool is
    closed when the run ends:

        async with ExportClient(config) as client:
            job = await client.start_export()
    """

    def __init__(self, config: Settings, transport: httpx.AsyncBaseTransport | None = None):
        """Initialize the client.

        Args:
            config: Settings with the service location and credentials
            transport: Optional transport override (used to fake the service in tests)
        """
        self.config = config
        auth = None
        if config.username:
            password = config.password.get_secret_value() if config.password else ""
            auth = httpx.BasicAuth(config.username, password)

        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            auth=auth,
            headers={"X-Atlassian-Token": "no-check"},
            timeout=config.api_timeout,
            verify=config.verify_ssl,
            transport=transport,
        )

    async def __aenter__(self) -> "ExportClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def start_export(self) -> ExportJob:
        """Start an export of the configured root page.

        Returns:
            A pending ExportJob carrying the identifier assigned by the service
        """
        url = f"{API_PREFIX}/export"
        params = {"rootPageId": self.config.root_page_id}

        if self.config.uses_inline_settings:
            settings_file = self.config.export_settings_file
            try:
                document = orjson.loads(settings_file.read_bytes())
            except (OSError, orjson.JSONDecodeError) as e:
                raise ExportRequestError(f"read export settings {settings_file}", str(e)) from e
            request = self._client.build_request(
                "POST",
                url,
                params=params,
                content=orjson.dumps(document),
                headers={"Content-Type": "application/json"},
            )
        else:
            params["exportSchemeId"] = self.config.export_scheme_id
            request = self._client.build_request("GET", url, params=params)

        payload = await self._send_json(request, "start export")
        job_id = payload.get("id")
        if not job_id:
            raise ExportResponseError(f"Export response carries no job id: {payload!r}")

        logger.info(f"Started export job {job_id}")
        return ExportJob(job_id=str(job_id))

    async def check_status(self, job: ExportJob) -> ExportJob:
        """Fetch the current status of a job and update it in place."""
        request = self._client.build_request("GET", f"{API_PREFIX}/async-tasks/{job.job_id}")
        payload = await self._send_json(request, f"check status of job {job.job_id}")

        progress = payload.get("progress")
        filename = payload.get("filename")

        job.attempts += 1
        job.progress = None if progress is None else str(progress)
        if filename:
            job.artifact_name = filename
            job.status = JobStatus.COMPLETE
        else:
            job.status = JobStatus.RUNNING

        logger.debug(f"Progress: {job.progress}")
        return job

    async def download_artifact(
        self,
        job: ExportJob,
        dest: Path,
        progress_hook: DownloadProgressHook | None = None,
        chunk_size: int = 64 * 1024,
    ) -> Path:
        """Stream the finished artifact of a job to ``dest``.

        Raises:
            ExportRequestError: If the transfer fails
            ArchiveError: If the artifact cannot be written locally
        """
        if not job.artifact_name:
            raise ExportResponseError(f"Export job {job.job_id} has no artifact yet")

        url = f"{API_PREFIX}/export/{job.job_id}/{quote(job.artifact_name, safe='')}"
        logger.debug(f"Downloading {self.config.base_url}{url}")

        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            async with self._client.stream("GET", url) as resp:
                resp.raise_for_status()

                total = resp.headers.get("Content-Length")
                total_bytes: int | None = int(total) if total is not None else None

                downloaded = 0
                if progress_hook:
                    progress_hook(downloaded, total_bytes)

                with dest.open("wb") as f:
                    async for chunk in resp.aiter_bytes(chunk_size=chunk_size):
                        f.write(chunk)
                        downloaded += len(chunk)
                        if progress_hook:
                            progress_hook(downloaded, total_bytes)
        except httpx.HTTPError as e:
            raise ExportRequestError(f"download {job.artifact_name}", str(e)) from e
        except OSError as e:
            raise ArchiveError(f"Cannot write {dest}: {e}") from e

        return dest

    async def _send_json(self, request: httpx.Request, action: str) -> dict:
        """Send a request and decode its JSON object body."""
        try:
            resp = await self._client.send(request)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise ExportRequestError(action, str(e)) from e

        try:
            payload = orjson.loads(resp.content)
        except orjson.JSONDecodeError as e:
            raise ExportResponseError(f"Invalid JSON while trying to {action}: {e}") from e

        if not isinstance(payload, dict):
            raise ExportResponseError(f"Unexpected response while trying to {action}: {payload!r}")
        return payload
