"""Configure tests."""

import io
import zipfile
from pathlib import Path

import httpx
import pytest

from wikibundle.config import Settings

VALID_SCRIPT = b"""function greet(name) {
    var message = "Hello, " + name;
    return message;
}
"""

VALID_STYLE = b"""body {
    color: red;
    margin: 0px;
}
"""

# Declaration without a colon, then a selector with no block
MALFORMED_STYLE = b""".broken {
    color red;
}
.dangling
"""

MALFORMED_SCRIPT = b"function (a, b { return a + ; }\n"

LOGO_PNG = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR fake image bytes"


def build_zip(files: dict[str, bytes]) -> bytes:
    """Build an in-memory zip archive with the given files."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for name, content in files.items():
            archive.writestr(name, content)
    return buffer.getvalue()


def snapshot_tree(root: Path) -> dict[str, bytes]:
    """Map every file under root to its bytes."""
    return {
        path.relative_to(root).as_posix(): path.read_bytes()
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


class FakeExportService:
    """In-process stand-in for the Scroll HTML export endpoints."""

    def __init__(
        self,
        archive: bytes,
        running_checks: int = 2,
        job_id: str = "job-42",
        filename: str = "space export.zip",
    ):
        self.archive = archive
        self.running_checks = running_checks
        self.job_id = job_id
        self.filename = filename
        self.requests: list[httpx.Request] = []
        self.status_checks = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/rest/scroll-html/1.0/export":
            return httpx.Response(200, json={"id": self.job_id})

        if path == f"/rest/scroll-html/1.0/async-tasks/{self.job_id}":
            self.status_checks += 1
            if self.status_checks <= self.running_checks:
                return httpx.Response(200, json={"progress": self.status_checks * 30})
            return httpx.Response(200, json={"progress": 100, "filename": self.filename})

        if path == f"/rest/scroll-html/1.0/export/{self.job_id}/{self.filename}":
            return httpx.Response(200, content=self.archive)

        return httpx.Response(404, json={"message": f"No route for {path}"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def site_settings(tmp_path, monkeypatch):
    """Settings with every directory inside tmp_path and no waiting."""
    monkeypatch.chdir(tmp_path)
    return Settings(
        base_url="https://wiki.test/",
        username="exporter",
        password="secret",
        staging_dir=tmp_path / "src",
        output_dir=tmp_path / "docs",
        redirects_dir=tmp_path / "redirects",
        archive_dir=tmp_path / "archives",
        report_file=tmp_path / "data" / "last_run.json",
        poll_interval=0,
        settle_delay=0,
    )


@pytest.fixture
def scenario_archive():
    """Archive with a valid script, a malformed stylesheet and an image."""
    return build_zip(
        {
            "index.js": VALID_SCRIPT,
            "style.css": MALFORMED_STYLE,
            "img/logo.png": LOGO_PNG,
        }
    )


@pytest.fixture
def fake_service(scenario_archive):
    """Fake export service serving the scenario archive."""
    return FakeExportService(scenario_archive)
