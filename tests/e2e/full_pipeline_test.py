"""End-to-end tests for the full pipeline.

These tests drive the complete workflow against an in-process export service,
with real zip archives, real minifiers and real filesystem writes.
"""

import shutil

import orjson
import pytest
from conftest import LOGO_PNG, MALFORMED_STYLE, VALID_SCRIPT, FakeExportService, snapshot_tree

from wikibundle import export_site
from wikibundle.domain.models import PipelineStage, TransformOutcome
from wikibundle.orchestrators import SiteExport
from wikibundle.state.manager import RunReportManager
from wikibundle.ui import Reporter


async def _no_wait(seconds: float) -> None:
    return None


def _run(settings, archive: bytes):
    service = FakeExportService(archive)
    orchestrator = SiteExport(settings, transport=service.transport, sleep=_no_wait)
    return orchestrator.run(reporter=Reporter(silent=True))


class TestFullPipelineWorkflow:
    """Test the complete end-to-end pipeline workflow."""

    def test_mixed_space_export(self, site_settings, scenario_archive):
        """A valid script is minified, a broken stylesheet and an image are copied."""
        report = _run(site_settings, scenario_archive)
        output = site_settings.output_dir

        assert report.stage == PipelineStage.DONE
        assert sorted(snapshot_tree(output)) == ["img/logo.png", "index.js", "style.css"]

        minified = (output / "index.js").read_bytes()
        assert minified != VALID_SCRIPT
        assert len(minified) < len(VALID_SCRIPT)
        assert b"greet" in minified

        assert (output / "style.css").read_bytes() == MALFORMED_STYLE
        assert (output / "img" / "logo.png").read_bytes() == LOGO_PNG

        outcomes = {result.path: result.outcome for result in report.results}
        assert outcomes == {
            "img/logo.png": TransformOutcome.COPIED,
            "index.js": TransformOutcome.MINIFIED,
            "style.css": TransformOutcome.FALLBACK,
        }
        assert report.succeeded

    def test_repeated_runs_are_identical(self, site_settings, scenario_archive):
        """Two runs over the same export produce byte-identical output trees."""
        _run(site_settings, scenario_archive)
        first = snapshot_tree(site_settings.output_dir)

        shutil.rmtree(site_settings.output_dir)
        _run(site_settings, scenario_archive)
        second = snapshot_tree(site_settings.output_dir)

        assert first == second

    def test_rerun_without_cleanup_overwrites_in_place(self, site_settings, scenario_archive):
        """Re-running over an existing output tree leaves the same bytes behind."""
        _run(site_settings, scenario_archive)
        first = snapshot_tree(site_settings.output_dir)

        _run(site_settings, scenario_archive)

        assert snapshot_tree(site_settings.output_dir) == first

    def test_redirects_land_in_staging_tree(self, site_settings, scenario_archive):
        """Redirect pages are overlaid onto the staging root after processing."""
        redirects = site_settings.redirects_dir
        (redirects / "old").mkdir(parents=True)
        (redirects / "old" / "index.html").write_bytes(b"<meta http-equiv='refresh'>")

        _run(site_settings, scenario_archive)

        staged = site_settings.staging_dir / "old" / "index.html"
        assert staged.read_bytes() == b"<meta http-equiv='refresh'>"
        assert not (site_settings.output_dir / "old").exists()


class TestReportPersistence:
    """Test that a run can be recorded and reloaded."""

    @pytest.fixture
    def patched_site_export(self, monkeypatch, fake_service):
        """Make export_site talk to the fake service without waiting."""

        class FakeServiceSiteExport(SiteExport):
            def __init__(self, config):
                super().__init__(config, transport=fake_service.transport, sleep=_no_wait)

        monkeypatch.setattr("wikibundle.SiteExport", FakeServiceSiteExport)

    def test_export_site_writes_report(self, site_settings, patched_site_export):
        report = export_site(site_settings, reporter=Reporter(silent=True))

        raw = orjson.loads(site_settings.report_file.read_bytes())
        assert raw["stage"] == "done"
        assert raw["job"]["job_id"] == "job-42"
        assert len(raw["results"]) == 3

        with RunReportManager(site_settings.report_file) as manager:
            assert manager.data.count(TransformOutcome.FALLBACK) == 1
            assert manager.data.results == report.results

    def test_export_site_replaces_unreadable_report(self, site_settings, patched_site_export):
        site_settings.report_file.parent.mkdir(parents=True, exist_ok=True)
        site_settings.report_file.write_bytes(b'{"stage": "not-a-stage"}')

        export_site(site_settings, reporter=Reporter(silent=True))

        assert orjson.loads(site_settings.report_file.read_bytes())["stage"] == "done"
