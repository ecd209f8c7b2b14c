"""Unit tests for configuration management."""

import pytest
from pydantic import ValidationError

from wikibundle.config import Settings


class TestSettings:
    """Test configuration."""

    def test_defaults(self, tmp_path, monkeypatch):
        """Test default settings."""
        monkeypatch.chdir(tmp_path)
        settings = Settings()

        assert settings.root_page_id == "44696055"
        assert settings.export_scheme_id == "-020B004813A10F3831A9D8C9A7869275"
        assert settings.export_settings_file is None
        assert settings.poll_interval == 1.0
        assert settings.settle_delay == 1.0
        assert settings.max_poll_attempts is None
        assert settings.staging_dir == tmp_path / "src"
        assert settings.output_dir == tmp_path / "docs"
        assert settings.redirects_dir == tmp_path / "redirects"
        assert not settings.uses_inline_settings

    def test_null_values(self, tmp_path, monkeypatch):
        """Test null string conversion for optional fields."""
        monkeypatch.chdir(tmp_path)

        assert Settings(max_poll_attempts="null").max_poll_attempts is None
        assert Settings(max_poll_attempts="").max_poll_attempts is None
        assert Settings(max_poll_attempts="5").max_poll_attempts == 5

    def test_base_url_trailing_slash_removed(self, tmp_path, monkeypatch):
        """Endpoint paths are appended to the base URL."""
        monkeypatch.chdir(tmp_path)

        assert Settings(base_url="https://wiki.test/").base_url == "https://wiki.test"

    def test_env_loading(self, tmp_path, monkeypatch):
        """Test loading from environment."""
        monkeypatch.chdir(tmp_path)

        monkeypatch.setenv("WIKIBUNDLE_BASE_URL", "https://wiki.internal")
        monkeypatch.setenv("WIKIBUNDLE_USERNAME", "bot")
        monkeypatch.setenv("WIKIBUNDLE_PASSWORD", "hunter2")
        monkeypatch.setenv("WIKIBUNDLE_MAX_POLL_ATTEMPTS", "30")
        monkeypatch.setenv("WIKIBUNDLE_OUTPUT_DIR", "public")

        settings = Settings()

        assert settings.base_url == "https://wiki.internal"
        assert settings.username == "bot"
        assert settings.password.get_secret_value() == "hunter2"
        assert settings.max_poll_attempts == 30
        assert settings.output_dir == tmp_path / "public"

    def test_password_not_rendered(self, tmp_path, monkeypatch):
        """Credentials stay out of reprs and logs."""
        monkeypatch.chdir(tmp_path)

        settings = Settings(password="hunter2")

        assert "hunter2" not in repr(settings)

    def test_programmatic_override(self, tmp_path, monkeypatch):
        """Test programmatic override of env."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("WIKIBUNDLE_POLL_INTERVAL", "5")

        settings = Settings(poll_interval=0.5)
        assert settings.poll_interval == 0.5

    def test_inline_settings_file(self, tmp_path, monkeypatch):
        """An export settings document switches to inline mode."""
        monkeypatch.chdir(tmp_path)
        document = tmp_path / "export.json"
        document.write_text('{"exporterId": "html"}')

        settings = Settings(export_scheme_id="null", export_settings_file=document)

        assert settings.uses_inline_settings
        assert settings.export_scheme_id is None

    def test_missing_inline_settings_file(self, tmp_path, monkeypatch):
        """A settings document that does not exist is rejected."""
        monkeypatch.chdir(tmp_path)

        with pytest.raises(ValidationError):
            Settings(export_settings_file=tmp_path / "missing.json")

    def test_export_scheme_required(self, tmp_path, monkeypatch):
        """One of the two export modes must be configured."""
        monkeypatch.chdir(tmp_path)

        with pytest.raises(ValidationError):
            Settings(export_scheme_id="none")
