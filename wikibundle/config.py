"""Pipeline configuration with environment variable support."""

from pathlib import Path

from pydantic import SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Export configuration loaded from environment variables.

    Loads from environment (WIKIBUNDLE_*), .env file, or defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="WIKIBUNDLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Remote service
    base_url: str = "https://wiki.example.com"
    username: str | None = None
    password: SecretStr | None = None
    api_timeout: int = 30
    verify_ssl: bool = True

    # Export scheme
    root_page_id: str = "44696055"
    export_scheme_id: str | None = "-020B004813A10F3831A9D8C9A7869275"
    export_settings_file: Path | None = None

    # Directories
    staging_dir: Path = Path("src")
    output_dir: Path = Path("docs")
    redirects_dir: Path = Path("redirects")
    archive_dir: Path = Path("data/archives")
    report_file: Path = Path("data/last_run.json")

    # Timing
    poll_interval: float = 1.0
    max_poll_attempts: int | None = None
    settle_delay: float = 1.0

    @field_validator("export_scheme_id", "export_settings_file", "max_poll_attempts", mode="before")
    @classmethod
    def parse_null(cls, v):
        """Convert 'null' string to None."""
        if isinstance(v, str) and v.lower() in ("null", "none", ""):
            return None
        return v

    @field_validator("base_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Drop a trailing slash so endpoint paths can be appended."""
        return v.rstrip("/")

    @field_validator(
        "staging_dir", "output_dir", "redirects_dir", "archive_dir", "report_file", mode="after"
    )
    @classmethod
    def resolve_paths(cls, v: Path) -> Path:
        """Resolve relative directories against the working directory."""
        return v.resolve()

    @field_validator("export_settings_file", mode="after")
    @classmethod
    def settings_file_exists(cls, v: Path | None) -> Path | None:
        """Fail early when an inline export settings document is missing."""
        if v is not None and not v.is_file():
            raise ValueError(f"Export settings file not found: {v}")
        return v

    @model_validator(mode="after")
    def require_export_scheme(self) -> "Settings":
        """Ensure one of the two export modes is configured."""
        if self.export_scheme_id is None and self.export_settings_file is None:
            raise ValueError("Either export_scheme_id or export_settings_file must be set")
        return self

    @property
    def uses_inline_settings(self) -> bool:
        """Return True when the export is driven by an inline settings document."""
        return self.export_settings_file is not None
