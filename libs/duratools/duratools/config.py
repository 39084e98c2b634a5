"""Configuration management using pydantic-settings."""

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from duratools.exceptions import ConfigurationError

_ENV_FILES = (".env", "../.env")


class DuraStoreSettings(BaseSettings):
    """Connection details for a DuraCloud DuraStore application."""

    model_config = SettingsConfigDict(
        env_prefix="DURACLOUD_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = ""
    port: int = Field(default=443, ge=1, le=65535)
    context: str = "durastore"
    scheme: str = "https"
    username: str = ""
    password: str = ""
    store_id: str | None = None
    timeout: float = Field(default=60.0, gt=0)

    @property
    def base_url(self) -> str:
        context = str(self.context or "").strip("/")
        base = f"{self.scheme}://{self.host}:{self.port}"
        return f"{base}/{context}" if context else base

    def require_credentials(self) -> None:
        missing = [name for name in ("host", "username", "password") if not getattr(self, name)]
        if missing:
            raise ConfigurationError(f"DuraStore settings incomplete (missing: {', '.join(missing)})")


class AWSSettings(BaseSettings):
    """AWS credential profile and region."""

    model_config = SettingsConfigDict(
        env_prefix="AWS_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    profile: str | None = None
    region: str | None = None


class ListingSettings(BaseSettings):
    """Container listing behaviour."""

    model_config = SettingsConfigDict(
        env_prefix="LISTING_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # S3 caps a single listing call at 1000 keys regardless; DuraStore honours up to 10000.
    page_size: int = Field(default=10000, ge=1, le=10000)


class TranscodingSettings(BaseSettings):
    """Elastic Transcoder job parameters."""

    model_config = SettingsConfigDict(
        env_prefix="TRANSCODE_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # System preset "HLS Audio - 160k"
    audio_preset_id: str = "1351620000001-200060"
    # System preset "HLS Video - 2M"
    video_preset_id: str = "1351620000001-200015"
    segment_duration: str = "6"
    playlist_format: str = "HLSv4"
    create_interval_s: float = Field(
        default=0.5,
        ge=0,
        description="Pause after each created job; keeps create_job calls under 2/s.",
    )


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"
    console: bool = True
    file: str | None = None
    max_bytes: int = Field(default=10 * 1024 * 1024, ge=0)
    backup_count: int = Field(default=5, ge=0)


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILES, env_file_encoding="utf-8", extra="ignore"
    )

    log_dir: str = "./logs"
    output_dir: str = "."

    durastore: DuraStoreSettings = DuraStoreSettings()
    aws: AWSSettings = AWSSettings()
    listing: ListingSettings = ListingSettings()
    transcoding: TranscodingSettings = TranscodingSettings()
    logging: LoggingSettings = LoggingSettings()

    @model_validator(mode="after")
    def _resolve_paths(self) -> "Settings":
        self.log_dir = str(Path(self.log_dir).expanduser().resolve())
        self.output_dir = str(Path(self.output_dir).expanduser().resolve())
        return self
