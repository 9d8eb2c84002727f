"""Application settings loaded from environment variables.

Every field can be set as ``SCROBBLEVIEW_<SECTION>__<FIELD>``, e.g.
``SCROBBLEVIEW_LASTFM__API_KEY`` or ``SCROBBLEVIEW_HTTP__TIMEOUT_SECONDS``.
"""

from functools import lru_cache

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from scrobbleview.domain.entities import Provider


class LastfmSettings(BaseModel):
    """Last.fm API settings."""

    api_key: str = Field(default="", description="Last.fm API key")
    base_url: str = Field(
        default=Provider.LASTFM.base_url, description="Last.fm API root"
    )


class LibrefmSettings(BaseModel):
    """Libre.fm API settings.

    Libre.fm accepts any API key string, but the parameter must be present.
    """

    api_key: str = Field(default="", description="Libre.fm API key")
    base_url: str = Field(
        default=Provider.LIBREFM.base_url, description="Libre.fm API root"
    )


class ListenBrainzSettings(BaseModel):
    """ListenBrainz API settings."""

    base_url: str = Field(
        default=Provider.LISTENBRAINZ.base_url, description="ListenBrainz API root"
    )
    token: str | None = Field(
        default=None, description="Optional user token, raises the rate limit"
    )

    # Endpoint paths are appended to base_url, so it must end with "/"
    @field_validator("base_url")
    @classmethod
    def ensure_trailing_slash(cls, value: str) -> str:
        return value if value.endswith("/") else value + "/"


class HttpSettings(BaseModel):
    """Shared transport settings for all providers."""

    timeout_seconds: float = Field(default=25.0, gt=0, description="Request timeout")
    https_only: bool = Field(default=True, description="Refuse plain http:// URLs")
    user_agent: str = Field(
        default="scrobbleview/0.1 (+https://github.com/scrobbleview/scrobbleview)",
        description="User-Agent header sent to every provider",
    )
    cache_max_entries: int = Field(
        default=100, gt=0, description="Maximum cached responses"
    )
    cache_ttl_seconds: int = Field(
        default=300, gt=0, description="Lifetime of a cached response"
    )
    max_stale_seconds: int = Field(
        default=300, gt=0, description="Staleness accepted by cache-preferring calls"
    )


class LoggingSettings(BaseModel):
    """Logging output settings."""

    level: str = Field(default="INFO", description="Root log level")
    json_format: bool = Field(default=False, description="Emit JSON log lines")

    @field_validator("level")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level


class Settings(BaseSettings):
    """Root settings object."""

    app_name: str = Field(default="scrobbleview", description="Name used in logs")

    lastfm: LastfmSettings = Field(default_factory=LastfmSettings)
    librefm: LibrefmSettings = Field(default_factory=LibrefmSettings)
    listenbrainz: ListenBrainzSettings = Field(default_factory=ListenBrainzSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_prefix="SCROBBLEVIEW_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Hey future me - cached so every caller shares one Settings instance. Tests that tweak the
# environment must call get_settings.cache_clear() or build Settings(...) directly.
@lru_cache
def get_settings() -> Settings:
    """Get the process wide settings."""
    return Settings()
