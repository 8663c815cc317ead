from pathlib import Path
from typing import Literal, Optional

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class OpenAIConfig(BaseSettings):
    """OpenAI chat-completions configuration for script generation."""

    api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "OPENAI_KEY"),
    )
    model: str = Field(default="gpt-4o", validation_alias="OPENAI_MODEL")
    base_url: str = Field(
        default="https://api.openai.com/v1",
        validation_alias="OPENAI_BASE_URL",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        secrets_dir=".secrets",
        populate_by_name=True,
        case_sensitive=False,
        extra="ignore",
    )


class GeminiTtsConfig(BaseSettings):
    """Gemini text-to-speech configuration."""

    api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_TTS_KEY"),
    )
    model: str = Field(
        default="gemini-2.5-flash-preview-tts",
        validation_alias="GEMINI_TTS_MODEL",
    )
    voice: str = Field(default="zephyr", validation_alias="GEMINI_VOICE")
    base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        validation_alias="GEMINI_BASE_URL",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        secrets_dir=".secrets",
        populate_by_name=True,
        case_sensitive=False,
        extra="ignore",
    )


class PollyConfig(BaseSettings):
    """Amazon Polly configuration."""

    region: str = "us-east-1"
    voice_id: str = "Joanna"
    engine: str = "neural"

    model_config = SettingsConfigDict(
        env_prefix="POLLY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class ProviderTimeouts(BaseSettings):
    """Upper bounds for network-bound provider calls."""

    request_timeout: float = Field(default=120.0, gt=0)
    resource_timeout: float = Field(default=180.0, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="PROVIDER_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class LibraryConfig(BaseSettings):
    """Where saved briefings and their index live."""

    backend: Literal["local", "s3"] = "local"
    root: Path = Path("data/briefings")
    index_key: str = "briefings.json"
    s3_bucket: str = ""
    s3_prefix: str = "briefings/"
    s3_region: str = "us-east-1"
    access_key: Optional[str] = None
    secret_key: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix="LIBRARY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class PlaybackConfig(BaseSettings):
    """Playback engine tuning."""

    tick_interval: float = Field(
        default=0.2,
        ge=0.1,
        le=0.2,
        description="Seconds between position samples while playing.",
    )

    model_config = SettingsConfigDict(
        env_prefix="PLAYBACK_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "Briefcast"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_file: str = "logs/app.log"
    pipeline_log_file: str = "logs/pipeline.log"

    synthesis_provider: Literal["gemini", "polly"] = "gemini"

    # Providers
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)
    gemini: GeminiTtsConfig = Field(default_factory=GeminiTtsConfig)
    polly: PollyConfig = Field(default_factory=PollyConfig)
    timeouts: ProviderTimeouts = Field(default_factory=ProviderTimeouts)

    # Library
    library: LibraryConfig = Field(default_factory=LibraryConfig)

    # Playback
    playback: PlaybackConfig = Field(default_factory=PlaybackConfig)

    # CORS
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
