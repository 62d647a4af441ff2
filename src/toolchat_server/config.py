"""Configuration module for toolchat-server using pydantic-settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from toolchat_server.tools.weather import DEFAULT_WEATHER_URL


class ToolchatServerSettings(BaseSettings):
    """Main configuration settings for toolchat-server.

    All settings can be overridden via environment variables with the TOOLCHAT_ prefix.
    For example, TOOLCHAT_OLLAMA_HOST will override the ollama_host setting.
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Ollama
    ollama_host: str = "http://localhost:11434"
    model: str = "llama3.2:latest"

    # Deadlines in seconds (None disables them)
    model_timeout: float | None = None
    tool_timeout: float | None = None

    # Data directories (relative to data_dir)
    data_dir: str = "."
    transcripts_dir: str = "transcripts"

    # Weather tool
    openweather_api_key: str | None = None
    openweather_url: str = DEFAULT_WEATHER_URL
    weather_lang: str = "en"
    weather_timeout: float = 10.0

    # Time tool (IANA name, None = server local time)
    timezone: str | None = None

    # CORS
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"

    # model_timeout would otherwise clash with pydantic's "model_" namespace
    model_config = SettingsConfigDict(env_prefix="TOOLCHAT_", protected_namespaces=())

    @property
    def resolved_transcripts_dir(self) -> Path:
        """Get the full path to the transcripts directory."""
        return Path(self.data_dir) / self.transcripts_dir
