"""Shared settings loaded from environment / .env file."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SCHEMA_PATH = Path(__file__).parent / "schema" / "data" / "kubernetes.json"


class Settings(BaseSettings):
    """Configuration for the manifestcheck CLI and REST API server.

    Values are read from environment variables and from a ``.env`` file
    in the working directory.  See ``.env.example`` for all options.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Shared
    log_level: str = "INFO"
    schema_path: Path = DEFAULT_SCHEMA_PATH
    max_document_size: int = 5_000_000  # characters

    # REST API
    api_server_host: str = "localhost"
    api_server_port: int = 8000
    port: int | None = None  # platform-injected port; takes precedence over api_server_port

    @property
    def effective_port(self) -> int:
        """Return the port to listen on (platform port takes precedence)."""
        return self.port if self.port is not None else self.api_server_port
