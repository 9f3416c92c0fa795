"""Configuration management."""

from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

LogLevel = Literal["debug", "info", "warning", "error"]


class Settings(BaseSettings):
    # Extraction collaborator
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-3-5-haiku-latest"
    extraction_temperature: float = Field(default=0.3, ge=0.0, le=1.0)
    extraction_max_tokens: int = Field(default=2000, gt=0)

    # Storage collaborator
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    personas_bucket: str = "personas"
    storage_backend: Literal["supabase", "memory"] = Field(
        default="supabase",
        validation_alias=AliasChoices("storage_backend", "persona_storage_backend"),
    )

    # App config
    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("environment", "node_env"),
    )
    log_level: LogLevel = "info"
    logfire_token: str | None = None
    host: str = "0.0.0.0"
    port: int = 8000

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",  # Ignore extra fields in .env file
    )

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    def require(self, *names: str) -> None:
        """Fail fast when any of the named settings is empty.

        Names are field names; the error lists them as environment variables.
        """
        missing = [name.upper() for name in names if not getattr(self, name)]
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}",
                details={"source": "settings", "operation": "require"},
            )


def get_settings() -> Settings:
    """Read settings from the environment (and .env)."""
    return Settings()
