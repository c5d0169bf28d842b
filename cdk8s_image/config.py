"""Configuration settings for cdk8s_image.

Uses pydantic-settings for config parsing from environment variables
and defaults. Configuration precedence: construct props / CLI flags >
env vars > defaults.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_REGISTRY = "docker.io/library"


class Settings(BaseSettings):
    """Application settings.

    Settings are loaded from environment variables with the CDK8S_IMAGE_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="CDK8S_IMAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    registry: str = Field(
        default=DEFAULT_REGISTRY,
        min_length=1,
        description="Registry prefix used when an image does not set one",
    )
    docker_executable: str = Field(
        default="docker",
        min_length=1,
        description="Container CLI used for build and push",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )


def get_settings() -> Settings:
    """Get the application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()


def print_settings_json(settings: Settings | None = None) -> str:
    """Render effective settings as JSON.

    Args:
        settings: Optional settings instance; uses default if not provided.

    Returns:
        JSON string of effective settings.
    """
    if settings is None:
        settings = get_settings()
    return settings.model_dump_json(indent=2)


__all__ = ["DEFAULT_REGISTRY", "Settings", "get_settings", "print_settings_json"]
