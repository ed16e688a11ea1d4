"""Configuration management for autosign."""

from __future__ import annotations

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from autosign.errors import ConfigurationError
from autosign.signature import DEFAULT_HOST_NAME, DEFAULT_HOST_URL, DEFAULT_MARKER

DEFAULT_STRUCTURED_TOOLS = (
    "github_create_pull_request",
    "github_create_issue",
    "github_update_pull_request",
    "github_update_issue",
    "MCP_DOCKER_create_pull_request",
    "MCP_DOCKER_create_issue",
    "MCP_DOCKER_update_pull_request",
    "MCP_DOCKER_update_issue",
)


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="AUTOSIGN_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Signature
    marker: str = Field(default=DEFAULT_MARKER, description="Glyph that opens the signature")
    host_name: str = Field(default=DEFAULT_HOST_NAME, description="Host name shown in the signature link")
    host_url: str = Field(default=DEFAULT_HOST_URL, description="Host URL used as the link target")

    # Tool identities
    shell_tool: str = Field(default="bash", description="Identifier of the shell execution tool")
    structured_tools: list[str] = Field(
        default_factory=lambda: list(DEFAULT_STRUCTURED_TOOLS),
        description="Structured PR/issue tools whose body argument is signed",
    )

    # Plugins
    load_entrypoints: bool = Field(default=True, description="Load plugins from the autosign entry-point group")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")

    @field_validator("host_name")
    @classmethod
    def _host_name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("host_name must not be blank")
        return value


def get_settings(**overrides: object) -> Settings:
    """Get application settings, with keyword overrides taking precedence over the environment."""

    try:
        return Settings(**overrides)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc
