"""
Application settings loaded from environment variables and an optional
``.env`` file in the working directory.
"""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the agent server and CLI.

    Attributes
    ----------
    gemini_api_key: Optional[str]
        API key for the Gemini API. Read from GEMINI_API_KEY, falling back to
        GOOGLE_API_KEY. When missing the server still starts and every task
        fails at generation time.
    host: str
        Interface the HTTP server binds to.
    port: int
        Port the HTTP server listens on (PORT, as set by most PaaS hosts).
    public_url: str
        Base URL advertised in the agent card.
    llm_config_path: Optional[str]
        YAML LLM configuration; the packaged default is used when unset.
    llm_model: Optional[str]
        Model alias from the LLM config; the config's default when unset.
    log_level: str
        Minimum log level for structlog output.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="MIGRATION_AGENT_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    gemini_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    )
    host: str = Field(default="0.0.0.0")
    port: int = Field(
        default=8080,
        validation_alias=AliasChoices("PORT", "MIGRATION_AGENT_PORT"),
    )
    public_url: str = Field(default="http://localhost:8080")
    llm_config_path: Optional[str] = Field(default=None)
    llm_model: Optional[str] = Field(default=None)
    log_level: str = Field(default="INFO")
