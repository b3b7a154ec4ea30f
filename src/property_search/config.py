"""Application configuration using pydantic-settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from property_search.models.criteria import DEFAULT_LIMIT, MAX_LIMIT


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PROPERTY_SEARCH_",
        extra="ignore",
    )

    # Storage
    database_path: str = Field(default="data/properties.db")

    # Search behaviour
    facet_sample_size: int = Field(
        default=1000,
        ge=1,
        le=10000,
        description="Number of listings sampled to build the available-filter facets",
    )
    default_page_size: int = Field(
        default=DEFAULT_LIMIT,
        ge=0,
        le=MAX_LIMIT,
        description="Page size used when a request does not specify a limit",
    )

    # Web server
    web_port: int = Field(default=8000, description="Web server port")
    web_host: str = Field(default="0.0.0.0", description="Web server host")

    # Logging
    log_json: bool = Field(
        default=False,
        description="Emit JSON log lines instead of the pretty console renderer",
    )