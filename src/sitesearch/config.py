from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseModel):
    """Application-specific configuration values."""

    name: str = "Site Search"
    env: str = "development"
    debug: bool = True
    port: int = 8000
    log_level: str = "INFO"
    # Transport settings for FastMCP: "stdio" (default), "http", or "sse"
    transport: Literal["stdio", "http", "sse"] = "stdio"
    host: str = "127.0.0.1"


class SearchConfig(BaseModel):
    """Query scoring and presentation settings."""

    max_results: int = 10
    min_query_length: int = 2
    excerpt_length: int = 150
    debounce_ms: int = 200


class IndexConfig(BaseModel):
    """Where the precomputed index lives and how to fall back without it."""

    base_url: Optional[str] = None  # Site root, e.g. "https://docs.example.com/"
    index_path: str = "/search.json"
    nav_link_selector: str = "a.nav-link"
    # None disables the timeout; a hung fetch keeps the loader waiting
    fetch_timeout: Optional[float] = None
    # Directory site_index_build may write into; None disables writing
    build_output_dir: Optional[str] = None


class Settings(BaseSettings):
    """Top-level settings loaded from environment variables and .env only."""

    model_config = SettingsConfigDict(
        env_prefix="SITESEARCH_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    app: AppConfig = AppConfig()
    search: SearchConfig = SearchConfig()
    index: IndexConfig = IndexConfig()


def load_settings() -> Settings:
    """Load settings from environment variables and .env only."""
    return Settings()  # type: ignore[call-arg]
