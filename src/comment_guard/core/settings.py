"""Application settings and configuration.

This module defines all configuration options for the Comment Guard service.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Comment Guard", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./comment_guard.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Pattern library: optional JSON file replacing the built-in lists
    moderation_patterns_file: str | None = Field(
        default=None,
        alias="MODERATION_PATTERNS_FILE",
    )

    # Content limits applied by the analyzer
    comment_min_length: int = Field(default=2, alias="COMMENT_MIN_LENGTH")
    comment_max_length: int = Field(default=5000, alias="COMMENT_MAX_LENGTH")
    comment_max_links: int = Field(default=2, alias="COMMENT_MAX_LINKS")

    # Batch reanalysis
    reanalyze_default_limit: int = Field(default=100, alias="REANALYZE_DEFAULT_LIMIT")
    moderation_queue_page_size: int = Field(default=50, alias="MODERATION_QUEUE_PAGE_SIZE")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts asyncpg URLs to psycopg for synchronous database operations
        like Alembic migrations.
        """
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url

    @property
    def content_limits(self) -> dict[str, int]:
        """Return the analyzer's numeric limits as a convenience dictionary."""
        return {
            "min_length": self.comment_min_length,
            "max_length": self.comment_max_length,
            "max_links": self.comment_max_links,
        }


settings = Settings()
