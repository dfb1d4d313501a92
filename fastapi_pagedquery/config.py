"""Settings for paged list queries, read from ``PAGEDQUERY_*`` environment variables."""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PAGEDQUERY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./test.db",
        description="SQLAlchemy async database URL",
    )
    echo_sql: bool = Field(default=False, description="Log every statement through SQLAlchemy")
    isolation_level: str | None = Field(
        default=None,
        description="Transaction isolation level; REPEATABLE READ is used for non-SQLite backends when unset",
    )

    # Paging
    default_items_per_page: int = Field(default=100, gt=0)
    min_items_per_page: int = Field(default=20, gt=0)
    max_items_per_page: int = Field(default=250, gt=0)

    # Logging
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False, description="Render log lines as JSON instead of console output")

    @model_validator(mode="after")
    def check_page_bounds(self) -> "Settings":
        if self.min_items_per_page > self.max_items_per_page:
            raise ValueError("min_items_per_page must not exceed max_items_per_page")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
