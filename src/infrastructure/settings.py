"""Application settings loaded from environment variables via Pydantic."""

from __future__ import annotations

from pydantic_settings import BaseSettings

from application.schemas.pagination import DEFAULT_PER_PAGE, MAX_PER_PAGE, PaginationShape


class AppSettings(BaseSettings):
    """Central configuration for the User Directory API."""

    model_config = {"env_prefix": "APP_", "case_sensitive": False}

    service_name: str = "user-directory-api"
    version: str = "1.0.0"

    # Database (empty URL selects the in-memory repository)
    database_url: str = ""
    db_pool_size: int = 20
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_echo: bool = False

    # Pagination
    default_per_page: int = DEFAULT_PER_PAGE
    max_per_page: int = MAX_PER_PAGE
    pagination_shape: PaginationShape = PaginationShape.FULL

    # Password hashing (Argon2id)
    argon2_time_cost: int = 3
    argon2_memory_cost: int = 65536
    argon2_parallelism: int = 4

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # CORS
    cors_origins: str = "*"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


def get_settings() -> AppSettings:
    """Return the application settings singleton."""
    return AppSettings()
