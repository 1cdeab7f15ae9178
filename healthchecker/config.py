from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env file."""

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "HEALTHCHECKER_",
        "extra": "ignore",
    }

    # Site under inspection
    site_file: str = "site.yaml"  # config/php snapshot
    site_url: str = ""  # homepage fetched by SEO/header checks
    site_root: str = ""  # defaults to root_path in site.yaml, then CWD
    database_path: str = ""  # sqlite file, opened read-only; empty = no database

    # Plugins (dotted module paths exposing create_plugin())
    plugins: list[str] = ["healthchecker.plugins.core"]

    # Stats cache
    stats_cache_backend: str = "memory"  # "memory" | "sqlite"
    stats_cache_path: str = "data/stats_cache.db"
    stats_cache_ttl: int = 900  # seconds; 0 = always recompute

    # HTTP-based checks
    http_timeout_seconds: float = 10.0

    # API
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    # Logging
    log_level: str = "INFO"


settings = Settings()
