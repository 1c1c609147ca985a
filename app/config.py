"""Configuration loader for csv-aggregator."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .fetch import RetryPolicy, SourceEndpoint

load_dotenv()

DEFAULT_BASE_URL = "https://jsonplaceholder.typicode.com"


@dataclass
class SourcesConfig:
    users_url: str = f"{DEFAULT_BASE_URL}/users"
    posts_url: str = f"{DEFAULT_BASE_URL}/posts"
    comments_url: str = f"{DEFAULT_BASE_URL}/comments"


@dataclass
class FetchConfig:
    retries: int = 3
    retry_delay_ms: int = 1000
    timeout_seconds: float = 10.0


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 3000


@dataclass
class AppConfig:
    output_dir: Path = Path("output")
    sources: SourcesConfig = field(default_factory=SourcesConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    max_identifier: Optional[int] = 100_000
    app_env: str = "production"
    log_level: str = "INFO"

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    def endpoints(self) -> List[SourceEndpoint]:
        return [
            SourceEndpoint("users", self.sources.users_url),
            SourceEndpoint("posts", self.sources.posts_url),
            SourceEndpoint("comments", self.sources.comments_url),
        ]

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            retries=self.fetch.retries,
            delay_seconds=self.fetch.retry_delay_ms / 1000,
        )


def load_config() -> AppConfig:
    """Build an AppConfig from environment variables (and .env, if present)."""
    defaults = AppConfig()

    max_identifier = os.getenv("MAX_IDENTIFIER")
    if max_identifier is None:
        limit = defaults.max_identifier
    else:
        # 0 or a negative value disables the guard
        limit = int(max_identifier) if int(max_identifier) > 0 else None

    return AppConfig(
        output_dir=Path(os.getenv("OUTPUT_DIR", str(defaults.output_dir))),
        sources=SourcesConfig(
            users_url=os.getenv("USERS_URL", defaults.sources.users_url),
            posts_url=os.getenv("POSTS_URL", defaults.sources.posts_url),
            comments_url=os.getenv("COMMENTS_URL", defaults.sources.comments_url),
        ),
        fetch=FetchConfig(
            retries=max(0, int(os.getenv("FETCH_RETRIES", defaults.fetch.retries))),
            retry_delay_ms=int(os.getenv("FETCH_RETRY_DELAY_MS", defaults.fetch.retry_delay_ms)),
            timeout_seconds=float(
                os.getenv("FETCH_TIMEOUT_SECONDS", defaults.fetch.timeout_seconds)
            ),
        ),
        server=ServerConfig(
            host=os.getenv("HOST", defaults.server.host),
            port=int(os.getenv("PORT", defaults.server.port)),
        ),
        max_identifier=limit,
        app_env=os.getenv("APP_ENV", defaults.app_env),
        log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
    )


# Global config instance (lazy loaded)
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global config instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: Optional[AppConfig]) -> None:
    """Set the global config instance (for testing)."""
    global _config
    _config = config
