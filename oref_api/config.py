"""
Relay API Configuration Settings
Uses Pydantic Settings for environment variable management
"""

from functools import lru_cache
from typing import Tuple

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from oref_core.database import build_database_url_from_env
from oref_core.history import DEFAULT_HISTORY_LIMIT
from poller.oref_poller import DEFAULT_FEED_TIMEOUT, DEFAULT_POLL_INTERVAL, OREF_ALERTS_URL


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Application
    app_name: str = "Oref Relay"
    environment: str = Field(default="development")
    debug: bool = Field(default=False)
    addr_info: str = Field(default="0.0.0.0:8080", description="Bind address as host:port")
    log_level: str = Field(default="INFO")

    # Database
    database_url: str = Field(default_factory=build_database_url_from_env)
    store_connect_timeout_sec: float = Field(default=10.0, gt=0)
    store_insert_timeout_sec: float = Field(default=5.0, gt=0)
    store_query_timeout_sec: float = Field(default=5.0, gt=0)

    # Feed polling
    oref_feed_url: str = Field(default=OREF_ALERTS_URL)
    poll_interval_sec: float = Field(default=DEFAULT_POLL_INTERVAL, gt=0)
    feed_timeout_sec: float = Field(default=DEFAULT_FEED_TIMEOUT, gt=0)
    poller_enabled: bool = Field(default=True)

    # History
    history_limit: int = Field(default=DEFAULT_HISTORY_LIMIT, ge=1)
    display_timezone: str = Field(default="Asia/Jerusalem")

    # CORS
    cors_origin: str = Field(default="http://127.0.0.1:8080")

    # Front-end bundle
    static_dir: str = Field(default="ui/dist")

    @property
    def bind(self) -> Tuple[str, int]:
        """Split ``addr_info`` into host and port."""
        host, _, port = self.addr_info.rpartition(":")
        return (host or "0.0.0.0", int(port))


@lru_cache
def get_settings() -> Settings:
    return Settings()
