"""Configuration for blog_analytics.

Settings are read once from environment variables:

- BLOG_ANALYTICS_DB_PATH: SQLite database location
  (default ~/.blog_analytics/blog_analytics.db)
- BLOG_ANALYTICS_LOG_LEVEL: logging level name (default INFO)
- BLOG_ANALYTICS_RELAY_TIMEOUT: seconds allowed per relay attempt (default 20)
- GEMINI_API_KEY: credential for blog classification (empty disables it)
- GEMINI_MODEL: classification model name
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


DEFAULT_RELAYS = [
    "https://corsproxy.io/?",
    "https://api.allorigins.win/raw?url=",
    "https://api.codetabs.com/v1/proxy?quest=",
    "https://cors-anywhere.herokuapp.com/",
]


def _default_db_path() -> Path:
    return Path.home() / ".blog_analytics" / "blog_analytics.db"


@dataclass
class ServerConfig:
    """Runtime settings shared by the server, the catalog and the analyzer."""

    name: str = "blog_analytics"
    log_level: str = "INFO"
    db_path: Path = field(default_factory=_default_db_path)

    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"

    relays: List[str] = field(default_factory=lambda: list(DEFAULT_RELAYS))
    relay_timeout: float = 20.0

    post_sample_size: int = 25
    page_sample_size: int = 10
    history_cap: int = 500
    tag_cap: int = 15
    max_recent_posts: int = 5


def load_config() -> ServerConfig:
    """Build a ServerConfig from the environment."""
    config = ServerConfig()

    db_path = os.environ.get("BLOG_ANALYTICS_DB_PATH")
    if db_path:
        config.db_path = Path(db_path)

    config.log_level = os.environ.get("BLOG_ANALYTICS_LOG_LEVEL", config.log_level).upper()
    config.gemini_api_key = os.environ.get("GEMINI_API_KEY", "")
    config.gemini_model = os.environ.get("GEMINI_MODEL", config.gemini_model)

    timeout = os.environ.get("BLOG_ANALYTICS_RELAY_TIMEOUT")
    if timeout:
        try:
            config.relay_timeout = float(timeout)
        except ValueError:
            raise ValueError(
                f"BLOG_ANALYTICS_RELAY_TIMEOUT must be a number, got {timeout!r}"
            ) from None

    return config


_config: Optional[ServerConfig] = None


def get_config() -> ServerConfig:
    """Return the process-wide configuration, loading it on first use."""
    global _config

    if _config is None:
        _config = load_config()

    return _config
