from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


# ---------- Scraper configuration ----------


@dataclass
class ScraperConfig:
    """
    Settings for talking to reddit.com: login form and saved listing.
    """

    base_url: str = "https://www.reddit.com"
    login_path: str = "/login"
    saved_path: str = "/saved.json"
    # Sent as the `dest` field of the login form
    dest_url: str = "https://www.reddit.com"
    user_agent: str = "reddit-saved-archive/0.1"
    timeout_seconds: Optional[float] = None  # None = requests default (no timeout)

    @property
    def login_url(self) -> str:
        return f"{self.base_url}{self.login_path}"

    @property
    def saved_url(self) -> str:
        return f"{self.base_url}{self.saved_path}"


# ---------- Top-level application configuration ----------


@dataclass
class AppConfig:
    scraper: ScraperConfig = field(default_factory=ScraperConfig)


def get_config() -> AppConfig:
    """
    Main entrypoint to get the full application config.

    Usage:
        from reddit_saved.config import get_config
        cfg = get_config()
        cfg.scraper.saved_url
    """
    return AppConfig()
