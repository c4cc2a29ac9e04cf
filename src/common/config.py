"""Project configuration and paths.

Loads settings from config/settings.yaml and environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

# === Paths ===
PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"

# Load .env from project root
load_dotenv(PROJECT_ROOT / ".env")

_TRUTHY = {"1", "true", "yes", "on"}


class ScraperSettings(BaseModel):
    """Settings for the fetcher and the deep-scan loop."""
    search_url: str = "https://html.duckduckgo.com/html/"
    search_engine_domain: str = "duckduckgo.com"
    query_suffix: str = "price buy"
    request_timeout: float = 10.0
    max_redirects: int = 3
    max_pages: int = 8
    max_workers: int = 1
    rate_limit_rpm: int = 0
    rotate_user_agent: bool = False
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    )
    accept: str = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
    accept_language: str = "en-US,en;q=0.5,es-MX;q=0.3"


class HeuristicSettings(BaseModel):
    """Thresholds for bucketing `$` amounts that carry no currency marker."""
    mxn_floor: float = 500
    mxn_ceiling: float = 100_000
    usd_ceiling: float = 10_000


class Settings(BaseModel):
    """Top-level application settings."""
    scraper: ScraperSettings = Field(default_factory=ScraperSettings)
    heuristic: HeuristicSettings = Field(default_factory=HeuristicSettings)
    default_item: str = "wireless headphones"
    demo_mode: bool = False

    @classmethod
    def load(cls, settings_path: Path | None = None) -> Settings:
        """Load settings from YAML, falling back to defaults, then apply env overrides."""
        settings_path = settings_path or CONFIG_DIR / "settings.yaml"
        data: dict = {}
        if settings_path.exists():
            with open(settings_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        settings = cls(**data)
        settings.apply_env_overrides()
        return settings

    def apply_env_overrides(self) -> None:
        """Override fields from environment variables when set."""
        scraper = self.scraper
        if timeout := os.getenv("REQUEST_TIMEOUT"):
            scraper.request_timeout = float(timeout)
        if redirects := os.getenv("MAX_REDIRECTS"):
            scraper.max_redirects = int(redirects)
        if pages := os.getenv("MAX_PAGES"):
            scraper.max_pages = int(pages)
        if workers := os.getenv("SCAN_WORKERS"):
            scraper.max_workers = int(workers)
        if rpm := os.getenv("RATE_LIMIT_REQUESTS_PER_MINUTE"):
            scraper.rate_limit_rpm = int(rpm)
        if rotate := os.getenv("ROTATE_USER_AGENT"):
            scraper.rotate_user_agent = rotate.strip().lower() in _TRUTHY
        if url := os.getenv("SEARCH_URL"):
            scraper.search_url = url
        if item := os.getenv("DEFAULT_ITEM"):
            self.default_item = item
        if demo := os.getenv("DEMO"):
            self.demo_mode = demo.strip().lower() in _TRUTHY
