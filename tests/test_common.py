"""Tests for shared common modules — config, logging."""

import logging

import pytest

from src.common.config import HeuristicSettings, ScraperSettings, Settings
from src.common.logging import setup_logging

_ENV_VARS = (
    "REQUEST_TIMEOUT",
    "MAX_REDIRECTS",
    "MAX_PAGES",
    "SCAN_WORKERS",
    "RATE_LIMIT_REQUESTS_PER_MINUTE",
    "ROTATE_USER_AGENT",
    "SEARCH_URL",
    "DEFAULT_ITEM",
    "DEMO",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.scraper.request_timeout == 10.0
        assert settings.scraper.max_redirects == 3
        assert settings.scraper.max_pages == 8
        assert settings.scraper.max_workers == 1
        assert settings.heuristic.mxn_floor == 500
        assert settings.default_item == "wireless headphones"
        assert settings.demo_mode is False

    def test_load_missing_file(self, tmp_path):
        settings = Settings.load(tmp_path / "missing.yaml")
        assert settings == Settings()

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text(
            "scraper:\n"
            "  max_pages: 5\n"
            "  rate_limit_rpm: 30\n"
            "heuristic:\n"
            "  mxn_floor: 1000\n"
            "default_item: gaming mouse\n",
            encoding="utf-8",
        )
        settings = Settings.load(path)

        assert settings.scraper.max_pages == 5
        assert settings.scraper.rate_limit_rpm == 30
        assert settings.scraper.max_redirects == 3
        assert settings.heuristic.mxn_floor == 1000
        assert settings.heuristic.usd_ceiling == 10_000
        assert settings.default_item == "gaming mouse"

    def test_env_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("REQUEST_TIMEOUT", "4.5")
        monkeypatch.setenv("MAX_PAGES", "2")
        monkeypatch.setenv("SCAN_WORKERS", "3")
        monkeypatch.setenv("ROTATE_USER_AGENT", "true")
        monkeypatch.setenv("DEMO", "1")

        settings = Settings.load(tmp_path / "missing.yaml")

        assert settings.scraper.request_timeout == 4.5
        assert settings.scraper.max_pages == 2
        assert settings.scraper.max_workers == 3
        assert settings.scraper.rotate_user_agent is True
        assert settings.demo_mode is True

    def test_demo_off_values(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DEMO", "0")
        assert Settings.load(tmp_path / "missing.yaml").demo_mode is False

    def test_nested_models(self):
        settings = Settings(
            scraper=ScraperSettings(max_pages=1),
            heuristic=HeuristicSettings(usd_ceiling=5000),
        )
        assert settings.scraper.max_pages == 1
        assert settings.heuristic.usd_ceiling == 5000


class TestLogging:
    def test_setup_logging_is_idempotent(self):
        logger = setup_logging(logging.INFO, module_name="price_scanner_test")
        again = setup_logging(logging.DEBUG, module_name="price_scanner_test")

        assert logger is again
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
