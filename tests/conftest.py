"""Shared test fixtures for the price scanner."""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Ensure src is importable
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.common.config import Settings


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the test fixtures directory."""
    return PROJECT_ROOT / "tests" / "fixtures"


@pytest.fixture
def settings() -> Settings:
    """Default settings, untouched by the environment."""
    return Settings()


@pytest.fixture
def make_response():
    """Factory for fake streamed ``requests.Response`` objects."""

    def _make(
        body: str | bytes = "",
        status: int = 200,
        headers: dict | None = None,
        encoding: str | None = "utf-8",
    ) -> MagicMock:
        if isinstance(body, str):
            body = body.encode("utf-8")
        resp = MagicMock()
        resp.status_code = status
        resp.headers = (
            headers
            if headers is not None
            else {"Content-Type": "text/html; charset=utf-8"}
        )
        resp.encoding = encoding
        resp.iter_content.return_value = [body] if body else []
        return resp

    return _make


@pytest.fixture
def search_html(fixtures_dir: Path) -> str:
    return (fixtures_dir / "ddg_search.html").read_text(encoding="utf-8")


@pytest.fixture
def product_html(fixtures_dir: Path) -> str:
    return (fixtures_dir / "product_page.html").read_text(encoding="utf-8")
