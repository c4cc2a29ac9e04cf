"""Tests for the HTTP fetcher and rate limiter."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

from src.common.config import ScraperSettings
from src.price_scanner.errors import FetchTimeout, NetworkError, TooManyRedirects
from src.price_scanner.fetcher import Fetcher
from src.price_scanner.rate_limiter import RateLimiter


@pytest.fixture
def fetcher() -> Fetcher:
    f = Fetcher(ScraperSettings())
    f._session = MagicMock()
    return f


class TestFetcher:

    def test_returns_body(self, fetcher, make_response):
        fetcher._session.get.return_value = make_response("<html>ok</html>")

        assert fetcher.fetch("https://shop.example.com/") == "<html>ok</html>"

    def test_sends_browser_headers(self, fetcher, make_response):
        fetcher._session.get.return_value = make_response("x")
        fetcher.fetch("https://shop.example.com/")

        kwargs = fetcher._session.get.call_args.kwargs
        assert kwargs["headers"]["User-Agent"].startswith("Mozilla/5.0")
        assert "text/html" in kwargs["headers"]["Accept"]
        assert "es-MX" in kwargs["headers"]["Accept-Language"]
        assert kwargs["timeout"] == 10.0
        assert kwargs["allow_redirects"] is False

    def test_zero_budget_issues_no_request(self, fetcher):
        with pytest.raises(TooManyRedirects):
            fetcher.fetch("https://shop.example.com/", max_redirects=0)
        fetcher._session.get.assert_not_called()

    def test_path_only_redirect(self, fetcher, make_response):
        fetcher._session.get.side_effect = [
            make_response(status=302, headers={"Location": "/final?x=1"}),
            make_response("landed"),
        ]

        assert fetcher.fetch("https://shop.example.com/start") == "landed"
        second_url = fetcher._session.get.call_args_list[1].args[0]
        assert second_url == "https://shop.example.com/final?x=1"

    def test_absolute_redirect(self, fetcher, make_response):
        fetcher._session.get.side_effect = [
            make_response(status=301, headers={"Location": "http://other.example.org/p"}),
            make_response("moved"),
        ]

        assert fetcher.fetch("https://shop.example.com/") == "moved"
        assert fetcher._session.get.call_args_list[1].args[0] == "http://other.example.org/p"

    def test_redirect_loop_exhausts_budget(self, fetcher, make_response):
        fetcher._session.get.side_effect = lambda *a, **kw: make_response(
            status=302, headers={"Location": "/loop"}
        )

        with pytest.raises(TooManyRedirects):
            fetcher.fetch("https://shop.example.com/loop", max_redirects=3)
        assert fetcher._session.get.call_count == 3

    def test_3xx_without_location_returns_body(self, fetcher, make_response):
        fetcher._session.get.return_value = make_response("not modified", status=304)
        assert fetcher.fetch("https://shop.example.com/") == "not modified"

    def test_error_status_still_returns_body(self, fetcher, make_response):
        fetcher._session.get.return_value = make_response("<h1>Not found</h1>", status=404)
        assert fetcher.fetch("https://shop.example.com/") == "<h1>Not found</h1>"

    def test_connect_timeout(self, fetcher):
        fetcher._session.get.side_effect = requests.ConnectTimeout("slow")

        with pytest.raises(FetchTimeout):
            fetcher.fetch("https://shop.example.com/")

    def test_connection_error(self, fetcher):
        fetcher._session.get.side_effect = requests.ConnectionError("refused")

        with pytest.raises(NetworkError, match="refused"):
            fetcher.fetch("https://shop.example.com/")

    def test_deadline_aborts_connection(self, fetcher, make_response):
        resp = make_response("partial body")
        fetcher._session.get.return_value = resp

        with patch(
            "src.price_scanner.fetcher.time.monotonic",
            side_effect=[0.0] + [100.0] * 10,
        ):
            with pytest.raises(FetchTimeout):
                fetcher.fetch("https://shop.example.com/slow")
        resp.close.assert_called()

    def test_broken_stream_is_network_error(self, fetcher, make_response):
        resp = make_response()
        resp.iter_content.side_effect = requests.exceptions.ChunkedEncodingError("reset")
        fetcher._session.get.return_value = resp

        with pytest.raises(NetworkError):
            fetcher.fetch("https://shop.example.com/")
        resp.close.assert_called()

    def test_missing_charset_decodes_utf8(self, fetcher, make_response):
        fetcher._session.get.return_value = make_response(
            "Precio: $1,099 pesos – envío",
            headers={"Content-Type": "text/html"},
            encoding="ISO-8859-1",
        )
        assert fetcher.fetch("https://tienda.example.mx/") == "Precio: $1,099 pesos – envío"

    def test_rotating_user_agent(self, make_response):
        with patch("src.price_scanner.fetcher.UserAgent") as mock_ua_cls:
            mock_ua_cls.return_value.random = "Mozilla/5.0 (Rotated) Test/1.0"
            f = Fetcher(ScraperSettings(rotate_user_agent=True))
        f._session = MagicMock()
        f._session.get.return_value = make_response("x")

        f.fetch("https://shop.example.com/")

        mock_ua_cls.assert_called_once_with(fallback=ScraperSettings().user_agent)
        headers = f._session.get.call_args.kwargs["headers"]
        assert headers["User-Agent"] == "Mozilla/5.0 (Rotated) Test/1.0"

    def test_fixed_user_agent_skips_rotation(self):
        with patch("src.price_scanner.fetcher.UserAgent") as mock_ua_cls:
            Fetcher(ScraperSettings())
        mock_ua_cls.assert_not_called()

    def test_context_manager_closes_session(self):
        with Fetcher(ScraperSettings()) as f:
            f._session = MagicMock()
            session = f._session
        session.close.assert_called_once()


class TestRateLimiter:

    def test_disabled_never_sleeps(self):
        limiter = RateLimiter(0)
        with patch("src.price_scanner.rate_limiter.time.sleep") as sleep:
            limiter.wait()
            limiter.wait()
        assert not limiter.enabled
        sleep.assert_not_called()

    def test_spaces_requests(self):
        limiter = RateLimiter(60)
        with patch("src.price_scanner.rate_limiter.time.monotonic", side_effect=[100.0, 100.0, 100.2, 101.0]), \
                patch("src.price_scanner.rate_limiter.time.sleep") as sleep:
            limiter.wait()
            limiter.wait()
        sleep.assert_called_once()
        assert sleep.call_args.args[0] == pytest.approx(0.8)
