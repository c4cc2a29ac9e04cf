"""HTTP fetcher with a hard deadline and bounded redirect following."""

from __future__ import annotations

import logging
import time
from urllib.parse import urljoin

import requests
from fake_useragent import UserAgent

from ..common.config import ScraperSettings
from .errors import FetchTimeout, NetworkError, TooManyRedirects
from .rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


class Fetcher:
    """HTTP client wrapping a requests session.

    Features:
    - Browser-like header set (optionally rotating User-Agent)
    - Single deadline covering connect and body read
    - Manual redirect following with a per-call budget
    - Optional request spacing

    There is no retry: one failed fetch raises exactly one error.
    """

    CHUNK_SIZE = 16 * 1024

    def __init__(self, settings: ScraperSettings | None = None) -> None:
        self.settings = settings or ScraperSettings()
        self._session = requests.Session()
        self._rate_limiter = RateLimiter(self.settings.rate_limit_rpm)
        self._ua = (
            UserAgent(fallback=self.settings.user_agent)
            if self.settings.rotate_user_agent
            else None
        )

    def fetch(self, url: str, max_redirects: int | None = None) -> str:
        """Fetch a URL and return its body as text.

        Args:
            url: Absolute http(s) URL.
            max_redirects: Redirect budget for this call. A budget of zero
                fails before any request is sent. Defaults to the
                configured ``max_redirects``.

        Returns:
            Response body decoded as text. Non-2xx bodies are returned too.

        Raises:
            TooManyRedirects: Budget exhausted.
            FetchTimeout: Deadline passed before the body was complete.
            NetworkError: Connection failed.
        """
        if max_redirects is None:
            max_redirects = self.settings.max_redirects
        if max_redirects <= 0:
            raise TooManyRedirects(url)

        self._rate_limiter.wait()
        deadline = time.monotonic() + self.settings.request_timeout

        try:
            resp = self._session.get(
                url,
                headers=self._headers(),
                timeout=self.settings.request_timeout,
                allow_redirects=False,
                stream=True,
            )
        except requests.Timeout as exc:
            raise FetchTimeout(f"Request timeout: {url}") from exc
        except requests.RequestException as exc:
            raise NetworkError(f"Request failed: {url}: {exc}") from exc

        try:
            location = resp.headers.get("Location")
            if 300 <= resp.status_code < 400 and location:
                redirect_url = urljoin(url, location)
                logger.debug(
                    "Redirect %d: %s -> %s", resp.status_code, url, redirect_url
                )
                resp.close()
                return self.fetch(redirect_url, max_redirects - 1)

            if resp.status_code >= 400:
                logger.debug("HTTP %d for %s", resp.status_code, url)

            return self._read_body(resp, url, deadline)
        finally:
            resp.close()

    def _read_body(
        self, resp: requests.Response, url: str, deadline: float
    ) -> str:
        """Read the streamed body, aborting the connection at the deadline."""
        chunks: list[bytes] = []
        try:
            for chunk in resp.iter_content(chunk_size=self.CHUNK_SIZE):
                if time.monotonic() > deadline:
                    resp.close()
                    raise FetchTimeout(f"Request timeout: {url}")
                chunks.append(chunk)
        except requests.RequestException as exc:
            resp.close()
            if isinstance(exc, requests.Timeout) or time.monotonic() > deadline:
                raise FetchTimeout(f"Request timeout: {url}") from exc
            raise NetworkError(f"Request failed: {url}: {exc}") from exc

        body = b"".join(chunks)
        try:
            return body.decode(self._encoding(resp), errors="replace")
        except LookupError:
            return body.decode("utf-8", errors="replace")

    def _headers(self) -> dict[str, str]:
        return {
            "User-Agent": self._ua.random if self._ua else self.settings.user_agent,
            "Accept": self.settings.accept,
            "Accept-Language": self.settings.accept_language,
        }

    @staticmethod
    def _encoding(resp: requests.Response) -> str:
        # requests falls back to ISO-8859-1 for text/* without a charset
        content_type = resp.headers.get("Content-Type", "") or ""
        if "charset" in content_type.lower() and resp.encoding:
            return resp.encoding
        return "utf-8"

    def close(self) -> None:
        """Close the underlying session."""
        self._session.close()

    def __enter__(self) -> Fetcher:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
