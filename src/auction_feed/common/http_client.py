"""HTTP page fetcher with bounded timeout, error mapping, and raw HTML caching."""

from __future__ import annotations

import hashlib
import logging
from datetime import datetime
from pathlib import Path
from urllib.parse import urlparse

import requests
from fake_useragent import UserAgent
from requests.adapters import HTTPAdapter
from requests.utils import get_encoding_from_headers

from .config import Config
from .errors import BadResponse, InvalidURL, NetworkFailure

logger = logging.getLogger(__name__)


class HTTPClient:
    """Page fetcher wrapping a requests session.

    Features:
    - Bounded request timeout (Config.request_timeout, 30-60s)
    - Random User-Agent rotation
    - Failures mapped onto InvalidURL / NetworkFailure / BadResponse
    - Connection pool sized for a full fan-out (Config.http_pool_maxsize)
    - Optional raw HTML caching for audit trail (best effort)

    There are no retries here. Whether a failed source is retried or
    dropped is decided by the caller.
    """

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or Config()
        self._session = requests.Session()
        adapter = HTTPAdapter(
            pool_connections=self.config.http_pool_maxsize,
            pool_maxsize=self.config.http_pool_maxsize,
        )
        self._session.mount("http://", adapter)
        self._session.mount("https://", adapter)
        self._ua = UserAgent(fallback="Mozilla/5.0")

        if self.config.cache_raw_html:
            self.config.raw_html_cache_abs_dir.mkdir(parents=True, exist_ok=True)

    def get_text(self, url: str, cache_key: str | None = None) -> str:
        """Fetch a URL and return its decoded body.

        Args:
            url: Absolute http(s) URL.
            cache_key: Optional key for raw HTML caching. Only used when
                       caching is enabled in the config.

        Returns:
            Response body as text.

        Raises:
            InvalidURL: The URL is malformed.
            NetworkFailure: Connection error or timeout.
            BadResponse: Non-2xx status or undecodable body.
        """
        self._validate_url(url)

        try:
            resp = self._session.get(
                url,
                headers={"User-Agent": self._ua.random},
                timeout=self.config.request_timeout,
            )
        except (
            requests.exceptions.InvalidURL,
            requests.exceptions.MissingSchema,
            requests.exceptions.InvalidSchema,
        ) as exc:
            raise InvalidURL(url, str(exc)) from exc
        except requests.RequestException as exc:
            logger.warning("Request failed for %s: %s", url, exc)
            raise NetworkFailure(url, str(exc)) from exc

        if not 200 <= resp.status_code < 300:
            raise BadResponse(
                url, f"HTTP {resp.status_code}", status_code=resp.status_code
            )

        text = self._decode(url, resp)

        if cache_key and self.config.cache_raw_html:
            try:
                self._cache_response(cache_key, text)
            except OSError as exc:
                logger.warning("Could not cache HTML for %s: %s", url, exc)

        return text

    @staticmethod
    def _validate_url(url: str) -> None:
        parsed = urlparse(url or "")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise InvalidURL(url, "Malformed URL")

    @staticmethod
    def _decode(url: str, resp: requests.Response) -> str:
        """Decode the body strictly with the declared charset, else UTF-8.

        requests reports ISO-8859-1 for any text/* response without a
        charset, so resp.encoding is not used here.
        """
        encoding = "utf-8"
        if "charset=" in resp.headers.get("Content-Type", "").lower():
            encoding = get_encoding_from_headers(resp.headers) or encoding
        try:
            return resp.content.decode(encoding)
        except (UnicodeDecodeError, LookupError) as exc:
            raise BadResponse(url, f"Undecodable body ({encoding})") from exc

    def _cache_response(self, cache_key: str, html: str) -> Path:
        """Save raw HTML to cache directory for audit.

        File naming: {cache_key}_{date}_{hash}.html
        """
        date_str = datetime.now().strftime("%Y%m%d")
        content_hash = hashlib.md5(html.encode()).hexdigest()[:8]
        safe_key = "".join(c if c.isalnum() or c in "-_" else "_" for c in cache_key)
        filename = f"{safe_key}_{date_str}_{content_hash}.html"
        path = self.config.raw_html_cache_abs_dir / filename
        path.write_text(html, encoding="utf-8")
        logger.debug("Cached HTML: %s", path)
        return path

    def close(self) -> None:
        """Close the underlying session."""
        self._session.close()

    def __enter__(self) -> HTTPClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
