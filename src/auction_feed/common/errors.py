"""Fetch error taxonomy.

Every failure the page fetcher can raise is a ``FetchError``. The
aggregator treats any of them as "this source contributes zero records".
"""

from __future__ import annotations


class FetchError(Exception):
    """Base class for page fetch failures."""

    def __init__(self, url: str, message: str = "") -> None:
        self.url = url
        super().__init__(f"{message or self.__class__.__name__}: {url}")


class InvalidURL(FetchError):
    """The URL is malformed or not http(s)."""


class NetworkFailure(FetchError):
    """Connection error or request timeout."""


class BadResponse(FetchError):
    """Non-success status code or an undecodable body."""

    def __init__(self, url: str, message: str = "", status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(url, message)
