"""Common utilities shared across auction feed modules."""

from .config import Config
from .errors import BadResponse, FetchError, InvalidURL, NetworkFailure
from .http_client import HTTPClient

__all__ = [
    "BadResponse",
    "Config",
    "FetchError",
    "HTTPClient",
    "InvalidURL",
    "NetworkFailure",
]
