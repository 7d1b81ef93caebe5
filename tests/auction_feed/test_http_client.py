"""Tests for the page fetcher and its configuration."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest
import requests
from requests.utils import get_encoding_from_headers

from src.auction_feed.common.config import Config
from src.auction_feed.common.errors import (
    BadResponse,
    FetchError,
    InvalidURL,
    NetworkFailure,
)
from src.auction_feed.common.http_client import HTTPClient
from src.auction_feed.listings.extractor import ListingExtractor

URL = "https://motobay.su/brands/2/models/1430"


def _response(
    status_code=200,
    content=b"<html></html>",
    content_type="text/html; charset=utf-8",
) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status_code
    resp._content = content
    resp.url = URL
    if content_type:
        resp.headers["Content-Type"] = content_type
    return resp


@pytest.fixture
def client(config):
    client = HTTPClient(config)
    client._session.get = MagicMock()
    yield client
    client.close()


class TestHTTPClient:
    def test_returns_decoded_text(self, client):
        client._session.get.return_value = _response(content="<p>Мотоцикл</p>".encode("utf-8"))
        assert client.get_text(URL) == "<p>Мотоцикл</p>"

    def test_timeout_and_user_agent_sent(self, client, config):
        client._session.get.return_value = _response()
        client.get_text(URL)

        _, kwargs = client._session.get.call_args
        assert kwargs["timeout"] == config.request_timeout
        assert kwargs["headers"]["User-Agent"]

    def test_server_encoding_respected(self, client):
        client._session.get.return_value = _response(
            content="Тенге".encode("cp1251"), content_type="text/html; charset=windows-1251"
        )
        assert client.get_text(URL) == "Тенге"

    def test_html_without_charset_is_utf8(self, client):
        html = '<tr data-id="1"><td><span class="make">Honda</span></td><td><span>1 200 000 р.</span></td></tr>'
        resp = _response(content=html.encode("utf-8"), content_type="text/html")
        # requests would fall back to Latin-1 for this header
        assert get_encoding_from_headers(resp.headers) == "ISO-8859-1"
        client._session.get.return_value = resp

        text = client.get_text(URL)

        assert text == html
        record = ListingExtractor(host="motobay.su").extract(text, 5.0)[0]
        assert record.price_local == 1200000
        assert record.price_converted == 6000000

    def test_missing_content_type_is_utf8(self, client):
        client._session.get.return_value = _response(content="¥".encode("utf-8"), content_type=None)
        assert client.get_text(URL) == "¥"

    def test_quoted_charset(self, client):
        client._session.get.return_value = _response(
            content="Тенге".encode("cp1251"), content_type='text/html; charset="windows-1251"'
        )
        assert client.get_text(URL) == "Тенге"

    @pytest.mark.parametrize("url", ["", "not a url", "ftp://motobay.su/x", "https://"])
    def test_malformed_url(self, client, url):
        with pytest.raises(InvalidURL):
            client.get_text(url)
        client._session.get.assert_not_called()

    def test_timeout_is_network_failure(self, client):
        client._session.get.side_effect = requests.Timeout("read timed out")
        with pytest.raises(NetworkFailure):
            client.get_text(URL)

    def test_connection_error_is_network_failure(self, client):
        client._session.get.side_effect = requests.ConnectionError("refused")
        with pytest.raises(NetworkFailure):
            client.get_text(URL)

    def test_requests_invalid_url_maps_to_invalid_url(self, client):
        client._session.get.side_effect = requests.exceptions.InvalidURL("bad host")
        with pytest.raises(InvalidURL):
            client.get_text(URL)

    def test_error_status_is_bad_response(self, client):
        client._session.get.return_value = _response(status_code=404)
        with pytest.raises(BadResponse) as exc_info:
            client.get_text(URL)
        assert exc_info.value.status_code == 404
        assert exc_info.value.url == URL

    def test_undecodable_body_is_bad_response(self, client):
        client._session.get.return_value = _response(
            content=b"\xff\xfe\xfa\xc3", content_type="text/html"
        )
        with pytest.raises(BadResponse):
            client.get_text(URL)

    def test_unknown_charset_is_bad_response(self, client):
        client._session.get.return_value = _response(content_type="text/html; charset=x-no-such-codec")
        with pytest.raises(BadResponse):
            client.get_text(URL)

    def test_all_errors_are_fetch_errors(self):
        for cls in (InvalidURL, NetworkFailure, BadResponse):
            assert issubclass(cls, FetchError)

    def test_no_retries(self, client):
        client._session.get.side_effect = requests.ConnectionError("refused")
        with pytest.raises(NetworkFailure):
            client.get_text(URL)
        assert client._session.get.call_count == 1

    def test_raw_html_cache(self, config, tmp_path):
        config.cache_raw_html = True
        config.raw_html_cache_dir = str(tmp_path / "raw")
        client = HTTPClient(config)
        client._session.get = MagicMock(return_value=_response(content=b"<html>lot</html>"))

        client.get_text(URL, cache_key="listing_brands_2_models_1430")
        client.close()

        cached = list((tmp_path / "raw").glob("listing_brands_2_models_1430_*.html"))
        assert len(cached) == 1
        assert cached[0].read_text(encoding="utf-8") == "<html>lot</html>"

    def test_cache_write_failure_still_returns_text(self, config, tmp_path, caplog):
        config.cache_raw_html = True
        config.raw_html_cache_dir = str(tmp_path / "raw")
        client = HTTPClient(config)
        client._session.get = MagicMock(return_value=_response(content=b"<html>lot</html>"))
        client._cache_response = MagicMock(side_effect=OSError("disk full"))

        with caplog.at_level(logging.WARNING):
            text = client.get_text(URL, cache_key="listing_brands_2_models_1430")
        client.close()

        assert text == "<html>lot</html>"
        assert "disk full" in caplog.text

    def test_connection_pool_sized_for_fan_out(self, config):
        config.http_pool_maxsize = 24
        client = HTTPClient(config)
        try:
            for prefix in ("https://motobay.su", "http://motobay.su"):
                adapter = client._session.get_adapter(prefix)
                assert adapter._pool_maxsize == 24
        finally:
            client.close()


class TestConfig:
    def test_defaults(self, config):
        assert config.base_url == "https://motobay.su"
        assert config.base_host == "motobay.su"
        assert config.request_timeout == 30
        assert config.fallback_rate == 5.0
        assert config.per_source_cap == 2
        assert config.currency_id == "R01335"

    @pytest.mark.parametrize("timeout", [5, 29, 61, 120])
    def test_timeout_must_be_bounded(self, config, timeout):
        with pytest.raises(ValueError):
            Config(request_timeout=timeout)

    def test_env_overrides(self, config, monkeypatch):
        monkeypatch.setenv("REQUEST_TIMEOUT", "45")
        monkeypatch.setenv("PER_SOURCE_CAP", "3")
        monkeypatch.setenv("RESOLVE_EXCHANGE_RATE", "false")
        monkeypatch.setenv("AUCTION_BASE_URL", "https://mirror.motobay.su/")

        cfg = Config()
        assert cfg.request_timeout == 45
        assert cfg.per_source_cap == 3
        assert cfg.resolve_exchange_rate is False
        assert cfg.base_url == "https://mirror.motobay.su"
        assert cfg.base_host == "mirror.motobay.su"

    def test_pool_size_env_override(self, config, monkeypatch):
        monkeypatch.setenv("HTTP_POOL_MAXSIZE", "40")
        assert Config().http_pool_maxsize == 40

    def test_rejects_empty_pool(self, config):
        with pytest.raises(ValueError):
            Config(http_pool_maxsize=0)

    def test_rejects_non_positive_fallback(self, config):
        with pytest.raises(ValueError):
            Config(fallback_rate=0)
