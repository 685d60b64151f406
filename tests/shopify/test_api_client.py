"""Tests for src/shopify/api_client.py"""

from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import pytest
import requests

from src.common.errors import HttpError, RateLimitExceeded
from src.shopify.api_client import ShopifyAPIClient, normalize_shop


@pytest.fixture
def client():
    """Create a client with rate limiting disabled for fast tests."""
    c = ShopifyAPIClient(shop="test-store", access_token="shpat_test", base_delay=0)
    c.min_request_interval = 0  # Disable rate limiting in tests
    return c


class TestInit:
    def test_normalizes_shop_name(self):
        c = ShopifyAPIClient(shop="test-store", access_token="tok")
        assert c.shop == "test-store"

    def test_normalizes_full_domain(self):
        c = ShopifyAPIClient(shop="test-store.myshopify.com", access_token="tok")
        assert c.shop == "test-store"

    def test_normalizes_full_url(self):
        c = ShopifyAPIClient(shop="https://test-store.myshopify.com", access_token="tok")
        assert c.shop == "test-store"

    def test_normalize_shop_strips_path(self):
        assert normalize_shop("https://test-store.myshopify.com/admin") == "test-store"
        assert normalize_shop("test-store/") == "test-store"

    def test_base_url(self, client):
        assert client.base_url == "https://test-store.myshopify.com/admin/api/2024-01"
        assert client.store_url == "https://test-store.myshopify.com"

    def test_session_headers(self, client):
        assert client.session.headers["X-Shopify-Access-Token"] == "shpat_test"
        assert client.session.headers["Content-Type"] == "application/json"

    def test_from_settings(self):
        settings = {"shopify": {"api_version": "2024-04", "timeout": 5}, "retry": {"max_retries": 1}}
        c = ShopifyAPIClient.from_settings("test-store", "tok", settings)
        assert c.api_version == "2024-04"
        assert c.timeout == 5
        assert c.max_retries == 1
        assert c.base_url.endswith("/admin/api/2024-04")


class TestRestRequest:
    def test_successful_get(self, client, make_response):
        response = make_response(200, {"shop": {"name": "Test"}})

        with patch.object(client.session, "request", return_value=response) as request:
            result = client.rest_request("GET", "shop.json")

        assert result == {"shop": {"name": "Test"}}
        request.assert_called_once_with(
            "GET", "https://test-store.myshopify.com/admin/api/2024-01/shop.json", timeout=30
        )

    def test_successful_post_sends_json(self, client, make_response):
        response = make_response(201, {"smart_collection": {"id": 123}})

        with patch.object(client.session, "request", return_value=response) as request:
            result = client.rest_request("POST", "smart_collections.json", {"data": "test"})

        assert result == {"smart_collection": {"id": 123}}
        assert request.call_args.kwargs["json"] == {"data": "test"}

    def test_empty_body_returns_empty_dict(self, client, make_response):
        with patch.object(client.session, "request", return_value=make_response(200)):
            assert client.rest_request("DELETE", "products/1.json") == {}

    def test_raises_on_404(self, client, make_response):
        response = make_response(404, text="Not Found", reason="Not Found")

        with patch.object(client.session, "request", return_value=response):
            with pytest.raises(HttpError) as exc_info:
                client.rest_request("GET", "nonexistent.json")

        assert exc_info.value.status_code == 404

    def test_raises_on_422_with_body(self, client, make_response):
        response = make_response(422, text='{"errors":{"title":["taken"]}}', reason="Unprocessable Entity")

        with patch.object(client.session, "request", return_value=response):
            with pytest.raises(HttpError) as exc_info:
                client.rest_request("POST", "products.json", {"product": {}})

        assert exc_info.value.status_code == 422
        assert "taken" in exc_info.value.body

    def test_timeout_propagates(self, client):
        with patch.object(client.session, "request", side_effect=requests.exceptions.Timeout):
            with pytest.raises(requests.exceptions.Timeout):
                client.rest_request("GET", "shop.json")

    def test_rate_limit_retried_then_raised(self, client, make_response):
        client.max_retries = 2

        with patch.object(client.session, "request", return_value=make_response(429)) as request:
            with pytest.raises(RateLimitExceeded):
                client.rest_request("GET", "shop.json")

        assert request.call_count == 3

    def test_unsupported_method_raises(self, client):
        with pytest.raises(ValueError, match="Unsupported method"):
            client.rest_request("PATCH", "shop.json")

    def test_counts_requests(self, client, make_response):
        with patch.object(client.session, "request", return_value=make_response(200, {})):
            client.rest_request("GET", "shop.json")
            client.rest_request("GET", "shop.json")

        assert client.requests_made == 2


class TestTestConnection:
    def test_connected(self, client, make_response):
        with patch.object(client.session, "request", return_value=make_response(200, {"shop": {"name": "T"}})):
            assert client.test_connection() is True

    def test_bad_token(self, client, make_response):
        with patch.object(client.session, "request", return_value=make_response(401, reason="Unauthorized")):
            assert client.test_connection() is False

    def test_unexpected_body(self, client, make_response):
        with patch.object(client.session, "request", return_value=make_response(200, {"other": 1})):
            assert client.test_connection() is False


class FakeClock:
    """time.time/time.sleep pair where sleeping advances the clock."""

    def __init__(self, start=100.0):
        self.now = start
        self.sleeps = []

    def time(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


class TestRateLimit:
    def test_spacing_holds_across_threads(self, make_response):
        c = ShopifyAPIClient(shop="test-store", access_token="shpat_test")
        clock = FakeClock()

        with patch.object(c.session, "request", return_value=make_response(200, {})), \
                patch("src.shopify.api_client.time.time", clock.time), \
                patch("src.shopify.api_client.time.sleep", clock.sleep):
            with ThreadPoolExecutor(max_workers=4) as executor:
                list(executor.map(lambda _: c.rest_request("GET", "shop.json"), range(4)))

        assert c.requests_made == 4
        assert clock.sleeps == [0.5, 0.5, 0.5]
        assert clock.now == 101.5

    def test_no_wait_once_interval_has_passed(self, make_response):
        c = ShopifyAPIClient(shop="test-store", access_token="shpat_test")
        clock = FakeClock()

        with patch.object(c.session, "request", return_value=make_response(200, {})), \
                patch("src.shopify.api_client.time.time", clock.time), \
                patch("src.shopify.api_client.time.sleep", clock.sleep):
            c.rest_request("GET", "shop.json")
            clock.now += 1.0
            c.rest_request("GET", "shop.json")

        assert clock.sleeps == []
