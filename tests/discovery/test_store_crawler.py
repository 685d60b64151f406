"""Tests for src/discovery/store_crawler.py"""

from unittest.mock import call, patch
from urllib.parse import parse_qs, urlparse

import pytest
import requests

from src.common.errors import ScrapeError
from src.discovery import ScrapeResult, StoreCrawler, resolve_shop_name, shop_domain


def _items(prefix, count, start=0):
    return [{"id": start + i, "title": f"{prefix} {start + i}", "handle": f"{prefix}-{start + i}"}
            for i in range(count)]


class Router:
    """Routes session.request calls by path and page to canned responses."""

    def __init__(self, make_response, routes):
        self.make_response = make_response
        self.routes = routes
        self.calls = []

    def __call__(self, method, url, **kwargs):
        parsed = urlparse(url)
        page = int(parse_qs(parsed.query).get("page", ["1"])[0])
        self.calls.append((parsed.path, page))
        handler = self.routes.get(parsed.path)
        if handler is None:
            return self.make_response(404, reason="Not Found")
        result = handler(page)
        if isinstance(result, Exception):
            raise result
        if isinstance(result, int):
            return self.make_response(result, reason="Error")
        return self.make_response(200, result)


@pytest.fixture
def crawler():
    c = StoreCrawler("teststore", page_delay=0, base_delay=0)
    yield c
    c.close()


def _install(crawler, make_response, routes):
    router = Router(make_response, routes)
    crawler.session.request = router
    return router


class TestResolveShopName:
    @pytest.mark.parametrize("value,expected", [
        ("teststore.myshopify.com", "teststore"),
        ("https://teststore.myshopify.com/", "teststore"),
        ("http://teststore.myshopify.com", "teststore"),
        ("teststore", "teststore"),
        ("shop.example.com", "shop.example.com"),
    ])
    def test_resolves(self, value, expected):
        assert resolve_shop_name(value) == expected

    @pytest.mark.parametrize("value", ["", "https://", None, ".myshopify.com"])
    def test_unusable(self, value):
        assert resolve_shop_name(value) is None

    def test_shop_domain(self):
        assert shop_domain("teststore") == "teststore.myshopify.com"
        assert shop_domain("shop.example.com") == "shop.example.com"

    def test_store_url(self):
        assert ScrapeResult(shop="teststore").store_url == "https://teststore.myshopify.com"

    def test_invalid_identifier_rejected(self):
        with pytest.raises(ValueError):
            StoreCrawler("https://")


class TestPagination:
    def test_single_short_page(self, crawler, make_response):
        router = _install(crawler, make_response, {
            "/products.json": lambda page: {"products": _items("p", 3)},
        })

        assert len(crawler.fetch_products()) == 3
        assert router.calls == [("/products.json", 1)]

    def test_full_page_then_short_page(self, crawler, make_response):
        pages = {1: _items("p", 250), 2: _items("p", 1, start=250)}
        router = _install(crawler, make_response, {
            "/products.json": lambda page: {"products": pages[page]},
        })

        products = crawler.fetch_products()

        assert len(products) == 251
        assert products[-1]["id"] == 250
        assert router.calls == [("/products.json", 1), ("/products.json", 2)]

    def test_full_page_then_empty_page(self, crawler, make_response):
        pages = {1: _items("p", 250), 2: []}
        _install(crawler, make_response, {
            "/products.json": lambda page: {"products": pages[page]},
        })

        assert len(crawler.fetch_products()) == 250

    def test_request_url_shape(self, crawler, make_response):
        seen = []

        def request(method, url, **kwargs):
            seen.append((method, url, kwargs))
            return make_response(200, {"products": []})

        crawler.session.request = request
        crawler.fetch_products()

        method, url, kwargs = seen[0]
        assert method == "GET"
        assert url == "https://teststore.myshopify.com/products.json?limit=250&page=1"
        assert kwargs["timeout"] == 30

    def test_session_headers(self, crawler):
        assert crawler.session.headers["Accept"] == "application/json"
        assert "User-Agent" in crawler.session.headers


class TestFailures:
    def test_product_failure_is_fatal(self, crawler, make_response):
        _install(crawler, make_response, {"/products.json": lambda page: 500})

        with pytest.raises(ScrapeError, match="Error fetching products"):
            crawler.fetch_products()

    def test_product_transport_failure_is_fatal(self, crawler, make_response):
        _install(crawler, make_response, {
            "/products.json": lambda page: requests.exceptions.ConnectionError("refused"),
        })

        with pytest.raises(ScrapeError) as exc_info:
            crawler.fetch_products()
        assert isinstance(exc_info.value.__cause__, requests.exceptions.ConnectionError)

    def test_collections_403_gives_empty_list(self, crawler, make_response):
        _install(crawler, make_response, {"/collections.json": lambda page: 403})

        assert crawler.fetch_collections() == []

    def test_collections_rate_limited_keeps_collected(self, crawler, make_response):
        crawler.max_retries = 1
        pages = {1: {"collections": _items("c", 250)}, 2: 429}
        router = _install(crawler, make_response, {"/collections.json": lambda page: pages[page]})

        collections = crawler.fetch_collections()

        assert len(collections) == 250
        assert router.calls.count(("/collections.json", 2)) == 2

    def test_collections_other_error_is_fatal(self, crawler, make_response):
        _install(crawler, make_response, {"/collections.json": lambda page: 500})

        with pytest.raises(ScrapeError, match="Error fetching collections"):
            crawler.fetch_collections()

    def test_collection_products_failure_returns_partial(self, crawler, make_response):
        pages = {1: {"products": _items("p", 250)}, 2: 500}
        _install(crawler, make_response, {
            "/collections/summer/products.json": lambda page: pages[page],
        })

        assert len(crawler.fetch_collection_products("summer")) == 250

    def test_collection_products_failure_on_first_page(self, crawler, make_response):
        _install(crawler, make_response, {
            "/collections/summer/products.json": lambda page: requests.exceptions.Timeout("slow"),
        })

        assert crawler.fetch_collection_products("summer") == []

    @pytest.mark.parametrize("body", [["not", "a", "dict"], "oops"])
    def test_collection_products_non_object_page_returns_partial(self, crawler, make_response, body):
        pages = {1: {"products": _items("p", 250)}, 2: body}
        _install(crawler, make_response, {
            "/collections/summer/products.json": lambda page: pages[page],
        })

        assert len(crawler.fetch_collection_products("summer")) == 250

    def test_non_object_collection_page_does_not_fail_scrape(self, crawler, make_response,
                                                             raw_product, raw_collection):
        _install(crawler, make_response, {
            "/products.json": lambda page: {"products": [raw_product]},
            "/collections.json": lambda page: {"collections": [raw_collection]},
            "/collections/summer/products.json": lambda page: ["not", "a", "dict"],
        })

        result = crawler.scrape()

        assert len(result.products) == 1
        assert result.collections[0].products == []

    def test_non_object_product_page_is_fatal(self, crawler, make_response):
        _install(crawler, make_response, {"/products.json": lambda page: ["not", "a", "dict"]})

        with pytest.raises(ScrapeError, match="Unexpected JSON"):
            crawler.fetch_products()


class TestPoliteness:
    def test_sleeps_between_full_pages_only(self, make_response):
        pages = {1: _items("p", 250), 2: []}
        with StoreCrawler("teststore") as crawler:
            _install(crawler, make_response, {
                "/products.json": lambda page: {"products": pages[page]},
            })
            with patch("src.discovery.store_crawler.time.sleep") as sleep:
                crawler.fetch_products()

        assert sleep.call_args_list == [call(1.0)]

    def test_no_sleep_after_short_page(self, make_response):
        with StoreCrawler("teststore") as crawler:
            _install(crawler, make_response, {
                "/products.json": lambda page: {"products": _items("p", 3)},
            })
            with patch("src.discovery.store_crawler.time.sleep") as sleep:
                crawler.fetch_products()

        sleep.assert_not_called()


class TestScrape:
    def test_full_scrape(self, crawler, make_response, raw_product, raw_collection):
        winter = dict(raw_collection, id=3002, handle="winter", title="Winter")
        _install(crawler, make_response, {
            "/products.json": lambda page: {"products": [raw_product]},
            "/collections.json": lambda page: {"collections": [raw_collection, winter]},
            "/collections/summer/products.json": lambda page: {"products": [raw_product]},
            "/collections/winter/products.json": lambda page: 500,
        })

        result = crawler.scrape()

        assert result.shop == "teststore"
        assert [p.id for p in result.products] == ["product-1001"]
        assert [c.name for c in result.collections] == ["Summer", "Winter"]
        assert [p.id for p in result.collections[0].products] == ["product-1001"]
        assert result.collections[1].products == []

    def test_scrape_without_collection_access(self, crawler, make_response, raw_product):
        _install(crawler, make_response, {
            "/products.json": lambda page: {"products": [raw_product]},
            "/collections.json": lambda page: 403,
        })

        result = crawler.scrape()

        assert len(result.products) == 1
        assert result.collections == []

    def test_scrape_fails_when_products_fail(self, crawler, make_response):
        _install(crawler, make_response, {
            "/products.json": lambda page: 500,
            "/collections.json": lambda page: {"collections": []},
        })

        with pytest.raises(ScrapeError):
            crawler.scrape()

    def test_from_settings(self):
        settings = {"scraper": {"page_size": 50, "page_delay": 0, "max_workers": 2},
                    "retry": {"max_retries": 1}, "currency": {"rate": 0.01}}
        with StoreCrawler.from_settings("teststore.myshopify.com", settings) as c:
            assert c.page_size == 50
            assert c.max_workers == 2
            assert c.max_retries == 1
            assert c.transformer.rate == 0.01
