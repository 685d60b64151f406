"""Shared test fixtures."""

from unittest.mock import MagicMock

import pytest

from src.models import Collection, Product, ProductImage, ProductOption, ProductVariant


def _make_response(status_code=200, json_data=None, headers=None, text="", reason=""):
    response = MagicMock()
    response.status_code = status_code
    response.headers = headers or {}
    response.reason = reason
    response.text = text
    response.content = b"{}" if json_data is not None else b""
    response.json.return_value = json_data if json_data is not None else {}
    return response


@pytest.fixture
def make_response():
    """Factory for mocked requests.Response objects."""
    return _make_response


@pytest.fixture
def raw_product():
    """A storefront products.json record with two variants and two images."""
    return {
        "id": 1001,
        "title": "Red Shirt",
        "body_html": "<p>Soft <b>cotton</b> shirt</p>",
        "vendor": "TestBrand",
        "product_type": "Shirts",
        "handle": "red-shirt",
        "published_at": "2024-01-01T00:00:00+09:00",
        "tags": ["summer", "cotton"],
        "variants": [
            {
                "id": 5001,
                "title": "S",
                "price": "1500",
                "compare_at_price": "2000",
                "sku": "RS-S",
                "option1": "S",
                "option2": None,
                "option3": None,
                "barcode": "",
                "grams": 200,
                "weight": 0.2,
                "weight_unit": "kg",
                "taxable": True,
                "requires_shipping": True,
                "image_id": None,
                "position": 1,
            },
            {
                "id": 5002,
                "title": "M",
                "price": "1800",
                "compare_at_price": None,
                "sku": "RS-M",
                "option1": "M",
                "option2": None,
                "option3": None,
                "taxable": False,
                "requires_shipping": True,
                "image_id": 7002,
                "position": 2,
            },
        ],
        "options": [{"id": 1, "name": "Size", "position": 1, "values": ["S", "M"]}],
        "images": [
            {"id": 7001, "src": "https://cdn.example.com/red-s.jpg", "position": 1, "alt": None,
             "variant_ids": [5001]},
            {"id": 7002, "src": "https://cdn.example.com/red-m.jpg", "position": 2, "alt": "Medium",
             "variant_ids": [5002]},
        ],
    }


@pytest.fixture
def raw_collection():
    """A storefront collections.json record."""
    return {
        "id": 3001,
        "handle": "summer",
        "title": "Summer",
        "body_html": "<p>Summer picks</p>",
        "image": {"src": "https://cdn.example.com/summer.jpg"},
    }


@pytest.fixture
def sample_product():
    """A transformed product with variants, options and images."""
    return Product(
        id="product-1001",
        name="Red Shirt",
        description="Soft cotton shirt",
        image="https://cdn.example.com/red-s.jpg",
        price=10.05,
        variants=[
            ProductVariant(price="10.00", sku="RS-S", compare_at_price="13.40", option1="S"),
            ProductVariant(price="12.06", sku="RS-M", option1="M", taxable=False),
        ],
        options=[ProductOption(name="Size", values=["S", "M"], position=1)],
        images=[
            ProductImage(src="https://cdn.example.com/red-s.jpg", id=7001, position=1, variant_ids=[5001]),
            ProductImage(src="https://cdn.example.com/red-m.jpg", id=7002, position=2, variant_ids=[5002]),
        ],
        vendor="TestBrand",
        tags=["summer", "cotton"],
    )


@pytest.fixture
def simple_product():
    """A transformed product without variants/options/images."""
    return Product(
        id="product-2002",
        name="Blue Mug",
        description="A mug",
        image="https://cdn.example.com/mug.jpg",
        price=4.5,
    )


@pytest.fixture
def sample_collection(sample_product, simple_product):
    return Collection(
        id="collection-3001",
        name="Summer",
        description="Summer picks",
        image="https://cdn.example.com/summer.jpg",
        products=[sample_product, simple_product],
    )
