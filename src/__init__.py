"""
Shopify Store Copy Tool

Copies product catalogs between Shopify stores: scrapes a source store's
public JSON, then re-creates curated products and collections on a
destination store through the Admin API.

Modules:
    models      - Data models (Product, Collection, UploadHistory)
    common      - Shared utilities (fetch with backoff, currency, config, logging)
    discovery   - Source store crawling (products.json / collections.json)
    extraction  - Storefront JSON -> catalog models
    shopify     - Admin API client, product/collection publishing
    session     - In-memory curation state
    pipeline    - Scrape and upload entry points
    server      - FastAPI app
"""
