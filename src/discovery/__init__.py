"""
Source store discovery.

Modules:
    store_crawler - Paginated crawl of a storefront's public JSON endpoints
"""

from .store_crawler import ScrapeResult, StoreCrawler, resolve_shop_name, shop_domain

__all__ = ['ScrapeResult', 'StoreCrawler', 'resolve_shop_name', 'shop_domain']
