#!/usr/bin/env python3
"""
Copy a catalog between Shopify stores

Scrapes the source store, stages the chosen products/collections and
uploads them to the destination store with price markup and name prefixing.

Usage:
    # Everything, doubled prices, first word of each title replaced
    python3 scripts/copy_catalog.py --source teststore --shop my-store --token shpat_xxx \\
        --all --multiplier 2 --prefix PREMIUM

    # Selected products and one collection
    python3 scripts/copy_catalog.py --source teststore --shop my-store \\
        --product "Red Shirt" --collection "Summer"

The token defaults to $SHOPIFY_ACCESS_TOKEN and the shop to $SHOPIFY_SHOP (.env is read).
"""

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.common.config_loader import load_settings
from src.common.errors import StoreCopyError
from src.common.log_config import setup_logging
from src.discovery import StoreCrawler
from src.pipeline import run_upload
from src.pipeline.orchestrator import scrape_error_message
from src.pipeline.report import staged_lines, upload_summary_lines
from src.session import CatalogSession
from src.shopify import ShopifyAPIClient

load_dotenv()
logger = logging.getLogger(__name__)


def stage_selection(session: CatalogSession, product_names, collection_names, take_all: bool) -> None:
    """Select catalog items by exact name (or everything) and move them to the ready set."""
    for product in session.products:
        if take_all or product.name in product_names:
            session.toggle_product(product.id)
    for collection in session.collections:
        if take_all or collection.name in collection_names:
            session.toggle_collection(collection.id)
    session.move_selected_to_ready()


def main():
    parser = argparse.ArgumentParser(
        description="Copy products and collections from one Shopify store to another"
    )
    parser.add_argument("--source", required=True, help="Store to scrape")
    parser.add_argument("--shop", default=os.environ.get("SHOPIFY_SHOP"),
                        help="Destination shop (default: $SHOPIFY_SHOP)")
    parser.add_argument("--token", default=os.environ.get("SHOPIFY_ACCESS_TOKEN"),
                        help="Destination Admin API token (default: $SHOPIFY_ACCESS_TOKEN)")
    parser.add_argument("--product", action="append", default=[], metavar="NAME",
                        help="Product to copy (repeatable)")
    parser.add_argument("--collection", action="append", default=[], metavar="NAME",
                        help="Collection to copy (repeatable)")
    parser.add_argument("--all", action="store_true", help="Copy every product and collection")
    parser.add_argument("--multiplier", type=float, default=1.0, help="Price multiplier (default: 1)")
    parser.add_argument("--prefix", default="", help="Keyword replacing the first word of each title")
    parser.add_argument("--description-prefix", default="", help="Keyword prepended to descriptions")
    parser.add_argument("--config", help="Settings YAML (default: config/settings.yaml)")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose (debug) logging")
    parser.add_argument("--quiet", action="store_true", help="Show only warnings and errors")

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    if not args.shop or not args.token:
        print("ERROR: Destination shop and token are required. Use --shop/--token or set "
              "SHOPIFY_SHOP/SHOPIFY_ACCESS_TOKEN.")
        sys.exit(1)

    settings = load_settings(args.config)
    session = CatalogSession()

    try:
        with StoreCrawler.from_settings(args.source, settings) as crawler:
            result = crawler.scrape()
    except (StoreCopyError, ValueError) as e:
        print(f"ERROR: {scrape_error_message(e)}")
        sys.exit(1)
    session.load_catalog(result.store_url, result.products, result.collections)

    stage_selection(session, set(args.product), set(args.collection), args.all)
    if not session.ready_products and not session.ready_collections:
        print("Nothing selected. Use --product, --collection or --all.")
        sys.exit(1)

    print("=" * 60)
    print("Shopify Catalog Copy")
    print("=" * 60)
    print(f"  Source:      {session.scrape_store_url}")
    print(f"  Destination: {args.shop}")
    print(f"  Products:    {len(session.ready_products)}")
    print(f"  Collections: {len(session.ready_collections)}")
    print(f"  Multiplier:  {args.multiplier}")
    print()
    for line in staged_lines(session.ready_products, session.ready_collections):
        print(f"    {line}")

    with ShopifyAPIClient.from_settings(args.shop, args.token, settings) as client:
        if not client.test_connection():
            print("ERROR: Could not connect to Shopify API. Check shop name and token.")
            sys.exit(1)

        upload = run_upload(
            client,
            session.ready_products,
            session.ready_collections,
            multiplier=args.multiplier,
            prefix_keyword=args.prefix,
            description_prefix=args.description_prefix,
            settings=settings,
        )
        entry = session.record_upload(client.store_url)

    print("\n" + "=" * 60)
    print("UPLOAD SUMMARY")
    print("=" * 60)
    for line in upload_summary_lines(upload):
        print(f"  {line}")
    print(f"  Recorded: {entry.id} at {entry.date_time}")
    print("=" * 60)

    sys.exit(1 if upload.partial_failure else 0)


if __name__ == "__main__":
    main()
