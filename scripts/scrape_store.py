#!/usr/bin/env python3
"""
Scrape a Shopify store

Crawls a source store's public products.json / collections.json and writes
the normalized catalog as JSON (same shape as POST /api/scrape).

Requirements:
    pip install -e .

Usage:
    python3 scripts/scrape_store.py --store teststore
    python3 scripts/scrape_store.py --store https://teststore.myshopify.com --output catalog.json
"""

import argparse
import json
import logging
import os
import sys

from dotenv import load_dotenv

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.common.config_loader import load_settings
from src.common.log_config import setup_logging
from src.pipeline import scrape_store

load_dotenv()
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="Scrape a Shopify store's public catalog"
    )
    parser.add_argument(
        "--store", "-s",
        required=True,
        help="Source store (e.g., 'teststore' or 'teststore.myshopify.com')"
    )
    parser.add_argument(
        "--output", "-o",
        help="Write JSON here instead of stdout"
    )
    parser.add_argument(
        "--config",
        help="Settings YAML (default: config/settings.yaml)"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose (debug) logging")
    parser.add_argument("--quiet", action="store_true", help="Show only warnings and errors")

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    response = scrape_store(args.store, settings=load_settings(args.config))
    if not response.body.get("success"):
        print(f"ERROR: {response.body.get('error')}")
        sys.exit(1)

    output = json.dumps(response.body, indent=2, ensure_ascii=False)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output)
        print(f"Saved {len(response.body['products'])} products and "
              f"{len(response.body['collections'])} collections to {args.output}")
    else:
        print(output)


if __name__ == "__main__":
    main()
