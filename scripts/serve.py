#!/usr/bin/env python3
"""
Run the web API

Usage:
    python3 scripts/serve.py --port 8000
"""

import argparse
import os
import sys

import uvicorn
from dotenv import load_dotenv

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.common.log_config import setup_logging

load_dotenv()


def main():
    parser = argparse.ArgumentParser(description="Serve the scrape/upload API")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--verbose", action="store_true", help="Enable verbose (debug) logging")
    args = parser.parse_args()

    setup_logging(verbose=args.verbose)
    uvicorn.run("src.server.app:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
