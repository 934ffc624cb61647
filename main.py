# main.py
"""
Steam Market Manager - command line price lookups.

Usage:
    python main.py item NAME [--app-id 730] [--currency USD]
    python main.py items NAME [NAME ...]
    python main.py all [--format json]

Examples:
    python main.py --app-id 730 item "Chroma 2 Case"
    python main.py --app-id 730 --cache-ttl 600 items "Chroma 2 Case" "Spectrum Case"
    BACKPACK_TF_API_KEY=... python main.py --app-id 440 all
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from core.config import Config
from core.constants import BACKPACK_TF_FORMATS
from core.logging_setup import setup_logging
from core.price_manager import create_price_manager


def _build_config(args: argparse.Namespace) -> Config:
    """Config file + environment, with command line flags on top."""
    overrides: Dict[str, Dict[str, Any]] = {}
    if args.app_id is not None:
        overrides.setdefault("market", {})["app_id"] = args.app_id
    if args.currency:
        overrides.setdefault("market", {})["currency"] = args.currency
    if args.keep_symbols:
        overrides.setdefault("market", {})["keep_currency_symbols"] = True
    if args.cache_ttl is not None:
        overrides.setdefault("cache", {})["ttl_seconds"] = args.cache_ttl
    if args.cache_file:
        overrides.setdefault("cache", {})["file"] = args.cache_file
    return Config(config_file=args.config, overrides=overrides)


def _parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Look up Steam Community Market item prices"
    )
    parser.add_argument("--config", type=Path, default=None, help="Config JSON file")
    parser.add_argument("--app-id", type=int, default=None, help="Steam application id")
    parser.add_argument("--currency", default=None, help="Wallet currency (EUR, USD, 3, ...)")
    parser.add_argument("--cache-ttl", type=int, default=None, help="Cache TTL seconds (0 = off)")
    parser.add_argument("--cache-file", default=None, help="Cache JSON file")
    parser.add_argument(
        "--keep-symbols",
        action="store_true",
        help="Return prices as Steam formats them",
    )
    parser.add_argument("--debug", action="store_true", help="Verbose logging")

    sub = parser.add_subparsers(dest="command", required=True)

    item = sub.add_parser("item", help="Price of one item")
    item.add_argument("name")

    items = sub.add_parser("items", help="Prices of several items (parallel)")
    items.add_argument("names", nargs="+")

    all_items = sub.add_parser("all", help="backpack.tf price list")
    all_items.add_argument("--format", default="json", choices=BACKPACK_TF_FORMATS)

    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    """Run one lookup and print it as JSON. Returns the exit code."""
    args = _parse_args(argv)
    setup_logging(debug=args.debug)
    logger = logging.getLogger(__name__)

    with create_price_manager(_build_config(args)) as manager:
        if args.command == "item":
            result = manager.get_item(args.name)
            output = result.map(lambda q: {"item": q.to_dict()})
        elif args.command == "items":
            result = manager.get_items(args.names)
            output = result.map(lambda found: {
                "items": [
                    {"name": name, "data": r.value.to_dict()} if r.is_ok()
                    else {"name": name, "error": str(r.error)}
                    for name, r in found.items()
                ]
            })
        else:
            output = manager.get_all_items(fmt=args.format)

    if output.is_err():
        logger.error(f"Lookup failed: {output.error}")
        print(json.dumps({"error": str(output.error)}, indent=2))
        return 1

    value = output.value
    print(value if isinstance(value, str) else json.dumps(value, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
