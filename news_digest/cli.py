from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from typing import List, Optional

from .config import WEBHOOK_MODES, load_settings
from .core import NewsAggregator
from .exceptions import NewsDigestError, PublishError


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="news-digest",
        description="Aggregate, rank and deliver a news digest to a webhook.",
    )
    p.add_argument("--dry-run", action="store_true", help="Format and print the digest without publishing")
    p.add_argument("--mode", choices=WEBHOOK_MODES, help="Webhook payload mode (overrides WEBHOOK_MODE)")
    p.add_argument("--translate", dest="translate", action="store_true", default=None, help="Enable translation")
    p.add_argument("--no-translate", dest="translate", action="store_false", help="Disable translation")
    p.add_argument("--max-items", type=int, help="Number of ranked items to keep (overrides MAX_NEWS_ITEMS)")
    p.add_argument("--log-level", help="Logging level (overrides LOG_LEVEL)")
    return p


def _print_message(message: str) -> None:
    print("\n=== FORMATTED MESSAGE ===")
    print(message)
    print("\n=== END OF MESSAGE ===")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.max_items is not None and args.max_items <= 0:
        parser.error(f"--max-items must be a positive integer, got {args.max_items}")

    try:
        settings = load_settings()
    except NewsDigestError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    overrides = {}
    if args.mode:
        overrides["webhook_mode"] = args.mode
    if args.translate is not None:
        overrides["translate"] = args.translate
    if args.max_items is not None:
        overrides["max_items"] = args.max_items
    if args.log_level:
        overrides["log_level"] = args.log_level.upper()
    if overrides:
        settings = dataclasses.replace(settings, **overrides)

    setup_logging(settings.log_level)
    logging.info("Starting news aggregation%s...", " with translation" if settings.translate else "")

    try:
        aggregator = NewsAggregator(settings)
        message = aggregator.run(publish=not args.dry_run)
    except PublishError as e:
        if e.digest:
            _print_message(e.digest)
        print(f"error: {e}", file=sys.stderr)
        return 1
    except NewsDigestError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    _print_message(message)
    logging.info("News aggregation completed successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
