"""Re-run automatic moderation over the pending comment queue."""
from __future__ import annotations

import argparse
import json
import logging
import sys

from comment_guard.core.settings import settings
from comment_guard.db.session import SessionLocal
from comment_guard.services.moderation import ModerationService

logger = logging.getLogger(__name__)


def run(limit: int) -> dict[str, int]:
    """Process up to *limit* pending comments and return the counts."""
    db = SessionLocal()
    try:
        return ModerationService(db).reanalyze_batch(limit).to_dict()
    finally:
        db.close()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Re-analyze pending comments")
    parser.add_argument(
        "--limit",
        type=int,
        default=settings.reanalyze_default_limit,
        help="Maximum number of pending comments to process (oldest first).",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else settings.log_level.upper())

    if args.limit < 1:
        parser.error("--limit must be a positive integer")

    try:
        results = run(args.limit)
    except Exception as exc:
        logger.error("Re-analysis failed: %s", exc, exc_info=args.verbose)
        print(f"[reanalyze] ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    print(json.dumps(results, indent=2))


if __name__ == "__main__":
    main()
