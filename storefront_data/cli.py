"""
Operator CLI for the reviews/returns store.

Examples:
  storefront-data review-stats --handle blue-mug
  storefront-data reviews --handle blue-mug --limit 5
  storefront-data set-return-status 42 approved
"""
from __future__ import annotations
import argparse
import json
import logging
import sys
from typing import Any, List, Optional
import httpx
from pydantic import BaseModel
from .config import CFG
from .errors import PostgrestError
from .service import PostgresService

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def _known_level(log_level: str) -> str:
    level = (log_level or "").upper()
    return level if level in LOG_LEVELS else "INFO"


def setup_logging(log_level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, _known_level(log_level)),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def _jsonable(result: Any) -> Any:
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json")
    if isinstance(result, list):
        return [_jsonable(r) for r in result]
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="storefront-data",
        description="Query and maintain product reviews and return requests stored behind PostgREST.",
    )
    parser.add_argument("--url", default=CFG.postgrest_url, help=f"PostgREST base URL (default: {CFG.postgrest_url})")
    parser.add_argument("--log-level", default=_known_level(CFG.log_level), choices=LOG_LEVELS)
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("reviews", help="List reviews for a product, newest first")
    p.add_argument("--handle", required=True)
    p.add_argument("--limit", type=int, default=10)
    p.add_argument("--offset", type=int, default=0)

    p = sub.add_parser("review-stats", help="Rating count, average and histogram for a product")
    p.add_argument("--handle", required=True)

    p = sub.add_parser("return", help="Show one return with its items and images")
    p.add_argument("return_id")

    p = sub.add_parser("returns-by-order", help="List returns filed against an order")
    p.add_argument("order_id")

    p = sub.add_parser("set-return-status", help="Overwrite the status of a return")
    p.add_argument("return_id")
    p.add_argument("status")

    return parser


def run_command(service: PostgresService, args: argparse.Namespace) -> Any:
    if args.command == "reviews":
        return service.get_reviews(args.handle, args.limit, args.offset)
    if args.command == "review-stats":
        return service.get_review_stats(args.handle)
    if args.command == "return":
        return service.get_return(args.return_id)
    if args.command == "returns-by-order":
        return service.get_returns_by_order(args.order_id)
    if args.command == "set-return-status":
        return service.update_return_status(args.return_id, args.status)
    raise ValueError(f"unknown command: {args.command}")


def service_from_args(args: argparse.Namespace) -> PostgresService:
    return PostgresService(args.url, CFG.postgrest_api_key, timeout=CFG.request_timeout)


def main(argv: Optional[List[str]] = None, service: Optional[PostgresService] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    if service is None:
        service = service_from_args(args)

    with service:
        try:
            result = run_command(service, args)
        except (PostgrestError, httpx.HTTPError, ValueError) as e:
            logger.error("%s failed: %s", args.command, e)
            return 1

    print(json.dumps(_jsonable(result), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
