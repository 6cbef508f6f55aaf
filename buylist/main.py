"""
Card Buylist — Command-line Entrypoint

Configures structlog and runs one pipeline operation, printing its JSON
result to stdout. Logs go to stderr.

Run via:
    python -m buylist.main refresh
    python -m buylist.main refresh --order spreadsheet_first
    python -m buylist.main fetch-images
    python -m buylist.main update-static-data --export
    python -m buylist.main static-status
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

import structlog

from buylist import __version__
from buylist.config import ContextKind, StrategyOrder, settings
from buylist.pipeline.refresh import refresh_card_data
from buylist.pipeline.static_store import (
    StaticDataUpdateError,
    export_image_document,
    load_static_data,
    static_data_status,
    update_static_data,
)
from buylist.scraper import ExecutionContext, ImageFetchError
from buylist.scraper.fetcher import build_image_fetcher
from buylist.scraper.network_monitor import NetworkMonitorStrategy


# ---------------------------------------------------------------------------
# Structlog Configuration
# ---------------------------------------------------------------------------


def _configure_logging(log_level: str = "INFO") -> None:
    """
    Set up structured logging with JSON output on stderr.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


async def _cmd_refresh(args: argparse.Namespace) -> tuple[int, Any]:
    context = _context_from_args(args)
    fetcher = build_image_fetcher(order=args.order, context=context)
    result = await refresh_card_data(fetcher=fetcher)
    return 0, result.model_dump(mode="json", by_alias=True)


async def _cmd_fetch_images(args: argparse.Namespace) -> tuple[int, Any]:
    # This command exists to run the browser, so the context is forced to client
    strategy = NetworkMonitorStrategy(ExecutionContext(kind=ContextKind.CLIENT))
    try:
        images = await strategy.fetch()
    except ImageFetchError as e:
        return 1, {"success": False, "message": str(e), "count": 0}

    if not images:
        return 1, {"success": False, "message": "No images were fetched", "count": 0}
    return 0, {
        "success": True,
        "message": f"Successfully fetched and saved {len(images)} images",
        "count": len(images),
        "images": [image.model_dump(by_alias=True) for image in images],
    }


async def _cmd_update_static_data(args: argparse.Namespace) -> tuple[int, Any]:
    try:
        report = await update_static_data(path=args.path)
    except StaticDataUpdateError as e:
        return 1, {"success": False, "error": str(e)}

    payload: dict[str, Any] = {"success": True, "report": report.model_dump(by_alias=True)}
    if args.export:
        payload["exported"] = str(export_image_document(load_static_data(args.path)))
    return 0, payload


async def _cmd_static_status(args: argparse.Namespace) -> tuple[int, Any]:
    return 0, static_data_status(args.path)


_COMMANDS = {
    "refresh": _cmd_refresh,
    "fetch-images": _cmd_fetch_images,
    "update-static-data": _cmd_update_static_data,
    "static-status": _cmd_static_status,
}


def _context_from_args(args: argparse.Namespace) -> ExecutionContext:
    context = ExecutionContext.from_settings()
    if args.context is not None:
        context = context.model_copy(update={"kind": args.context})
    return context


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="buylist",
        description="Card buylist price/image data pipeline.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        help="DEBUG | INFO | WARNING | ERROR (default: LOG_LEVEL setting).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    refresh = sub.add_parser("refresh", help="Fetch price list + images and print merged card data.")
    refresh.add_argument(
        "--order",
        type=StrategyOrder,
        choices=list(StrategyOrder),
        default=None,
        help="Image strategy ordering (default: IMAGE_STRATEGY_ORDER setting).",
    )
    refresh.add_argument(
        "--context",
        type=ContextKind,
        choices=list(ContextKind),
        default=None,
        help="Execution context (default: EXECUTION_CONTEXT setting).",
    )

    sub.add_parser("fetch-images", help="Capture and save sheet images with a headless browser.")

    update = sub.add_parser("update-static-data", help="Sync the static snapshot with the price list.")
    update.add_argument("--path", default=None, help="Snapshot path (default: STATIC_DATA_PATH).")
    update.add_argument("--export", action="store_true", help="Also write the imageData.json document.")

    status = sub.add_parser("static-status", help="Show static snapshot counts.")
    status.add_argument("--path", default=None, help="Snapshot path (default: STATIC_DATA_PATH).")

    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    logger = structlog.get_logger(__name__)
    logger.info("buylist_command_start", command=args.command, version=__version__)

    exit_code, payload = await _COMMANDS[args.command](args)
    print(json.dumps(payload, ensure_ascii=False, indent=2))

    logger.info("buylist_command_done", command=args.command, exit_code=exit_code)
    return exit_code


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    _configure_logging(args.log_level)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
