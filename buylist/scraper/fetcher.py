"""
Card Buylist — Image Data Fetcher (fallback chain)

Tries strategies in priority order and returns the first non-empty result.
Strategies run strictly one after another: an earlier strategy is always
preferred, and the spreadsheet strategies rely on sequential pacing.

The order is chosen by name (settings.IMAGE_STRATEGY_ORDER):
    static_first            Static -> JSON file -> HTML parse -> Sample
    spreadsheet_first       HTML parse -> JSON file -> Static -> Sample
    network_monitor_first   Network monitor -> HTML parse -> Static -> Sample
"""

from __future__ import annotations

from typing import Callable, Iterable

import structlog

from buylist.config import StrategyOrder, settings
from buylist.models.image import ImageRecord
from buylist.scraper import ExecutionContext, FetchStrategy, ImageFetchError
from buylist.scraper.network_monitor import NetworkMonitorStrategy
from buylist.scraper.sheet_html import HTMLParseStrategy
from buylist.scraper.static_sources import JSONFileStrategy, SampleDataStrategy, StaticDataStrategy

logger = structlog.get_logger(__name__)


class ImageDataFetcher:
    """
    Runs the image strategy fallback chain.

    Usage:
        fetcher = build_image_fetcher()
        images = await fetcher.fetch_with_fallback()
    """

    def __init__(self, strategies: Iterable[FetchStrategy] | None = None) -> None:
        self._strategies: list[FetchStrategy] = list(strategies or [])

    @property
    def strategies(self) -> list[FetchStrategy]:
        return list(self._strategies)

    def add_strategy(self, strategy: FetchStrategy) -> None:
        self._strategies.append(strategy)

    async def fetch_with_fallback(self) -> list[ImageRecord]:
        """
        First non-empty strategy result, or [] if every strategy came up empty.

        Never raises: strategy errors are logged and the next strategy runs.
        """
        for strategy in self._strategies:
            logger.info("image_fetch_strategy_attempt", strategy=strategy.name, source="image_fetcher")
            try:
                records = await strategy.fetch()
            except ImageFetchError as e:
                logger.error(
                    "image_fetch_strategy_failed",
                    strategy=strategy.name,
                    error=str(e),
                    source="image_fetcher",
                )
                continue
            except Exception as e:
                logger.error(
                    "image_fetch_strategy_crashed",
                    strategy=strategy.name,
                    error_type=type(e).__name__,
                    error=str(e),
                    source="image_fetcher",
                )
                continue

            if records:
                logger.info(
                    "image_fetch_strategy_succeeded",
                    strategy=strategy.name,
                    records=len(records),
                    source="image_fetcher",
                )
                return records

            logger.info("image_fetch_strategy_empty", strategy=strategy.name, source="image_fetcher")

        logger.error("image_fetch_all_strategies_failed", tried=len(self._strategies), source="image_fetcher")
        return []


# ---------------------------------------------------------------------------
# Named orderings
# ---------------------------------------------------------------------------

_StrategyBuilder = Callable[[ExecutionContext], FetchStrategy]

STRATEGY_ORDERS: dict[StrategyOrder, list[_StrategyBuilder]] = {
    StrategyOrder.STATIC_FIRST: [
        lambda ctx: StaticDataStrategy(),
        lambda ctx: JSONFileStrategy(ctx),
        lambda ctx: HTMLParseStrategy(),
        lambda ctx: SampleDataStrategy(),
    ],
    StrategyOrder.SPREADSHEET_FIRST: [
        lambda ctx: HTMLParseStrategy(),
        lambda ctx: JSONFileStrategy(ctx),
        lambda ctx: StaticDataStrategy(),
        lambda ctx: SampleDataStrategy(),
    ],
    StrategyOrder.NETWORK_MONITOR_FIRST: [
        lambda ctx: NetworkMonitorStrategy(ctx),
        lambda ctx: HTMLParseStrategy(),
        lambda ctx: StaticDataStrategy(),
        lambda ctx: SampleDataStrategy(),
    ],
}


def build_image_fetcher(
    order: StrategyOrder | None = None,
    context: ExecutionContext | None = None,
) -> ImageDataFetcher:
    """Build a fetcher for a named ordering (default: settings.IMAGE_STRATEGY_ORDER)."""
    order = order or settings.IMAGE_STRATEGY_ORDER
    context = context or ExecutionContext.from_settings()

    strategies = [build(context) for build in STRATEGY_ORDERS[order]]
    logger.debug(
        "image_fetcher_built",
        order=order.value,
        context=context.kind.value,
        strategies=[s.name for s in strategies],
        source="image_fetcher",
    )
    return ImageDataFetcher(strategies)
