"""
Card Buylist — Refresh Cycle

Fetches the price list and the image metadata concurrently, merges them,
and falls back to the bundled sample cards when the price list is empty.
"""

from __future__ import annotations

import asyncio

import structlog

from buylist.data.fallback import FALLBACK_CARD_DATA
from buylist.models.card import CardData, RefreshResult
from buylist.models.image import ImageRecord
from buylist.pipeline.card_source import CardDataSource
from buylist.pipeline.merge import merge_card_images
from buylist.scraper.fetcher import ImageDataFetcher, build_image_fetcher

logger = structlog.get_logger(__name__)


async def refresh_card_data(
    card_source: CardDataSource | None = None,
    fetcher: ImageDataFetcher | None = None,
) -> RefreshResult:
    """
    Run one full refresh.

    Returns:
        RefreshResult with merged data. used_fallback is True when the
        price list was empty and the sample cards were used instead.
    """
    card_source = card_source or CardDataSource()
    fetcher = fetcher or build_image_fetcher()

    card_data, images = await asyncio.gather(
        _fetch_cards(card_source),
        _fetch_images(fetcher),
    )

    used_fallback = not card_data
    if used_fallback:
        logger.warning("refresh_using_fallback_cards", source="refresh")
        card_data = FALLBACK_CARD_DATA

    merged = merge_card_images(card_data, images)
    logger.info(
        "refresh_complete",
        price_keys=len(merged),
        images=len(images),
        used_fallback=used_fallback,
        source="refresh",
    )
    return RefreshResult(
        success=not used_fallback,
        data=merged,
        image_count=len(images),
        used_fallback=used_fallback,
    )


async def _fetch_cards(card_source: CardDataSource) -> CardData:
    try:
        return await card_source.fetch_card_data()
    except Exception as e:
        logger.error("refresh_card_fetch_failed", error=str(e), source="refresh")
        return {}


async def _fetch_images(fetcher: ImageDataFetcher) -> list[ImageRecord]:
    try:
        return await fetcher.fetch_with_fallback()
    except Exception as e:
        logger.error("refresh_image_fetch_failed", error=str(e), source="refresh")
        return []
