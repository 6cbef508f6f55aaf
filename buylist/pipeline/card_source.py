"""
Card Buylist — Price List Source

Fetches the buy-price list as CSV from the spreadsheet's gviz export and
groups it into CardData (price string -> cards).

CSV layout:
    row 0        sheet title / metadata
    row 1        header: 商品タイトル, 商品型番, レアリティ, 買取価格
    row 2..      data: [0]=title, [1]=model number, [2]=rarity, [3]=price

Always fetched fresh (no-store). Any failure yields an empty CardData; the
caller decides what to fall back to.
"""

from __future__ import annotations

import csv
import io

import httpx
import structlog
from pydantic import ValidationError

from buylist.config import settings
from buylist.models.card import Card, CardData

logger = structlog.get_logger(__name__)

# Title row + header row. Validated against EXPECTED_HEADER on every parse.
CSV_HEADER_ROWS = 2
MIN_COLUMNS = 4
EXPECTED_HEADER = ("商品タイトル", "商品型番", "レアリティ", "買取価格")


class CardDataSource:
    """
    Price-list fetcher.

    Usage:
        card_data = await CardDataSource().fetch_card_data()
    """

    def __init__(self, csv_url: str | None = None, timeout: float | None = None) -> None:
        self._csv_url = csv_url or settings.price_csv_url
        self._timeout = timeout or settings.HTTP_TIMEOUT_SECONDS

    async def fetch_card_data(self) -> CardData:
        logger.info("price_csv_fetching", url=self._csv_url, source="card_source")
        try:
            async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=True) as client:
                response = await client.get(
                    self._csv_url,
                    headers={"Cache-Control": "no-store", "Pragma": "no-cache"},
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "price_csv_http_error",
                status_code=e.response.status_code,
                url=self._csv_url,
                source="card_source",
            )
            return {}
        except httpx.HTTPError as e:
            logger.error("price_csv_request_error", error=str(e), url=self._csv_url, source="card_source")
            return {}

        try:
            card_data = parse_card_csv(response.text)
        except (csv.Error, ValidationError) as e:
            logger.error("price_csv_parse_failed", error=str(e), source="card_source")
            return {}

        logger.info(
            "price_csv_parsed",
            length=len(response.text),
            price_keys=len(card_data),
            cards=sum(len(cards) for cards in card_data.values()),
            source="card_source",
        )
        return card_data


def parse_card_csv(csv_text: str) -> CardData:
    """
    Parse the price-list CSV into CardData.

    Rows with fewer than MIN_COLUMNS cells are skipped.
    """
    rows = list(csv.reader(io.StringIO(csv_text)))
    if len(rows) < CSV_HEADER_ROWS:
        return {}

    _validate_header(rows)

    card_data: CardData = {}
    skipped = 0
    for row in rows[CSV_HEADER_ROWS:]:
        if len(row) < MIN_COLUMNS:
            skipped += 1
            continue
        title, model_number, rarity, price = row[:MIN_COLUMNS]
        card = Card.from_row(title, model_number, rarity, price)
        card_data.setdefault(card.price, []).append(card)

    if skipped:
        logger.debug("price_csv_rows_skipped", count=skipped, source="card_source")
    return card_data


def _validate_header(rows: list[list[str]]) -> None:
    """Warn when the header labels are not on the expected row."""
    header = [cell.strip() for cell in rows[CSV_HEADER_ROWS - 1]]
    if all(label in header for label in EXPECTED_HEADER):
        return

    found_at = next(
        (
            i for i, row in enumerate(rows[:CSV_HEADER_ROWS + 1])
            if all(label in [c.strip() for c in row] for label in EXPECTED_HEADER)
        ),
        None,
    )
    logger.warning(
        "price_csv_header_mismatch",
        expected_row=CSV_HEADER_ROWS - 1,
        found_row=found_at,
        header=header[:MIN_COLUMNS],
        source="card_source",
    )
