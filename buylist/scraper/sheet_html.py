"""
Card Buylist — Published-Sheet HTML Strategy

Fetches each image sheet's published-HTML export and reads the table with
BeautifulSoup. Column C (cell index 2) holds the title, column E (cell
index 4) holds the image: either an <img src> or an =IMAGE("…") formula.

Sheets are fetched one at a time with a fixed delay between requests. A
sheet that fails contributes zero records; the other sheets are kept.
"""

from __future__ import annotations

import re

import httpx
import structlog
from bs4 import BeautifulSoup, Tag

from buylist.config import settings
from buylist.models.image import ImageRecord
from buylist.scraper import FetchStrategy
from buylist.scraper.throttle import RequestThrottle
from buylist.utils.image_url import ImageSizeConfig, resolve_image_size, transform_url
from buylist.utils.title_parser import parse_title

logger = structlog.get_logger(__name__)

TITLE_CELL = 2
IMAGE_CELL = 4

# Header/label rows in the image sheets contain these words
_HEADER_LABELS = ("タイトル", "検索ワード", "抽出条件", "価格", "画像URL")

_FORMULA_URL = re.compile(r"IMAGE\(\s*\"([^\"]+)\"", re.IGNORECASE)
_BARE_URL = re.compile(r"https?://[^\s\"'<>)]+")


class HTMLParseStrategy(FetchStrategy):
    """
    Image records from the published spreadsheet HTML.

    Usage:
        records = await HTMLParseStrategy().fetch()
    """

    name = "HTML Parse"

    def __init__(
        self,
        sheet_gids: list[str] | None = None,
        size: ImageSizeConfig | None = None,
        throttle: RequestThrottle | None = None,
        timeout: float | None = None,
    ) -> None:
        self._sheet_gids = sheet_gids if sheet_gids is not None else list(settings.IMAGE_SHEET_GIDS)
        self._size = size or resolve_image_size()
        self._throttle = throttle or RequestThrottle()
        self._timeout = timeout or settings.HTTP_TIMEOUT_SECONDS

    async def fetch(self) -> list[ImageRecord]:
        records: list[ImageRecord] = []

        async with httpx.AsyncClient(
            timeout=self._timeout,
            follow_redirects=True,
            headers={"User-Agent": self._throttle.get_random_user_agent()},
        ) as client:
            for gid in self._sheet_gids:
                records.extend(await self._fetch_sheet(client, gid))
                await self._throttle.wait()

        logger.info(
            "html_parse_complete",
            sheets=len(self._sheet_gids),
            records=len(records),
            source="html_parse",
        )
        return records

    async def _fetch_sheet(self, client: httpx.AsyncClient, gid: str) -> list[ImageRecord]:
        url = settings.image_sheet_url(gid)
        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("html_parse_sheet_failed", gid=gid, error=str(e), source="html_parse")
            return []

        try:
            records = parse_sheet_html(response.text, self._size)
        except Exception as e:
            logger.error("html_parse_sheet_unparseable", gid=gid, error=str(e), source="html_parse")
            return []

        logger.info("html_parse_sheet_done", gid=gid, records=len(records), source="html_parse")
        return records


def parse_sheet_html(html: str, size: ImageSizeConfig | None = None) -> list[ImageRecord]:
    """Extract image records from one published-sheet HTML document."""
    soup = BeautifulSoup(html, "lxml")
    records: list[ImageRecord] = []

    for row in soup.find_all("tr"):
        cells = row.find_all("td")
        if len(cells) <= IMAGE_CELL:
            continue

        title = cells[TITLE_CELL].get_text(strip=True)
        image_url = _extract_image_url(cells[IMAGE_CELL])
        if not title or not image_url or not is_valid_title(title):
            continue

        character_name, model_number = parse_title(title)
        records.append(
            ImageRecord(
                title=title,
                image_url=transform_url(image_url, size),
                character_name=character_name,
                model_number=model_number,
            )
        )

    return records


def is_valid_title(title: str) -> bool:
    """False for header/label rows."""
    return not any(label in title for label in _HEADER_LABELS)


def _extract_image_url(cell: Tag) -> str:
    """<img src> if present, else a URL embedded in an =IMAGE() formula."""
    img = cell.find("img")
    if img is not None and img.get("src"):
        return str(img["src"])

    text = cell.get_text(" ", strip=True)
    formula = _FORMULA_URL.search(text)
    if formula:
        return formula.group(1)
    bare = _BARE_URL.search(text)
    return bare.group(0) if bare else ""
