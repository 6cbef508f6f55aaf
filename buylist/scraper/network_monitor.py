"""
Card Buylist — Network Monitor Strategy

Opens each published image sheet in headless Chromium (Playwright), watches
the completed responses for images served from the Google image CDN, and
downloads every unique image into a content-addressed file:

    <IMAGE_DIR>/cards/<category>/<md5(url)><ext>

Needs a browser runtime: in a server context the strategy returns [] so the
fetcher falls through. The browser is launched per fetch() call and is
always closed before returning.
"""

from __future__ import annotations

import asyncio
import hashlib
from pathlib import Path
from typing import Any

import httpx
import structlog
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from buylist.config import settings
from buylist.models.image import ImageRecord
from buylist.scraper import ExecutionContext, FetchStrategy, ImageFetchError
from buylist.scraper.throttle import RequestThrottle
from buylist.utils.image_url import is_cdn_url, strip_size_suffix

logger = structlog.get_logger(__name__)

_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


class NetworkMonitorStrategy(FetchStrategy):
    """
    Capture sheet images from browser network traffic.

    Usage:
        strategy = NetworkMonitorStrategy(ExecutionContext(kind=ContextKind.CLIENT))
        records = await strategy.fetch()
    """

    name = "Network Monitor"

    def __init__(
        self,
        context: ExecutionContext,
        sheets: dict[str, str] | None = None,
        image_dir: str | Path | None = None,
        throttle: RequestThrottle | None = None,
        settle_seconds: float | None = None,
    ) -> None:
        self._context = context
        self._sheets = sheets if sheets is not None else dict(settings.IMAGE_SHEET_GIDS)
        self._image_dir = Path(image_dir or settings.IMAGE_DIR)
        self._throttle = throttle or RequestThrottle()
        self._settle_seconds = (
            settings.BROWSER_SETTLE_SECONDS if settle_seconds is None else settle_seconds
        )

    async def fetch(self) -> list[ImageRecord]:
        if not self._context.supports_browser:
            logger.info("network_monitor_skipped", reason="no browser runtime", source="network_monitor")
            return []

        # Driver startup (async_playwright entry) fails with PlaywrightError or
        # OSError when the playwright runtime is missing
        try:
            async with async_playwright() as pw:
                records = await self._capture(pw)
        except (PlaywrightError, OSError) as e:
            raise ImageFetchError(self.name, f"playwright unavailable: {e}") from e

        logger.info("network_monitor_complete", records=len(records), source="network_monitor")
        return records

    async def _capture(self, pw: Any) -> list[ImageRecord]:
        """Launch Chromium, walk every sheet, always close the browser."""
        try:
            browser = await pw.chromium.launch(
                headless=True,
                args=["--no-sandbox", "--disable-setuid-sandbox"],
            )
        except PlaywrightError as e:
            raise ImageFetchError(self.name, f"browser launch failed: {e}") from e

        records: list[ImageRecord] = []
        try:
            async with httpx.AsyncClient(
                timeout=settings.HTTP_TIMEOUT_SECONDS,
                headers={"User-Agent": self._throttle.get_random_user_agent()},
            ) as client:
                for gid, category in self._sheets.items():
                    try:
                        records.extend(await self._fetch_sheet(browser, client, gid, category))
                    except (PlaywrightError, httpx.HTTPError, OSError) as e:
                        logger.error(
                            "network_monitor_sheet_failed",
                            gid=gid,
                            category=category,
                            error=str(e),
                            source="network_monitor",
                        )
                    await self._throttle.wait()
        finally:
            await browser.close()
        return records

    async def _fetch_sheet(
        self,
        browser: Any,
        client: httpx.AsyncClient,
        gid: str,
        category: str,
    ) -> list[ImageRecord]:
        """Navigate one sheet, collect CDN image URLs, then download them."""
        image_urls: dict[str, str] = {}

        def on_response(response: Any) -> None:
            if is_cdn_image_response(response.url, response.status, response.headers):
                image_urls.setdefault(strip_size_suffix(response.url), category)

        page = await browser.new_page()
        try:
            page.on("response", on_response)
            await page.goto(
                settings.image_sheet_url(gid),
                wait_until="networkidle",
                timeout=settings.BROWSER_NAVIGATION_TIMEOUT_MS,
            )
            if self._settle_seconds > 0:
                await asyncio.sleep(self._settle_seconds)
        finally:
            await page.close()

        logger.info(
            "network_monitor_images_detected",
            gid=gid,
            category=category,
            count=len(image_urls),
            source="network_monitor",
        )

        records: list[ImageRecord] = []
        for url, cat in image_urls.items():
            record = await download_image(client, url, cat, self._image_dir)
            if record is not None:
                records.append(record)
        return records


def is_cdn_image_response(url: str, status: int, headers: dict[str, str]) -> bool:
    """200 image/* response from the image CDN."""
    content_type = headers.get("content-type", "")
    return status == 200 and content_type.startswith("image/") and is_cdn_url(url)


def image_extension(content_type: str) -> str:
    return _EXTENSIONS.get(content_type.split(";")[0].strip().lower(), ".jpg")


async def download_image(
    client: httpx.AsyncClient,
    url: str,
    category: str,
    image_dir: Path,
) -> ImageRecord | None:
    """
    Download one image into its content-addressed path.

    The file name is the md5 of the URL, so repeated downloads of the same
    URL land on the same file and an existing file is not rewritten.

    Returns:
        ImageRecord pointing at the /images/... path, or None on failure.
    """
    try:
        response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error("network_monitor_download_failed", url=url, error=str(e), source="network_monitor")
        return None

    url_hash = hashlib.md5(url.encode("utf-8")).hexdigest()
    filename = f"{url_hash}{image_extension(response.headers.get('content-type', 'image/jpeg'))}"
    category_dir = image_dir / "cards" / category
    file_path = category_dir / filename

    try:
        category_dir.mkdir(parents=True, exist_ok=True)
        if not file_path.exists():
            file_path.write_bytes(response.content)
    except OSError as e:
        logger.error("network_monitor_write_failed", path=str(file_path), error=str(e), source="network_monitor")
        return None

    logger.debug("network_monitor_image_saved", path=str(file_path), source="network_monitor")
    return ImageRecord(
        title=f"{category.upper()} Card {url_hash[:8]}",
        image_url=f"/images/cards/{category}/{filename}",
        character_name="",
        model_number="",
    )
