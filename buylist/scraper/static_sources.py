"""
Card Buylist — Static Image Sources

Fallback strategies that do not scrape Google Sheets:
- StaticDataStrategy: bundled dataset, always succeeds
- JSONFileStrategy: pre-generated imageData.json served next to the client
- SampleDataStrategy: last-resort hardcoded records
"""

from __future__ import annotations

from typing import Iterable

import httpx
import structlog
from pydantic import ValidationError

from buylist.config import settings
from buylist.data.fallback import SAMPLE_IMAGE_DATA, STATIC_IMAGE_DATA
from buylist.models.image import ImageDataDocument, ImageRecord
from buylist.scraper import ExecutionContext, FetchStrategy

logger = structlog.get_logger(__name__)


class StaticDataStrategy(FetchStrategy):
    """Bundled image records. Fast and never fails."""

    name = "Static Data"

    def __init__(self, records: Iterable[ImageRecord] | None = None) -> None:
        self._records = list(records) if records is not None else list(STATIC_IMAGE_DATA)

    async def fetch(self) -> list[ImageRecord]:
        logger.info("static_data_loaded", records=len(self._records), source="static_data")
        return list(self._records)


class JSONFileStrategy(FetchStrategy):
    """
    Reads {images: [...], lastUpdated?} from the static asset origin.

    Only available in a client context with a static base URL. A 404,
    a transport error or a document without an `images` array all count
    as "unavailable" and return [].
    """

    name = "JSON File"

    def __init__(
        self,
        context: ExecutionContext,
        path: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self._context = context
        self._path = path or settings.STATIC_JSON_PATH
        self._timeout = timeout or settings.HTTP_TIMEOUT_SECONDS

    @property
    def url(self) -> str:
        base = (self._context.static_base_url or "").rstrip("/")
        return f"{base}/{self._path.lstrip('/')}"

    async def fetch(self) -> list[ImageRecord]:
        if not self._context.supports_static_assets:
            logger.info("json_file_skipped", reason="no static asset origin", source="json_file")
            return []

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(self.url)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                logger.error("json_file_not_found", url=self.url, source="json_file")
            else:
                logger.error(
                    "json_file_http_error",
                    url=self.url,
                    status_code=e.response.status_code,
                    source="json_file",
                )
            return []
        except httpx.HTTPError as e:
            logger.error("json_file_request_error", url=self.url, error=str(e), source="json_file")
            return []
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError on a non-UTF-8 body
            logger.error("json_file_malformed", url=self.url, error=str(e), source="json_file")
            return []

        if not isinstance(payload, dict) or not isinstance(payload.get("images"), list):
            logger.error("json_file_missing_images_array", url=self.url, source="json_file")
            return []

        try:
            document = ImageDataDocument.model_validate(payload)
        except ValidationError as e:
            logger.error("json_file_invalid_records", url=self.url, error=str(e), source="json_file")
            return []

        logger.info(
            "json_file_loaded",
            records=len(document.images),
            last_updated=document.last_updated or "unknown",
            source="json_file",
        )
        return document.images


class SampleDataStrategy(FetchStrategy):
    """Hardcoded four-record dataset."""

    name = "Sample Data"

    async def fetch(self) -> list[ImageRecord]:
        logger.info("sample_data_used", records=len(SAMPLE_IMAGE_DATA), source="sample_data")
        return list(SAMPLE_IMAGE_DATA)
