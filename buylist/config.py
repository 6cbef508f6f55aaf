"""
Card Buylist — Configuration & Constants

Every spreadsheet id, sheet gid, timeout, delay and image-size default lives
here. No hardcoded values in the fetch/merge logic.

Usage:
    from buylist.config import settings
"""

from __future__ import annotations

from enum import Enum

from pydantic_settings import BaseSettings


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class StrategyOrder(str, Enum):
    """Named image-strategy orderings for ImageDataFetcher."""
    STATIC_FIRST = "static_first"
    SPREADSHEET_FIRST = "spreadsheet_first"
    NETWORK_MONITOR_FIRST = "network_monitor_first"


class ContextKind(str, Enum):
    """Where the pipeline is running."""
    SERVER = "server"   # no browser runtime, no static asset origin
    CLIENT = "client"   # browser runtime available


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """
    Central configuration for the buylist data pipeline.

    Loads from environment variables (or .env) with fallback defaults.
    """

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # -----------------------------------------------------------------------
    # Price list (CSV export)
    # -----------------------------------------------------------------------
    PRICE_SPREADSHEET_ID: str = "1XhLcAypoY18yQiUWpd0T-9fNpAd3dCf2NEPVRy3iW1E"
    PRICE_SHEET_NAME: str = "ALLData"

    # -----------------------------------------------------------------------
    # Image sheets (published HTML)
    # -----------------------------------------------------------------------
    IMAGE_SPREADSHEET_PUB_ID: str = (
        "2PACX-1vRHvYoYFzk-sIRNJL3qf-uyxGQg2BFv0dJ147oHC11UPY0Ob1ovEvz3j6GVc-tOQvGY6nIvev1QXF9o"
    )
    # gid -> image category (directory name for downloaded images)
    IMAGE_SHEET_GIDS: dict[str, str] = {
        "615803266": "ar",
        "831083568": "sr",
        "1856522830": "sar",
        "209255296": "ur",
        "696239385": "chr",
        "811385213": "rr",    # SM10a RR
        "978855825": "rr",    # SM12a RR
        "1429605223": "rr",   # SM9 RR
        "1002981119": "rr",   # SM11 RR
    }

    # -----------------------------------------------------------------------
    # Strategy selection & execution context
    # -----------------------------------------------------------------------
    IMAGE_STRATEGY_ORDER: StrategyOrder = StrategyOrder.STATIC_FIRST
    EXECUTION_CONTEXT: ContextKind = ContextKind.SERVER
    STATIC_BASE_URL: str = ""               # origin serving /data/imageData.json
    STATIC_JSON_PATH: str = "/data/imageData.json"

    # -----------------------------------------------------------------------
    # Image CDN & sizing
    # -----------------------------------------------------------------------
    CDN_HOSTS: list[str] = ["googleusercontent.com", "drive.google.com"]
    IMAGE_SIZE: str = "MEDIUM"              # preset name or pixel size
    DEFAULT_IMAGE_SIZE_PX: int = 400
    NO_IMAGE_URL: str = "/no-image.svg"

    # -----------------------------------------------------------------------
    # Timeouts & rate limiting
    # -----------------------------------------------------------------------
    HTTP_TIMEOUT_SECONDS: float = 30.0
    BROWSER_NAVIGATION_TIMEOUT_MS: int = 60000
    BROWSER_SETTLE_SECONDS: float = 5.0
    SHEET_REQUEST_DELAY_SECONDS: float = 1.0

    # -----------------------------------------------------------------------
    # Local storage
    # -----------------------------------------------------------------------
    IMAGE_DIR: str = "public/images"
    STATIC_DATA_PATH: str = "data/staticImageData.json"
    IMAGE_DOCUMENT_PATH: str = "public/data/imageData.json"

    LOG_LEVEL: str = "INFO"

    @property
    def price_csv_url(self) -> str:
        return (
            f"https://docs.google.com/spreadsheets/d/{self.PRICE_SPREADSHEET_ID}"
            f"/gviz/tq?tqx=out:csv&sheet={self.PRICE_SHEET_NAME}"
        )

    def image_sheet_url(self, gid: str) -> str:
        """Published-HTML URL of a single image sheet."""
        return (
            f"https://docs.google.com/spreadsheets/d/e/{self.IMAGE_SPREADSHEET_PUB_ID}"
            f"/pubhtml?gid={gid}&single=true"
        )


# Singleton instance
settings = Settings()
