"""
Card Buylist — Image URL Transformer & Size Presets

Google's image CDN encodes the requested size as a URL suffix:
    https://lh3.googleusercontent.com/<id>=s100-w100-h20

transform_url() strips any existing suffix and appends the requested one,
so transforming an already-transformed URL is a no-op. Non-CDN URLs are
returned unchanged.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import NamedTuple
from urllib.parse import urlparse

import structlog

from buylist.config import settings

logger = structlog.get_logger(__name__)

_SIZE_SUFFIX = re.compile(r"=[swh]\d+(?:-[swh]\d+)*$")


class ImageSizeConfig(NamedTuple):
    """Requested size: square `size` (s), or `width` (w) / `height` (h)."""
    size: int | None = None
    width: int | None = None
    height: int | None = None


class ImageSizePreset(str, Enum):
    THUMBNAIL = "THUMBNAIL"
    SMALL = "SMALL"
    MEDIUM = "MEDIUM"
    LARGE = "LARGE"
    EXTRA_LARGE = "EXTRA_LARGE"
    FULL = "FULL"
    ORIGINAL = "ORIGINAL"


# ---------------------------------------------------------------------------
# Preset tables
# ---------------------------------------------------------------------------

IMAGE_SIZE_PRESETS: dict[ImageSizePreset, ImageSizeConfig] = {
    ImageSizePreset.THUMBNAIL: ImageSizeConfig(size=150),
    ImageSizePreset.SMALL: ImageSizeConfig(size=250),
    ImageSizePreset.MEDIUM: ImageSizeConfig(size=400),     # default
    ImageSizePreset.LARGE: ImageSizeConfig(size=600),
    ImageSizePreset.EXTRA_LARGE: ImageSizeConfig(size=800),
    ImageSizePreset.FULL: ImageSizeConfig(size=1200),
    ImageSizePreset.ORIGINAL: ImageSizeConfig(size=0),     # =s0 is the uploaded resolution
}

IMAGE_QUALITY_SETTINGS: dict[str, dict[str, int]] = {
    "LOW": {"size": 200, "quality": 70},
    "NORMAL": {"size": 400, "quality": 85},
    "HIGH": {"size": 800, "quality": 95},
}

DEVICE_RECOMMENDED_SIZES: dict[str, ImageSizeConfig] = {
    "MOBILE": IMAGE_SIZE_PRESETS[ImageSizePreset.SMALL],
    "TABLET": IMAGE_SIZE_PRESETS[ImageSizePreset.MEDIUM],
    "DESKTOP": IMAGE_SIZE_PRESETS[ImageSizePreset.LARGE],
    "ULTRA_HD": IMAGE_SIZE_PRESETS[ImageSizePreset.FULL],
}


def resolve_image_size(value: str | None = None) -> ImageSizeConfig:
    """
    Resolve a preset name or pixel size to an ImageSizeConfig.

    Reads settings.IMAGE_SIZE when no value is given. Unknown names and
    non-positive numbers fall back to MEDIUM.
    """
    raw = (value if value is not None else settings.IMAGE_SIZE).strip()
    if not raw:
        return IMAGE_SIZE_PRESETS[ImageSizePreset.MEDIUM]

    try:
        return IMAGE_SIZE_PRESETS[ImageSizePreset(raw.upper())]
    except ValueError:
        pass

    try:
        size = int(raw)
    except ValueError:
        size = 0
    if size > 0:
        return ImageSizeConfig(size=size)

    logger.warning("image_size_invalid", value=raw, fallback="MEDIUM", source="image_url")
    return IMAGE_SIZE_PRESETS[ImageSizePreset.MEDIUM]


def is_cdn_url(url: str) -> bool:
    """True when the URL host is (a subdomain of) a configured CDN host."""
    try:
        host = (urlparse(url).hostname or "").lower()
    except ValueError:
        # Malformed netloc, e.g. an unclosed "[" in a scraped src
        return False
    return any(host == cdn or host.endswith(f".{cdn}") for cdn in settings.CDN_HOSTS)


def strip_size_suffix(url: str) -> str:
    """Remove a trailing =s…/=w…/=h… size directive (chained forms included)."""
    return _SIZE_SUFFIX.sub("", url)


def transform_url(url: str, size: ImageSizeConfig | None = None) -> str:
    """
    Rewrite a CDN image URL to request a different resolution.

    Args:
        url: Original image URL.
        size: Requested size. None resolves settings.IMAGE_SIZE.

    Returns:
        The rewritten URL, or `url` unchanged if it is not a CDN URL.
    """
    if not url or not is_cdn_url(url):
        return url

    if size is None:
        size = resolve_image_size()

    base = strip_size_suffix(url)

    if size.size is not None:
        return f"{base}=s{size.size}"

    if size.width or size.height:
        parts = []
        if size.width:
            parts.append(f"w{size.width}")
        if size.height:
            parts.append(f"h{size.height}")
        return f"{base}={'-'.join(parts)}"

    return f"{base}=s{settings.DEFAULT_IMAGE_SIZE_PX}"


def transform_urls(urls: list[str], size: ImageSizeConfig | None = None) -> list[str]:
    """Bulk transform_url()."""
    return [transform_url(url, size) for url in urls]
