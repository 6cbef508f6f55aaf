"""
Card Buylist — Card/Image Reconciliation

Assigns an image URL to every card by matching the card title against the
image records. There is no shared key; matching is heuristic:

1. Strip 【...】 tags from the card title.
2. Extract the trailing model number ("SV10 100/098"). None -> no image.
3. Candidates S = images with the same model number. Model numbers are
   compared case-insensitively with whitespace collapsed; no substring
   matching.
4. |S| == 0 -> no image; |S| == 1 -> that image.
5. |S| > 1 -> exact character name, else a character name contained in the
   title (or the other way round), else the first candidate.

Coverage is preferred over precision: a card with candidates always gets one.
"""

from __future__ import annotations

import structlog

from buylist.config import settings
from buylist.models.card import Card, CardData
from buylist.models.image import ImageRecord
from buylist.utils.title_parser import extract_model_number, parse_title, strip_condition_tags

logger = structlog.get_logger(__name__)


def normalize_model_number(model_number: str) -> str:
    """'SV10  100/098 ' -> 'sv10 100/098'"""
    return " ".join(model_number.split()).lower()


def index_images(images: list[ImageRecord]) -> dict[str, list[ImageRecord]]:
    """Group image records by normalized model number, keeping input order."""
    index: dict[str, list[ImageRecord]] = {}
    for image in images:
        key = normalize_model_number(image.model_number)
        if key:
            index.setdefault(key, []).append(image)
    return index


def pick_image(card_title: str, index: dict[str, list[ImageRecord]]) -> ImageRecord | None:
    """Choose the image record for one card title, or None."""
    model_number = extract_model_number(card_title)
    if not model_number:
        return None

    candidates = index.get(normalize_model_number(model_number), [])
    if not candidates:
        return None
    if len(candidates) == 1:
        return candidates[0]

    cleaned = strip_condition_tags(card_title)
    character_name = parse_title(cleaned).character_name

    for image in candidates:
        if character_name and image.character_name == character_name:
            return image

    for image in candidates:
        name = image.character_name
        if not name:
            continue
        if name in cleaned or (character_name and character_name in name):
            return image

    return candidates[0]


def merge_card_images(cards: CardData, images: list[ImageRecord]) -> CardData:
    """
    Return a new CardData where every card carries an image URL.

    Inputs are not modified; cards are copied with the resolved image_url.
    """
    index = index_images(images)
    merged: CardData = {}
    matched = 0
    total = 0

    for price_key, bucket in cards.items():
        merged_bucket: list[Card] = []
        for card in bucket:
            total += 1
            image = pick_image(card.title, index)
            if image is not None:
                matched += 1
                image_url = image.image_url or settings.NO_IMAGE_URL
                logger.debug("merge_matched", title=card.title, image_title=image.title, source="merge")
            else:
                image_url = settings.NO_IMAGE_URL
                logger.debug("merge_no_match", title=card.title, source="merge")
            merged_bucket.append(card.model_copy(update={"image_url": image_url}))
        merged[price_key] = merged_bucket

    logger.info("merge_complete", cards=total, images=len(images), matched=matched, source="merge")
    return merged
