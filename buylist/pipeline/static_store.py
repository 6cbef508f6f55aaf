"""
Card Buylist — Static Snapshot Store

Keeps a JSON snapshot of image records keyed by lower-cased model number.
The snapshot starts from the bundled STATIC_IMAGE_DATA; saved entries
override bundled ones. An update pass compares the live price list with the
snapshot, adds cards it has never seen (without an image for now), and
reports cards whose image is still missing.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from buylist.config import settings
from buylist.data.fallback import STATIC_IMAGE_DATA
from buylist.models.card import Card, CardData
from buylist.models.image import ImageDataDocument, ImageRecord
from buylist.models.static_store import ChangeSet, StaticDataStore, UpdateReport
from buylist.pipeline.card_source import CardDataSource
from buylist.utils.title_parser import parse_title, snapshot_key

logger = structlog.get_logger(__name__)


class StaticDataUpdateError(Exception):
    """The snapshot update could not run (e.g. the price list was empty)."""


def _resolve(path: str | Path | None, default: str) -> Path:
    return Path(path) if path is not None else Path(default)


def load_static_data(path: str | Path | None = None) -> StaticDataStore:
    """
    Bundled records merged with the saved snapshot, if one exists.

    A missing or unreadable snapshot file yields the bundled records only.
    """
    store = StaticDataStore(
        cards={r.model_number.lower(): r for r in STATIC_IMAGE_DATA if r.model_number}
    )

    snapshot_path = _resolve(path, settings.STATIC_DATA_PATH)
    if not snapshot_path.exists():
        return store

    try:
        saved = StaticDataStore.model_validate_json(snapshot_path.read_text(encoding="utf-8"))
    except (OSError, ValidationError) as e:
        logger.warning("static_data_unreadable", path=str(snapshot_path), error=str(e), source="static_store")
        return store

    return StaticDataStore(
        cards={**store.cards, **saved.cards},
        last_updated=saved.last_updated,
        version=saved.version,
    )


def save_static_data(store: StaticDataStore, path: str | Path | None = None) -> Path:
    """Write the snapshot as JSON. I/O errors propagate."""
    snapshot_path = _resolve(path, settings.STATIC_DATA_PATH)
    snapshot_path.parent.mkdir(parents=True, exist_ok=True)
    snapshot_path.write_text(
        store.model_dump_json(by_alias=True, indent=2),
        encoding="utf-8",
    )
    logger.info("static_data_saved", path=str(snapshot_path), cards=len(store.cards), source="static_store")
    return snapshot_path


def _flatten(cards: CardData | list[Card]) -> list[Card]:
    if isinstance(cards, dict):
        return [card for bucket in cards.values() for card in bucket]
    return list(cards)


def detect_changes(cards: CardData | list[Card], store: StaticDataStore) -> ChangeSet:
    """Split price-list cards into new / missing-image / existing."""
    changes = ChangeSet()

    for card in _flatten(cards):
        key = snapshot_key(card.title)
        if not key:
            continue

        known = store.cards.get(key)
        if known is None:
            changes.new_cards.append(card)
        elif not known.image_url or known.image_url == settings.NO_IMAGE_URL:
            changes.missing_images.append(card)
        else:
            changes.existing_cards += 1

    return changes


def add_card_to_static_data(
    store: StaticDataStore,
    card: Card,
    image_url: str | None = None,
) -> bool:
    """Add a card to the snapshot. Returns False if it has no model number."""
    key = snapshot_key(card.title)
    if not key:
        return False

    store.cards[key] = ImageRecord(
        title=card.title,
        image_url=image_url or settings.NO_IMAGE_URL,
        character_name=parse_title(card.title).character_name,
        model_number=key,
    )
    return True


def generate_update_report(
    total_cards: int,
    existing_cards: int,
    new_cards: int,
    images_added: int,
    images_failed: int,
    missing_images: list[str],
    errors: list[str],
) -> UpdateReport:
    return UpdateReport(
        total_cards=total_cards,
        existing_cards=existing_cards,
        new_cards=new_cards,
        images_added=images_added,
        images_failed=images_failed,
        missing_images=missing_images,
        errors=errors,
    )


async def update_static_data(
    card_source: CardDataSource | None = None,
    path: str | Path | None = None,
) -> UpdateReport:
    """
    Sync the snapshot with the live price list and save it.

    Raises:
        StaticDataUpdateError: the price list came back empty.
    """
    card_source = card_source or CardDataSource()
    cards = _flatten(await card_source.fetch_card_data())
    if not cards:
        raise StaticDataUpdateError("no data from price list")

    store = load_static_data(path)
    changes = detect_changes(cards, store)

    logger.info(
        "static_data_changes",
        total=len(cards),
        existing=changes.existing_cards,
        new=len(changes.new_cards),
        missing_images=len(changes.missing_images),
        source="static_store",
    )

    images_added = 0
    images_failed = 0
    errors: list[str] = []
    for card in changes.new_cards:
        if add_card_to_static_data(store, card):
            images_added += 1
        else:
            images_failed += 1
            errors.append(f"Failed to add card: {card.title}")

    store.last_updated = datetime.now(timezone.utc).isoformat()
    store.version += 1
    save_static_data(store, path)

    return generate_update_report(
        total_cards=len(cards),
        existing_cards=changes.existing_cards,
        new_cards=len(changes.new_cards),
        images_added=images_added,
        images_failed=images_failed,
        missing_images=[card.title for card in changes.missing_images],
        errors=errors,
    )


def static_data_status(path: str | Path | None = None) -> dict[str, Any]:
    """Counts of snapshot entries with and without an image."""
    store = load_static_data(path)
    with_images = sum(
        1 for record in store.cards.values()
        if record.image_url and record.image_url != settings.NO_IMAGE_URL
    )
    return {
        "totalCards": len(store.cards),
        "cardsWithImages": with_images,
        "cardsWithoutImages": len(store.cards) - with_images,
        "lastUpdated": store.last_updated,
        "version": store.version,
    }


def export_image_document(store: StaticDataStore, path: str | Path | None = None) -> Path:
    """Write the {images, lastUpdated} document read by JSONFileStrategy."""
    document_path = _resolve(path, settings.IMAGE_DOCUMENT_PATH)
    document_path.parent.mkdir(parents=True, exist_ok=True)
    document = ImageDataDocument(images=list(store.cards.values()), last_updated=store.last_updated)
    document_path.write_text(
        json.dumps(document.model_dump(by_alias=True), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    logger.info("image_document_exported", path=str(document_path), images=len(document.images), source="static_store")
    return document_path
