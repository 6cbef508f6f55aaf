"""
Card Buylist — Static Snapshot Models

The static snapshot is a JSON file of ImageRecords keyed by lower-cased
model number. It backs StaticDataStrategy refreshes and the exported
imageData.json document.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from buylist.models.card import Card
from buylist.models.image import ImageRecord


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class StaticDataStore(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    cards: dict[str, ImageRecord] = Field(default_factory=dict)
    last_updated: str = Field(default_factory=_utc_now_iso)
    version: int = 1


class ChangeSet(BaseModel):
    """Difference between the live price list and the snapshot."""

    new_cards: list[Card] = Field(default_factory=list)
    missing_images: list[Card] = Field(default_factory=list)
    existing_cards: int = 0


class UpdateReport(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_cards: int
    existing_cards: int
    new_cards: int
    images_added: int
    images_failed: int
    missing_images: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    timestamp: str = Field(default_factory=_utc_now_iso)
