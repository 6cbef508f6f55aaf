"""
Card Buylist — Card (price record) Models

A Card is built from one price-list CSV row. CardData buckets Cards by
their raw price string; every Card in a bucket has price == key.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from buylist.config import settings


class Card(BaseModel):
    """Buy-price record for one card."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    card_id: str = Field(..., description="'{model_number}-{title}' with '/' replaced by '-'")
    title: str
    model_number: str
    rarity: str
    price: str = Field(..., description="Raw price string, e.g. '¥1,200' or '最低保証'")
    image_url: str = Field(default_factory=lambda: settings.NO_IMAGE_URL)

    @field_validator("image_url", mode="before")
    @classmethod
    def default_missing_image(cls, v: Any) -> str:
        """Never leave image_url empty."""
        if not v:
            return settings.NO_IMAGE_URL
        return str(v)

    @classmethod
    def from_row(cls, title: str, model_number: str, rarity: str, price: str) -> Card:
        """Build a Card from the four consumed CSV columns."""
        return cls(
            card_id=f"{model_number}-{title}".replace("/", "-"),
            title=title,
            model_number=model_number,
            rarity=rarity,
            price=price,
        )


# price key -> cards at that price
CardData = dict[str, list[Card]]


class RefreshResult(BaseModel):
    """Outcome of one refresh cycle (price list + images merged)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    data: dict[str, list[Card]] = Field(default_factory=dict)
    image_count: int = 0
    used_fallback: bool = False
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
