"""
Card Buylist — Image Record Models

One ImageRecord per scraped sheet row (or saved image file). Records are
frozen: they only live in memory for the duration of one fetch cycle.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ImageRecord(BaseModel):
    """Image metadata for a single card print."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    title: str = Field(..., description="Raw scraped title")
    image_url: str = Field(..., description="Image URL or local /images path")
    character_name: str = Field(default="", description="Parsed character name")
    model_number: str = Field(default="", description="Parsed model number, e.g. 'SV10 100/098'")


class ImageDataDocument(BaseModel):
    """Pre-generated JSON document served at STATIC_JSON_PATH."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    images: list[ImageRecord]
    last_updated: str | None = None
