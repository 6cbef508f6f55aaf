"""
Models package — export all pydantic record models.
"""

from buylist.models.card import Card, CardData, RefreshResult
from buylist.models.image import ImageDataDocument, ImageRecord
from buylist.models.static_store import ChangeSet, StaticDataStore, UpdateReport

__all__ = [
    "Card",
    "CardData",
    "ChangeSet",
    "ImageDataDocument",
    "ImageRecord",
    "RefreshResult",
    "StaticDataStore",
    "UpdateReport",
]
