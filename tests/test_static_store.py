"""
Tests for the static snapshot store (buylist/pipeline/static_store.py).

All file I/O goes to tmp_path.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from buylist.config import settings
from buylist.data.fallback import STATIC_IMAGE_DATA
from buylist.models.image import ImageRecord
from buylist.models.static_store import StaticDataStore
from buylist.pipeline.card_source import parse_card_csv
from buylist.pipeline.static_store import (
    StaticDataUpdateError,
    add_card_to_static_data,
    detect_changes,
    export_image_document,
    load_static_data,
    save_static_data,
    static_data_status,
    update_static_data,
)

from conftest import make_card

BUNDLED = len({r.model_number.lower() for r in STATIC_IMAGE_DATA})


def _source(card_data):
    source = MagicMock()
    source.fetch_card_data = AsyncMock(return_value=card_data)
    return source


class TestLoadSave:
    def test_missing_file_loads_bundle(self, tmp_path: Path) -> None:
        store = load_static_data(tmp_path / "missing.json")

        assert len(store.cards) == BUNDLED
        assert "sv10 100/098" in store.cards

    def test_saved_entries_override_bundle(self, tmp_path: Path) -> None:
        path = tmp_path / "static.json"
        override = ImageRecord(title="x", image_url="/new.jpg", model_number="sv10 100/098")
        save_static_data(StaticDataStore(cards={"sv10 100/098": override}, version=4), path)

        store = load_static_data(path)

        assert store.cards["sv10 100/098"].image_url == "/new.jpg"
        assert store.version == 4
        assert len(store.cards) == BUNDLED

    def test_corrupt_file_loads_bundle(self, tmp_path: Path) -> None:
        path = tmp_path / "static.json"
        path.write_text("{not json", encoding="utf-8")

        assert len(load_static_data(path).cards) == BUNDLED

    def test_saved_file_is_camel_case(self, tmp_path: Path) -> None:
        path = save_static_data(StaticDataStore(), tmp_path / "nested" / "static.json")

        payload = json.loads(path.read_text(encoding="utf-8"))
        assert {"cards", "lastUpdated", "version"} == set(payload)


class TestDetectChanges:
    def test_splits_new_missing_existing(self) -> None:
        store = StaticDataStore(
            cards={
                "sv10 100/098": ImageRecord(title="a", image_url="/a.jpg"),
                "sv9 001/100": ImageRecord(title="b", image_url=settings.NO_IMAGE_URL),
            }
        )
        cards = [
            make_card("ヘルガー AR SV10 100/098"),
            make_card("何か AR SV9 001/100"),
            make_card("新カード SAR SV11 120/100"),
            make_card("プロモ"),
        ]

        changes = detect_changes(cards, store)

        assert changes.existing_cards == 1
        assert [c.title for c in changes.missing_images] == ["何か AR SV9 001/100"]
        assert [c.title for c in changes.new_cards] == ["新カード SAR SV11 120/100"]

    def test_accepts_card_data(self, price_csv: str) -> None:
        changes = detect_changes(parse_card_csv(price_csv), StaticDataStore())
        assert len(changes.new_cards) == 3


class TestAddCard:
    def test_adds_without_image(self) -> None:
        store = StaticDataStore()

        assert add_card_to_static_data(store, make_card("【美品】ヘルガー AR SV10 100/098")) is True

        record = store.cards["sv10 100/098"]
        assert record.image_url == settings.NO_IMAGE_URL
        assert record.character_name == "ヘルガー"

    def test_rejects_card_without_model_number(self) -> None:
        store = StaticDataStore()
        assert add_card_to_static_data(store, make_card("プロモ")) is False
        assert store.cards == {}


class TestUpdateStaticData:
    @pytest.mark.asyncio
    async def test_adds_new_cards_and_saves(self, tmp_path: Path, price_csv: str) -> None:
        path = tmp_path / "static.json"

        report = await update_static_data(card_source=_source(parse_card_csv(price_csv)), path=path)

        assert report.total_cards == 3
        assert report.existing_cards == 3
        assert report.new_cards == 0
        assert path.exists()
        assert load_static_data(path).version == 2

    @pytest.mark.asyncio
    async def test_unknown_card_is_added(self, tmp_path: Path) -> None:
        path = tmp_path / "static.json"
        source = _source({"¥500": [make_card("新カード SAR SV11 120/100", price="¥500")]})

        report = await update_static_data(card_source=source, path=path)

        assert report.new_cards == 1
        assert report.images_added == 1
        assert "sv11 120/100" in load_static_data(path).cards

    @pytest.mark.asyncio
    async def test_empty_price_list_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "static.json"

        with pytest.raises(StaticDataUpdateError):
            await update_static_data(card_source=_source({}), path=path)
        assert not path.exists()


class TestStatusAndExport:
    def test_status_counts(self, tmp_path: Path) -> None:
        path = tmp_path / "static.json"
        store = StaticDataStore(
            cards={"sv99 001/001": ImageRecord(title="x", image_url=settings.NO_IMAGE_URL)}
        )
        save_static_data(store, path)

        status = static_data_status(path)

        assert status["totalCards"] == BUNDLED + 1
        assert status["cardsWithImages"] == BUNDLED
        assert status["cardsWithoutImages"] == 1

    def test_export_document(self, tmp_path: Path) -> None:
        target = export_image_document(load_static_data(tmp_path / "none.json"), tmp_path / "imageData.json")

        payload = json.loads(target.read_text(encoding="utf-8"))
        assert len(payload["images"]) == BUNDLED
        assert "imageUrl" in payload["images"][0]
        assert "lastUpdated" in payload
