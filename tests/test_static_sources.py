"""
Tests for the static image sources (buylist/scraper/static_sources.py).

Covers:
- StaticDataStrategy: bundled records, injected records
- JSONFileStrategy: context gating, success, 404, malformed JSON, missing images array
- SampleDataStrategy: always four records
"""

from __future__ import annotations

import httpx
import pytest
import respx

from buylist.config import ContextKind
from buylist.data.fallback import STATIC_IMAGE_DATA
from buylist.scraper import ExecutionContext
from buylist.scraper.static_sources import JSONFileStrategy, SampleDataStrategy, StaticDataStrategy

BASE_URL = "https://shop.example.test"
JSON_URL = f"{BASE_URL}/data/imageData.json"

CLIENT = ExecutionContext(kind=ContextKind.CLIENT, static_base_url=BASE_URL)


@pytest.mark.asyncio
async def test_static_strategy_returns_bundle() -> None:
    records = await StaticDataStrategy().fetch()
    assert records == list(STATIC_IMAGE_DATA)
    assert len(records) > 0


@pytest.mark.asyncio
async def test_static_strategy_injected_records() -> None:
    records = await StaticDataStrategy(records=[]).fetch()
    assert records == []


@pytest.mark.asyncio
async def test_sample_strategy_four_records() -> None:
    records = await SampleDataStrategy().fetch()
    assert [r.character_name for r in records] == ["ピカチュウ", "リザードン", "フシギバナ", "イーブイ"]


class TestJSONFileStrategy:
    def test_url_joins_base_and_path(self) -> None:
        strategy = JSONFileStrategy(ExecutionContext(kind=ContextKind.CLIENT, static_base_url=f"{BASE_URL}/"))
        assert strategy.url == JSON_URL

    @pytest.mark.asyncio
    async def test_server_context_skips(self) -> None:
        strategy = JSONFileStrategy(ExecutionContext(kind=ContextKind.SERVER, static_base_url=BASE_URL))
        with respx.mock(assert_all_called=False) as mock:
            route = mock.get(JSON_URL)
            records = await strategy.fetch()
        assert records == []
        assert route.called is False

    @pytest.mark.asyncio
    async def test_client_without_base_url_skips(self) -> None:
        strategy = JSONFileStrategy(ExecutionContext(kind=ContextKind.CLIENT))
        assert await strategy.fetch() == []

    @pytest.mark.asyncio
    async def test_loads_images(self) -> None:
        payload = {
            "images": [
                {
                    "title": "ピカチュウ AR sv11b 100/086",
                    "imageUrl": "/images/cards/ar/pika.jpg",
                    "characterName": "ピカチュウ",
                    "modelNumber": "sv11b 100/086",
                }
            ],
            "lastUpdated": "2025-01-10T00:00:00Z",
        }
        with respx.mock:
            respx.get(JSON_URL).mock(return_value=httpx.Response(200, json=payload))
            records = await JSONFileStrategy(CLIENT).fetch()

        assert len(records) == 1
        assert records[0].image_url == "/images/cards/ar/pika.jpg"
        assert records[0].model_number == "sv11b 100/086"

    @pytest.mark.asyncio
    async def test_404_returns_empty(self) -> None:
        with respx.mock:
            respx.get(JSON_URL).mock(return_value=httpx.Response(404))
            assert await JSONFileStrategy(CLIENT).fetch() == []

    @pytest.mark.asyncio
    async def test_missing_images_array(self) -> None:
        with respx.mock:
            respx.get(JSON_URL).mock(return_value=httpx.Response(200, json={"cards": []}))
            assert await JSONFileStrategy(CLIENT).fetch() == []

    @pytest.mark.asyncio
    async def test_images_not_a_list(self) -> None:
        with respx.mock:
            respx.get(JSON_URL).mock(return_value=httpx.Response(200, json={"images": "nope"}))
            assert await JSONFileStrategy(CLIENT).fetch() == []

    @pytest.mark.asyncio
    async def test_malformed_json(self) -> None:
        with respx.mock:
            respx.get(JSON_URL).mock(return_value=httpx.Response(200, text="{not json"))
            assert await JSONFileStrategy(CLIENT).fetch() == []

    @pytest.mark.asyncio
    async def test_non_utf8_body(self) -> None:
        with respx.mock:
            respx.get(JSON_URL).mock(
                return_value=httpx.Response(200, content=b'{"images": ["\xff\xfe"]}')
            )
            assert await JSONFileStrategy(CLIENT).fetch() == []

    @pytest.mark.asyncio
    async def test_invalid_record_shape(self) -> None:
        with respx.mock:
            respx.get(JSON_URL).mock(
                return_value=httpx.Response(200, json={"images": [{"characterName": "x"}]})
            )
            assert await JSONFileStrategy(CLIENT).fetch() == []
