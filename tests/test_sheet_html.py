"""
Tests for the published-sheet HTML strategy (buylist/scraper/sheet_html.py).

Covers:
- Row parsing: title cell, <img src> cell, =IMAGE() formula cell
- Header/label rows and rows without images are skipped
- Per-sheet failures keep the other sheets' records
- Inter-sheet throttle runs once per sheet
"""

from __future__ import annotations

import httpx
import pytest
import respx

from buylist.scraper.sheet_html import HTMLParseStrategy, is_valid_title, parse_sheet_html
from buylist.scraper.throttle import RequestThrottle
from buylist.utils.image_url import ImageSizeConfig

PUBHTML_ROUTE = r"https://docs\.google\.com/spreadsheets/d/e/.+/pubhtml.*"


class TestParseSheetHtml:
    def test_extracts_valid_rows(self, sheet_html: str) -> None:
        records = parse_sheet_html(sheet_html, ImageSizeConfig(size=400))

        assert len(records) == 2
        helga, pika = records

        assert helga.title == "【状態A】ロケット団のヘルガー AR SV10 100/098"
        assert helga.image_url == "https://lh3.googleusercontent.com/helga=s400"
        assert helga.character_name == "ロケット団のヘルガー"
        assert helga.model_number == "SV10 100/098"

        assert pika.image_url == "https://lh3.googleusercontent.com/pika=s400"
        assert pika.model_number == "sv11b 100/086"

    def test_malformed_image_url_keeps_other_rows(self) -> None:
        html = (
            "<table>"
            "<tr><td>1</td><td>x</td><td>ヘルガー AR SV10 100/098</td><td>1</td>"
            '<td><img src="https://lh3.googleusercontent.com/helga=s50"></td></tr>'
            "<tr><td>2</td><td>y</td><td>ピカチュウ AR sv11b 100/086</td><td>1</td>"
            '<td><img src="https://[lh3.googleusercontent.com/bad"></td></tr>'
            "</table>"
        )

        records = parse_sheet_html(html, ImageSizeConfig(size=400))

        assert [r.model_number for r in records] == ["SV10 100/098", "sv11b 100/086"]
        assert records[0].image_url == "https://lh3.googleusercontent.com/helga=s400"
        assert records[1].image_url == "https://[lh3.googleusercontent.com/bad"

    def test_empty_document(self) -> None:
        assert parse_sheet_html("<html><body></body></html>") == []

    @pytest.mark.parametrize("title", ["タイトル", "検索ワード一覧", "価格表", "画像URL"])
    def test_header_labels_invalid(self, title: str) -> None:
        assert is_valid_title(title) is False

    def test_card_title_valid(self) -> None:
        assert is_valid_title("ピカチュウ AR sv11b 100/086") is True


class TestHTMLParseStrategy:
    @pytest.mark.asyncio
    async def test_fetch_all_sheets(self, sheet_html: str) -> None:
        throttle = RequestThrottle(delay_seconds=0)
        strategy = HTMLParseStrategy(
            sheet_gids=["111", "222"],
            size=ImageSizeConfig(size=400),
            throttle=throttle,
        )

        with respx.mock:
            route = respx.get(url__regex=PUBHTML_ROUTE).mock(
                return_value=httpx.Response(200, text=sheet_html)
            )
            records = await strategy.fetch()

        assert route.call_count == 2
        assert len(records) == 4
        assert throttle.requests_made == 2

    @pytest.mark.asyncio
    async def test_failing_sheet_keeps_others(self, sheet_html: str) -> None:
        """A 500 on one sheet yields zero records for it, not an error."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.params.get("gid") == "bad":
                return httpx.Response(500)
            return httpx.Response(200, text=sheet_html)

        strategy = HTMLParseStrategy(
            sheet_gids=["bad", "good"],
            size=ImageSizeConfig(size=400),
            throttle=RequestThrottle(delay_seconds=0),
        )

        with respx.mock:
            respx.get(url__regex=PUBHTML_ROUTE).mock(side_effect=handler)
            records = await strategy.fetch()

        assert len(records) == 2

    @pytest.mark.asyncio
    async def test_timeout_returns_empty(self) -> None:
        strategy = HTMLParseStrategy(
            sheet_gids=["111"],
            throttle=RequestThrottle(delay_seconds=0),
        )

        with respx.mock:
            respx.get(url__regex=PUBHTML_ROUTE).mock(side_effect=httpx.ReadTimeout("timed out"))
            records = await strategy.fetch()

        assert records == []
