"""
Card Buylist — Shared pytest Fixtures & Configuration

Provides common fixtures for all test modules:
- Published-sheet HTML and price-list CSV documents
- Image record / card builders
- Async test support via pytest-asyncio
"""

from __future__ import annotations

import pytest

from buylist.models.card import Card
from buylist.models.image import ImageRecord


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

pytest_plugins = ("pytest_asyncio",)


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

SHEET_HTML = """
<html><body>
<table class="waffle">
  <thead><tr><th></th><th>A</th><th>B</th><th>C</th><th>D</th><th>E</th></tr></thead>
  <tbody>
    <tr><th>1</th><td>No</td><td>検索ワード</td><td>タイトル</td><td>価格</td><td>画像URL</td></tr>
    <tr>
      <th>2</th><td>1</td><td>ヘルガー</td>
      <td>【状態A】ロケット団のヘルガー AR SV10 100/098</td><td>¥1,200</td>
      <td><div><img src="https://lh3.googleusercontent.com/helga=w100-h20"></div></td>
    </tr>
    <tr>
      <th>3</th><td>2</td><td>ピカチュウ</td>
      <td>ピカチュウ AR sv11b 100/086</td><td>¥800</td>
      <td>=IMAGE("https://lh3.googleusercontent.com/pika=s50")</td>
    </tr>
    <tr>
      <th>4</th><td>3</td><td>画像なし</td>
      <td>画像なし SV9 001/100</td><td>¥100</td><td></td>
    </tr>
    <tr><th>5</th><td>short</td><td>row</td></tr>
  </tbody>
</table>
</body></html>
"""

PRICE_CSV = (
    '"買取表 2025/01/10",,,\n'
    "商品タイトル,商品型番,レアリティ,買取価格\n"
    '"【状態A】ロケット団のヘルガー AR SV10 100/098",SV10 100/098,AR,"¥1,200"\n'
    'ピカチュウ AR sv11b 100/086,sv11b 100/086,AR,"¥1,200"\n'
    "short,row\n"
    "ゼクロムex SAR sv11b 111/086,sv11b 111/086,SAR,最低保証\n"
)

HEADER_ONLY_CSV = (
    '"買取表 2025/01/10",,,\n'
    "商品タイトル,商品型番,レアリティ,買取価格\n"
)


@pytest.fixture
def sheet_html() -> str:
    return SHEET_HTML


@pytest.fixture
def price_csv() -> str:
    return PRICE_CSV


@pytest.fixture
def header_only_csv() -> str:
    return HEADER_ONLY_CSV


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def make_image(model_number: str, character_name: str = "", url: str | None = None) -> ImageRecord:
    return ImageRecord(
        title=f"{character_name} {model_number}".strip(),
        image_url=url or f"/images/{model_number.replace(' ', '-').replace('/', '-')}.jpg",
        character_name=character_name,
        model_number=model_number,
    )


def make_card(title: str, price: str = "¥1,000", model_number: str = "", rarity: str = "AR") -> Card:
    return Card.from_row(title, model_number, rarity, price)
