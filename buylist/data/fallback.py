"""
Card Buylist — Bundled Fallback Data

FALLBACK_CARD_DATA is shown when the price list cannot be fetched.
STATIC_IMAGE_DATA backs StaticDataStrategy and seeds the static snapshot.
SAMPLE_IMAGE_DATA is the last-resort image dataset.
"""

from __future__ import annotations

from buylist.models.card import Card, CardData
from buylist.models.image import ImageRecord


def _fallback_cards() -> CardData:
    cards = [
        Card(card_id="sample-100-001", title="サンプルカード1", model_number="100/001",
             rarity="AR", price="100"),
        Card(card_id="sample-200-001", title="サンプルカード2", model_number="200/001",
             rarity="SR", price="200"),
        Card(card_id="sample-min-001", title="サンプルカード（最低保証）", model_number="MIN/001",
             rarity="N", price="最低保証"),
    ]
    data: CardData = {}
    for card in cards:
        data.setdefault(card.price, []).append(card)
    return data


FALLBACK_CARD_DATA: CardData = _fallback_cards()


STATIC_IMAGE_DATA: tuple[ImageRecord, ...] = (
    ImageRecord(
        title="ロケット団のヘルガー AR SV10 100/098",
        image_url="/images/cards/ar/sv10-100-098.jpg",
        character_name="ロケット団のヘルガー",
        model_number="SV10 100/098",
    ),
    ImageRecord(
        title="ロケット団のミュウツーex SAR SV10 119/098",
        image_url="/images/cards/sar/sv10-119-098.jpg",
        character_name="ロケット団のミュウツーex",
        model_number="SV10 119/098",
    ),
    ImageRecord(
        title="ピカチュウ AR sv11b 100/086",
        image_url="/images/cards/ar/sv11b-100-086.jpg",
        character_name="ピカチュウ",
        model_number="sv11b 100/086",
    ),
    ImageRecord(
        title="ゼクロムex SAR sv11b 111/086",
        image_url="/images/cards/sar/sv11b-111-086.jpg",
        character_name="ゼクロムex",
        model_number="sv11b 111/086",
    ),
    ImageRecord(
        title="レシラムex SAR sv11w 111/086",
        image_url="/images/cards/sar/sv11w-111-086.jpg",
        character_name="レシラムex",
        model_number="sv11w 111/086",
    ),
    ImageRecord(
        title="リーリエのピッピex SAR SV9 115/100",
        image_url="/images/cards/sar/sv9-115-100.jpg",
        character_name="リーリエのピッピex",
        model_number="SV9 115/100",
    ),
    ImageRecord(
        title="ブラッキーGX HR SM11 106/094",
        image_url="/images/cards/ur/sm11-106-094.jpg",
        character_name="ブラッキーGX",
        model_number="SM11 106/094",
    ),
    ImageRecord(
        title="リザードン&テールナーGX RR SM10a 009/054",
        image_url="/images/cards/rr/sm10a-009-054.jpg",
        character_name="リザードン&テールナーGX",
        model_number="SM10a 009/054",
    ),
)


SAMPLE_IMAGE_DATA: tuple[ImageRecord, ...] = (
    ImageRecord(
        title="ピカチュウ sv11b 100/086",
        image_url="/images/sv11b-100-086.jpg",
        character_name="ピカチュウ",
        model_number="sv11b 100/086",
    ),
    ImageRecord(
        title="リザードン sv11b 101/086",
        image_url="/images/sv11b-101-086.jpg",
        character_name="リザードン",
        model_number="sv11b 101/086",
    ),
    ImageRecord(
        title="フシギバナ sv11b 102/086",
        image_url="/images/sv11b-102-086.jpg",
        character_name="フシギバナ",
        model_number="sv11b 102/086",
    ),
    ImageRecord(
        title="イーブイ sv11w 101/086",
        image_url="/images/sv11w-101-086.jpg",
        character_name="イーブイ",
        model_number="sv11w 101/086",
    ),
)
