"""
Card Buylist — Title Parser

Splits a raw product/image title into (character_name, model_number).

Titles look like "【状態A】ロケット団のヘルガー AR SV10 100/098":
- 【...】 condition tags are noise and are stripped first
- the model number is the trailing "<set code> <nnn>/<nnn>" pair
- the character name is the leading token before it

Never raises. The worst case is a ParsedTitle with empty fields.
"""

from __future__ import annotations

import re
from typing import NamedTuple

import structlog

logger = structlog.get_logger(__name__)

_CONDITION_TAG = re.compile(r"【[^】]+?】")

# "SV10 100/098", "sv11b 100/086", "SM10a 001/052"
_TRAILING_MODEL_NUMBER = re.compile(r"([a-zA-Z0-9-]+\s+[0-9]{1,3}/[0-9]{1,3})$")

# Leading run of non-whitespace, optionally extended by hiragana
# (U+3041-U+309F) or katakana + prolonged sound mark (U+30A1-U+30FC)
_LEADING_NAME = re.compile(r"^(\S+(?:[ぁ-ゟァ-ー]*)?)")


class ParsedTitle(NamedTuple):
    character_name: str
    model_number: str


def strip_condition_tags(title: str) -> str:
    """Remove every 【...】 tag and trim."""
    return _CONDITION_TAG.sub("", title).strip()


def match_model_number(cleaned_title: str) -> re.Match[str] | None:
    """Match the trailing model-number pattern on an already-cleaned title."""
    return _TRAILING_MODEL_NUMBER.search(cleaned_title)


def extract_model_number(title: str) -> str:
    """
    Model number from the trailing pattern only.

    Unlike parse_title(), there is no whitespace-split fallback: a title
    without a trailing "<set> nnn/nnn" returns "".
    """
    match = match_model_number(strip_condition_tags(title))
    return match.group(0).strip() if match else ""


def parse_title(raw_title: str) -> ParsedTitle:
    """
    Extract character name and model number from a raw title.

    Examples:
        >>> parse_title("【状態A】ロケット団のヘルガー AR SV10 100/098")
        ParsedTitle(character_name='ロケット団のヘルガー', model_number='SV10 100/098')
        >>> parse_title("ピカチュウ promo card")
        ParsedTitle(character_name='ピカチュウ', model_number='promo card')
    """
    cleaned = strip_condition_tags(raw_title)

    match = match_model_number(cleaned)
    if match:
        model_number = match.group(0).strip()
        name_part = cleaned[: match.start()].strip()
        name_match = _LEADING_NAME.match(name_part)
        character_name = name_match.group(1) if name_match else ""
        return ParsedTitle(character_name=character_name, model_number=model_number)

    parts = cleaned.split()
    character_name = parts[0] if parts else ""
    model_number = f"{parts[-2]} {parts[-1]}" if len(parts) >= 3 else ""

    logger.debug(
        "title_parse_fallback",
        title=raw_title,
        character_name=character_name,
        model_number=model_number,
        source="title_parser",
    )
    return ParsedTitle(character_name=character_name, model_number=model_number)


def snapshot_key(title: str) -> str:
    """
    Lower-cased model number used as the static snapshot key.

    Falls back to the last two whitespace tokens like parse_title().
    """
    return parse_title(title).model_number.lower()
