"""Hearthstone card search and deck images."""

from __future__ import annotations

import json
import re
from typing import Any

import requests

HOME = "https://hs.fbigame.com"
HS = "https://hs.fbigame.com/ajax.php?"
PARA = (
    "mod=get_cards_list&"
    "mode=-1&"
    "extend=-1&"
    "mutil_extend=&"
    "hero=-1&"
    "rarity=-1&"
    "cost=-1&"
    "mutil_cost=&"
    "techlevel=-1&"
    "type=-1&"
    "collectible=-1&"
    "isbacon=-1&"
    "page=1&"
    "search_type=1&"
    "deckmode=normal"
)
CARD_IMAGE_BASE = "https://res.fbigame.com/hs/v13/"
USER_AGENT = (
    "Mozilla/5.0 (Linux; Android 6.0; Nexus 5 Build/MRA58N) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/86.0.4240.198 Mobile Safari/537.36"
)
HEADERS = {"Referer": HOME, "User-Agent": USER_AGENT}
DEFAULT_LIMIT = 5

_HASH_MARK = 'var hash = "'
_DECK_RE = re.compile(r"^[\s\S]*?(AAE[a-zA-Z0-9/\+=]{70,})[\s\S]*$")


def extract_hash(html: str) -> str:
    """Return the page hash embedded in the site's home page."""
    _, mark, rest = html.partition(_HASH_MARK)
    if not mark:
        raise ValueError("page hash not found")
    return rest.split('"', 1)[0]


def search_url(page_hash: str, search: str) -> str:
    """URL of a card search query."""
    return HS + PARA + "&hash=" + page_hash + "&search=" + search


def deck_url(page_hash: str, code: str) -> str:
    """URL of the image request for a deck code."""
    return (
        HS + PARA + "mod=general_deck_image&deck_code=" + code
        + "&deck_text=&hash=" + page_hash + "&search=" + code
    )


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def card_entries(payload: dict | str | bytes, limit: int = DEFAULT_LIMIT) -> list[tuple[str, str]]:
    """Return (card id, image URL) for the first ``limit`` cards of a result."""
    if not isinstance(payload, dict):
        try:
            payload = json.loads(payload) if payload else {}
        except ValueError:
            payload = {}
    cards = payload.get("list") if isinstance(payload, dict) else None
    if not isinstance(cards, list):
        return []
    entries = []
    for card in cards[:limit]:
        card = card if isinstance(card, dict) else {}
        card_id = _text(card.get("CardID"))
        url = CARD_IMAGE_BASE + card_id + ".png?auth_key=" + _text(card.get("auth_key"))
        entries.append((card_id, url))
    return entries


def _get(url: str, session: requests.Session | None) -> str:
    response = (session or requests).get(url, headers=HEADERS, timeout=30)
    response.raise_for_status()
    return response.text


def search_cards(keyword: str, session: requests.Session | None = None) -> list[tuple[str, str]]:
    """Search cards by keyword and return up to five (card id, image URL)."""
    page_hash = extract_hash(_get(HOME, session))
    return card_entries(_get(search_url(page_hash, keyword), session))


def deck_image(code: str, session: requests.Session | None = None) -> str:
    """Return the deck picture for a deck code as a ``base64://`` link."""
    page_hash = extract_hash(_get(HOME, session))
    payload = json.loads(_get(deck_url(page_hash, code), session))
    return "base64://" + _text(payload.get("img"))


def find_deck_code(text: str) -> str | None:
    """Return the deck code contained in a message, or None."""
    match = _DECK_RE.match(text)
    return None if match is None else match.group(1)