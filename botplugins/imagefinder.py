"""Keyword illustration search."""

from __future__ import annotations

import re
from typing import Any, Iterable
from urllib.parse import quote_plus

import requests

SEARCH_API = "https://api.pixivel.moe/v2/pixiv/illust/search/"
REFERER = "https://pixivel.moe/"
USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/94.0.4606.61 Safari/537.36"
)

_HREF_RE = re.compile(r'<a href=".*">')


class SearchError(RuntimeError):
    """Raised when the search service reports an error."""


def print_tags(tags: Iterable[dict[str, Any]]) -> str:
    """Render tags as "#name (translation)" lines, each preceded by a newline."""
    parts = []
    for tag in tags:
        parts.append("\n#" + (tag.get("name") or ""))
        translation = tag.get("translation") or ""
        if translation:
            parts.append(" (" + translation + ")")
    return "".join(parts)


def clean_description(text: str) -> str:
    """Turn an HTML description into plain text lines."""
    text = text.replace("<br />", "\n").replace("</a>", "")
    return _HREF_RE.sub("", text)


def soutu_api(keyword: str, session: requests.Session | None = None) -> dict[str, Any]:
    """Search illustrations by keyword and return the decoded answer."""
    url = SEARCH_API + quote_plus(keyword) + "?page=0"
    response = (session or requests).get(
        url, headers={"Referer": REFERER, "User-Agent": USER_AGENT}, timeout=30
    )
    response.raise_for_status()
    result = response.json()
    if result.get("error"):
        raise SearchError(result.get("message") or "search failed")
    return result


def format_illust(illust: dict[str, Any], user_name: str, user_id: Any) -> str:
    """Render the description message of one illustration."""
    return (
        f"{illust.get('width', 0)}x{illust.get('height', 0)}\n"
        f"标题: {illust.get('title', '')}\n"
        f"副标题: {illust.get('altTitle', '')}\n"
        f"ID: {illust.get('id', 0)}\n"
        f"画师: {user_name} ({user_id})\n"
        f"分级:{illust.get('sanity', 0)}\n"
        + clean_description(illust.get("description") or "")
        + print_tags(illust.get("tags") or [])
    )