"""GitHub repository search."""

from __future__ import annotations

import json
import re
from urllib.parse import urlencode

import requests

SEARCH_API = "https://api.github.com/search/repositories"
PREVIEW_BASE = "https://opengraph.githubassets.com/0/"
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/88.0.4324.182 Safari/537.36"
)

_COMMAND_RE = re.compile(r"^>github\s(-.{1,10}? )?(.*)$")


class HTTPStatusError(Exception):
    """Raised when a request does not answer with status 200."""


def notnull(text: str) -> str:
    """Return ``text``, or "None" when it is empty."""
    return text if text else "None"


def net_get(url: str, headers: dict | None = None) -> bytes:
    """GET ``url`` and return the body; raise on any status other than 200."""
    response = requests.get(url, headers=headers, timeout=30)
    body = response.content
    if response.status_code != 200:
        raise HTTPStatusError(f"code {response.status_code}")
    return body


def parse_command(text: str) -> tuple[str, str] | None:
    """Split ">github [-x ]query" into (option, query); None if no match."""
    match = _COMMAND_RE.match(text)
    if match is None:
        return None
    return match.group(1) or "", match.group(2)


def search_repository(query: str) -> dict:
    """Return the best matching repository for ``query``."""
    url = SEARCH_API + "?" + urlencode({"q": query})
    info = json.loads(net_get(url, {"User-Agent": USER_AGENT}))
    if _int(info.get("total_count")) == 0 or not info.get("items"):
        raise LookupError("没有找到这样的仓库")
    return info["items"][0]


def _str(value) -> str:
    return value if isinstance(value, str) else ""


def _int(value) -> int:
    if isinstance(value, (int, float)):
        return int(value)
    return 0


def format_repository(repo: dict) -> str:
    """Render a repository as the text reply."""
    license_info = repo.get("license") or {}
    return (
        f"{_str(repo.get('full_name'))}\n"
        f"Description: {_str(repo.get('description'))}\n"
        f"Star/Fork/Issue: {_int(repo.get('watchers'))}/"
        f"{_int(repo.get('forks'))}/{_int(repo.get('open_issues'))}\n"
        f"Language: {notnull(_str(repo.get('language')))}\n"
        f"License: {notnull(_str(license_info.get('key')).upper())}\n"
        f"Last pushed: {_str(repo.get('pushed_at'))}\n"
        f"Jump: {_str(repo.get('html_url'))}\n"
    )


def preview_image_url(repo: dict) -> str:
    """Return the social preview image URL of a repository."""
    return PREVIEW_BASE + _str(repo.get("full_name"))