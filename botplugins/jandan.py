"""Jandan "boring pictures" collection."""

from __future__ import annotations

import logging
import re
import sqlite3
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from lxml import html as lxml_html

API = "http://jandan.net/pic"

_log = logging.getLogger(__name__)

_CRC64_ISO_POLY = 0xD800000000000000
_MASK64 = 0xFFFFFFFFFFFFFFFF


def _make_table() -> list[int]:
    table = []
    for i in range(256):
        crc = i
        for _ in range(8):
            crc = (crc >> 1) ^ _CRC64_ISO_POLY if crc & 1 else crc >> 1
        table.append(crc)
    return table


_TABLE = _make_table()

_CURRENT_XPATH = "//*[@id='comments']/div[2]/div/span[@class='current-comment-page']/text()"
_PICTURES_XPATH = "//*[@class='view_img_link']"
_PREVIOUS_XPATH = (
    "//*[@id='comments']/div[@class='comments']/div[@class='cp-pagenavi']"
    "/a[@class='previous-comment-page']"
)


def picture_id(url: str) -> int:
    """CRC-64 (ISO polynomial) of the URL, used as the picture key."""
    crc = _MASK64
    for byte in url.encode():
        crc = _TABLE[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc ^ _MASK64


def _to_signed(value: int) -> int:
    return value - (1 << 64) if value >= 1 << 63 else value


class PictureStore:
    """Picture URLs stored in the SQLite table ``picture``."""

    TABLE = "picture"

    def __init__(self, path: str | Path) -> None:
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(str(path), check_same_thread=False)
        self._conn.execute(
            f"CREATE TABLE IF NOT EXISTS {self.TABLE} "
            "(id INTEGER PRIMARY KEY NOT NULL, url TEXT NOT NULL)"
        )
        self._conn.commit()

    def __enter__(self) -> PictureStore:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def add(self, url: str) -> int:
        """Store a URL and return its picture id."""
        pid = picture_id(url)
        with self._lock:
            self._conn.execute(
                f"INSERT OR REPLACE INTO {self.TABLE} (id, url) VALUES (?, ?)",
                (_to_signed(pid), url),
            )
            self._conn.commit()
        return pid

    def contains(self, picture_id: int) -> bool:
        with self._lock:
            row = self._conn.execute(
                f"SELECT 1 FROM {self.TABLE} WHERE id = ?", (_to_signed(picture_id),)
            ).fetchone()
        return row is not None

    def random_url(self) -> str:
        """Return a random stored URL; raise LookupError if there is none."""
        with self._lock:
            row = self._conn.execute(
                f"SELECT url FROM {self.TABLE} ORDER BY RANDOM() LIMIT 1"
            ).fetchone()
        if row is None:
            raise LookupError("no picture stored")
        return row[0]

    def count(self) -> int:
        with self._lock:
            (n,) = self._conn.execute(f"SELECT COUNT(1) FROM {self.TABLE}").fetchone()
        return n

    def close(self) -> None:
        self._conn.close()


@dataclass
class Page:
    """What one listing page holds."""

    current: int | None
    pictures: list[str] = field(default_factory=list)
    previous: str | None = None


def parse_page(html: str) -> Page:
    """Extract the page number, picture URLs and previous-page link."""
    doc = lxml_html.fromstring(html)
    current = None
    texts = doc.xpath(_CURRENT_XPATH)
    if texts:
        match = re.search(r"\d+", str(texts[0]))
        if match:
            current = int(match.group())
    pictures = [
        "https:" + element.get("href")
        for element in doc.xpath(_PICTURES_XPATH)
        if element.get("href") is not None
    ]
    previous = None
    links = doc.xpath(_PREVIOUS_XPATH)
    if links and links[0].get("href") is not None:
        previous = "https:" + links[0].get("href")
    return Page(current, pictures, previous)


def update(store: PictureStore, fetch: Callable[[str], str], start_url: str = API) -> int:
    """Walk back through the pages storing new pictures until a known one.

    Returns the number of pictures added.
    """
    page = parse_page(fetch(start_url))
    if page.current is None:
        raise ValueError("page number not found")
    total = page.current
    added = 0
    for i in range(total):
        _log.debug("处理第%d/%d页...", i, total)
        if i > 0:
            page = parse_page(fetch(url))
        for picture in page.pictures:
            if store.contains(picture_id(picture)):
                return added
            store.add(picture)
            added += 1
        if i != total - 1:
            if page.previous is None:
                break
            url = page.previous
    return added