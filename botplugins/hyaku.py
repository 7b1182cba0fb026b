"""Ogura Hyakunin Isshu: the hundred poems."""

from __future__ import annotations

import csv
import random
import re
from dataclasses import astuple, dataclass
from pathlib import Path
from typing import Iterable, Sequence

BED = "https://gitcode.net/u011570312/OguraHyakuninIsshu/-/raw/master/"
CSV_NAME = "小倉百人一首.csv"
POEM_COUNT = 100

_LABELS = (
    ("●", "番号"),
    ("◉", "歌人"),
    ("○", "上の句"),
    ("○", "下の句"),
    ("◎", "上の句ひらがな"),
    ("◎", "下の句ひらがな"),
)
_REQUEST_RE = re.compile(r"^百人一首之\s?([0-9]+)$")


@dataclass(frozen=True)
class Poem:
    """One poem row of the collection."""

    number: str
    poet: str
    upper: str
    lower: str
    upper_kana: str
    lower_kana: str

    def __str__(self) -> str:
        return "".join(
            f"{mark}{label}：{value}\n"
            for (mark, label), value in zip(_LABELS, astuple(self))
        )


def parse_poems(rows: Iterable[Sequence[str]]) -> list[Poem]:
    """Build the poems from CSV rows, the first being the title row."""
    records = list(rows)[1:]
    if len(records) != POEM_COUNT:
        raise ValueError("invalid csvfile")
    poems = []
    for expected, record in enumerate(records, start=1):
        if len(record) != len(_LABELS):
            raise ValueError("invalid csvfile")
        if int(record[0]) != expected:
            raise ValueError("invalid csvfile")
        poems.append(Poem(*record))
    return poems


def load_poems(path: str | Path) -> list[Poem]:
    """Read the poems from a CSV file."""
    with open(path, newline="", encoding="utf-8-sig") as handle:
        return parse_poems(csv.reader(handle))


def image_names(number: int) -> tuple[str, str]:
    """Relative names of the card picture and the text picture of a poem."""
    return f"img/{number:03d}.jpg", f"img/{number:03d}.png"


def parse_request(text: str) -> int | None:
    """Return the poem number a message asks for, or None if it asks nothing.

    "百人一首" asks for a random poem; "百人一首之n" for poem n.
    """
    if text == "百人一首":
        return random.randint(1, POEM_COUNT)
    match = _REQUEST_RE.match(text)
    if match is None:
        return None
    number = int(match.group(1))
    if not 1 <= number <= POEM_COUNT:
        raise ValueError("超出范围")
    return number