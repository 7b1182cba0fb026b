"""Daily fortune slips drawn over a random background image."""

from __future__ import annotations

import hashlib
from datetime import date
from pathlib import Path
from zipfile import ZipFile

from PIL import Image, ImageDraw, ImageFont

IMAGES_DIR = "data/Fortune/"
OMIKUJI_JSON = IMAGES_DIR + "text.json"
FONT_PATH = "data/Font/sakura.ttf"
CACHE_DIR = IMAGES_DIR + "cache/"
DEFAULT_KIND = "车万"

TABLE = (
    "车万", "DC4", "爱因斯坦", "星空列车", "樱云之恋", "富婆妹", "李清歌",
    "公主连结", "原神", "明日方舟", "碧蓝航线", "碧蓝幻想", "战双", "阴阳师",
    "赛马娘", "东方归言录", "奇异恩典", "夏日口袋", "ASoul",
)
_INDEX = {name: i for i, name in enumerate(TABLE)}

_COLUMN = 9


def offset(total: int, now: int, distance: float) -> float:
    """Offset of the ``now``-th of ``total`` items spaced by ``distance``."""
    if total % 2 == 0:
        return (float(now - total // 2) - 1) * distance
    return (float(now - total // 2) - 1.5) * distance


def rows_num(total: int, div: int) -> int:
    """Number of groups of ``div`` needed to hold ``total`` items."""
    rows, rest = divmod(total, div)
    return rows + 1 if rest else rows


def kind_index(name: str) -> int:
    """Return the stored index of a background kind; raise KeyError if unknown."""
    try:
        return _INDEX[name]
    except KeyError:
        raise KeyError(f"没有这个底图哦～: {name}") from None


def kind_for(value: int) -> str:
    """Return the background kind stored in ``value``, defaulting to 车万."""
    v = value & 0xFF
    return TABLE[v] if v < len(TABLE) else DEFAULT_KIND


def per_day_index(user_id: int, n: int, day: date | None = None) -> int:
    """Pick an index below ``n`` that stays fixed for a user during one day."""
    if n <= 0:
        raise ValueError("nothing to choose from")
    day = day or date.today()
    seed = f"{user_id}:{day.isoformat()}".encode()
    return int.from_bytes(hashlib.sha256(seed).digest()[:8], "big") % n


def cache_name(zipfile: str, index: int, title: str, text: str) -> str:
    """Name of the cached picture for one background and slip."""
    data = (zipfile + str(index) + title + text).encode()
    return hashlib.md5(data).hexdigest()


def random_image(
    path: str | Path, user_id: int, day: date | None = None
) -> tuple[Image.Image, int]:
    """Choose the user's image of the day from a zip; return it and its index."""
    with ZipFile(path) as archive:
        entries = archive.infolist()
        index = per_day_index(user_id, len(entries), day)
        with archive.open(entries[index]) as handle:
            image = Image.open(handle)
            image.load()
    return image, index


def char_positions(
    text: str, char_width: float, char_height: float
) -> list[tuple[str, float, float]]:
    """Lay the slip text out in right-to-left columns; return (char, x, y)."""
    chars = list(text)
    count = len(chars)
    columns = rows_num(count, _COLUMN)
    positions = []
    if columns == 2:
        div = rows_num(count, 2)
        for i, ch in enumerate(chars):
            col = rows_num(i + 1, div)
            in_col = min(count - (col - 1) * div, div)
            row = i % div + 1
            x = -offset(columns, col, char_width) + 115
            if col == 1:
                y = offset(_COLUMN, row, char_height) + 320.0
            else:
                y = offset(_COLUMN, row + (_COLUMN - in_col), char_height) + 320.0
            positions.append((ch, x, y))
        return positions
    for i, ch in enumerate(chars):
        col = rows_num(i + 1, _COLUMN)
        in_col = min(count - (col - 1) * _COLUMN, _COLUMN)
        row = i % _COLUMN + 1
        x = -offset(columns, col, char_width) + 115
        y = offset(in_col, row, char_height) + 320.0
        positions.append((ch, x, y))
    return positions


def draw(
    background: Image.Image, title: str, text: str, font_path: str | Path = FONT_PATH
) -> Image.Image:
    """Draw the title and slip text onto the background and return the result."""
    title_font = ImageFont.truetype(str(font_path), 45)
    body_font = ImageFont.truetype(str(font_path), 23)
    canvas = Image.new("RGBA", (background.height, background.width))
    canvas.paste(background.convert("RGBA"), (0, 0))
    pen = ImageDraw.Draw(canvas)

    title_width = title_font.getlength(title)
    pen.text((140 - title_width / 2, 112), title, fill=(255, 255, 255), font=title_font, anchor="ls")

    char_width = body_font.getlength("测") + 10
    char_height = sum(body_font.getmetrics()) + 10
    for ch, x, y in char_positions(text, char_width, char_height):
        pen.text((x, y), ch, fill=(0, 0, 0), font=body_font, anchor="ls")
    return canvas