"""Genshin-style ten-pull gacha rendered from a card archive."""

from __future__ import annotations

import io
import random
import re
import threading
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import NamedTuple

from PIL import Image

_NAME_RE = re.compile(r"_(.*)\.png")
_PREFIX_LEN = len("Genshin/")
_CANVAS_SIZE = (1920, 1080)
_CANVAS_COLOR = (50, 50, 50, 255)
_FIRST_X = 230
_CARD_STEP = 146
_REPLY_POS = (1270, 945)


@dataclass
class GachaSettings:
    """Per-chat gacha options packed into one integer."""

    value: int = 0

    def is_five_star_mode(self) -> bool:
        return self.value & 1 == 1

    def set_mode(self, five_stars: bool) -> bool:
        """Switch the five-star pool on or off and return the new mode."""
        if five_stars:
            self.value |= 1
        else:
            self.value &= 0xFFFFFFFFFFFFFFFE
        return five_stars


class CardArchive:
    """Card pictures stored in a zip whose entries sit under one top folder."""

    def __init__(self, path: str | Path) -> None:
        self._zip = zipfile.ZipFile(path)
        self._entries: dict[str, zipfile.ZipInfo] = {}
        self._tree: dict[str, list[str]] = {}
        self.star3: str | None = None
        self.star4: str | None = None
        self.star5: str | None = None
        for info in self._zip.infolist():
            if info.is_dir():
                self._tree[info.filename] = []
                continue
            name = info.filename[_PREFIX_LEN:]
            self._entries[name] = info
            slash = name.rfind("/")
            if slash < 0:
                self._tree[name] = [name]
                continue
            folder = name[:slash]
            if not folder:
                continue
            self._tree.setdefault(folder, []).append(name)
            if folder == "gacha":
                base = name[slash + 1:]
                if base == "ThreeStar.png":
                    self.star3 = name
                elif base == "FourStar.png":
                    self.star4 = name
                elif base == "FiveStar.png":
                    self.star5 = name

    def __enter__(self) -> CardArchive:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self._zip.close()

    def files(self, folder: str) -> list[str]:
        """Names stored under ``folder`` (a top-level file maps to itself)."""
        return list(self._tree.get(folder, []))

    def read(self, name: str) -> bytes:
        """Return the bytes of one entry; raise KeyError if it is absent."""
        try:
            info = self._entries[name]
        except KeyError:
            raise KeyError(f"no such entry: {name}") from None
        return self._zip.read(info)

    def icon_for(self, name: str) -> str:
        """Name of the element icon that belongs to a card picture."""
        underscore = name.find("_")
        start = name.rfind("/") + 1
        if underscore < start:
            raise ValueError(f"card name has no element prefix: {name}")
        return _first(self, name[start:underscore] + ".png")


def _first(archive: CardArchive, key: str) -> str:
    names = archive.files(key)
    if not names:
        raise KeyError(f"archive holds no {key}")
    return names[0]


class Card(NamedTuple):
    """One drawn card and the pictures laid over it."""

    name: str
    background: str
    star: str
    icon: str


@dataclass
class GachaResult:
    """The cards of one pull in display order and the reply text."""

    cards: list[Card] = field(default_factory=list)
    text: str = ""
    five_star: bool = False

    @property
    def reply(self) -> str:
        if self.five_star:
            return "恭喜你抽到了: \n" + self.text
        return "十连成功~"


def reply_names(names: list[str], num: int, name_str: str) -> str:
    """List five-star names under a heading; num 1 is characters, 2 weapons."""
    if num == 1:
        parts = ["★五星角色★\n"]
    elif num == 2 and name_str:
        parts = ["\n★五星武器★\n"]
    else:
        parts = ["★五星武器★\n"]
    for name in names:
        match = _NAME_RE.search(name)
        if match is None:
            raise ValueError(f"card name has no display part: {name}")
        parts.append(match.group(1) + " * ")
    return "".join(parts)


class Gacha:
    """Draws cards from an archive, with a pity five-star every nine pulls."""

    def __init__(self, archive: CardArchive, rng: random.Random | None = None) -> None:
        self.archive = archive
        self.rng = rng or random.Random()
        self.total = 0
        self._lock = threading.Lock()

    def _pick(self, folder: str) -> str:
        return self.rng.choice(self.archive.files(folder))

    def draw(self, count: int, settings: GachaSettings) -> GachaResult:
        """Draw ``count`` cards and return them in display order."""
        five_bg = _first(self.archive, "five_bg.jpg")
        four_bg = _first(self.archive, "four_bg.jpg")
        three_bg = _first(self.archive, "three_bg.jpg")
        five_chars: list[str] = []
        five_arms: list[str] = []
        four_chars: list[str] = []
        four_arms: list[str] = []
        three_arms: list[str] = []

        def five() -> None:
            if self.rng.randrange(2) == 0:
                five_chars.append(self._pick("five"))
            else:
                five_arms.append(self._pick("five2"))

        def four() -> None:
            if self.rng.randrange(2) == 0:
                four_chars.append(self._pick("four"))
            else:
                four_arms.append(self._pick("four2"))

        with self._lock:
            guaranteed = self.total % 9 == 0
        if guaranteed:
            five()
            count -= 1

        if settings.is_five_star_mode():
            for _ in range(count):
                five()
        else:
            # three stars 80%, four stars 17%, five stars 3%
            for _ in range(count):
                roll = self.rng.randrange(1000)
                if roll <= 800:
                    three_arms.append(self._pick("Three"))
                elif roll <= 885:
                    four_chars.append(self._pick("four"))
                elif roll <= 970:
                    four_arms.append(self._pick("four2"))
                elif roll <= 985:
                    five_chars.append(self._pick("five"))
                else:
                    five_arms.append(self._pick("five2"))
            if not four_chars and not four_arms and three_arms:
                three_arms.pop()
                four()
            with self._lock:
                self.total += 1

        result = GachaResult()
        if five_chars:
            result.text += reply_names(five_chars, 1, result.text)
            result.five_star = True
        if five_arms:
            result.text += reply_names(five_arms, 2, result.text)
            result.five_star = True
        groups = (
            (five_chars, self.archive.star5, five_bg),
            (four_chars, self.archive.star4, four_bg),
            (five_arms, self.archive.star5, five_bg),
            (four_arms, self.archive.star4, four_bg),
            (three_arms, self.archive.star3, three_bg),
        )
        for names, star, background in groups:
            for name in names:
                if star is None:
                    raise KeyError("archive holds no star icon")
                result.cards.append(Card(name, background, star, self.archive.icon_for(name)))
        return result

    def _overlay(self, canvas: Image.Image, name: str, position: tuple[int, int]) -> None:
        with Image.open(io.BytesIO(self.archive.read(name))) as picture:
            canvas.alpha_composite(picture.convert("RGBA"), dest=position)

    def render(self, result: GachaResult) -> Image.Image:
        """Compose the pull picture: backdrop, each card in a row, share icon."""
        canvas = Image.new("RGBA", _CANVAS_SIZE, _CANVAS_COLOR)
        self._overlay(canvas, _first(self.archive, "bg0.jpg"), (0, 0))
        for i, card in enumerate(result.cards):
            position = (_FIRST_X + _CARD_STEP * i, 0)
            for name in (card.background, card.name, card.star, card.icon):
                self._overlay(canvas, name, position)
        self._overlay(canvas, _first(self.archive, "Reply.png"), _REPLY_POS)
        return canvas