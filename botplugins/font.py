"""Choice of font for rendering arbitrary text to a picture."""

from __future__ import annotations

import re

FONT_DIR = "data/Font/"
FONT_FILE = FONT_DIR + "regular.ttf"
SYUMATU_FONT_FILE = FONT_DIR + "syumatu.ttf"
NISI_FONT_FILE = FONT_DIR + "nisi.ttf"
VIOLET_EVERGARDEN_FONT_FILE = FONT_DIR + "VioletEvergarden.ttf"
SAKURA_FONT_FILE = FONT_DIR + "sakura.ttf"
CONSOLAS_FONT_FILE = FONT_DIR + "consolas.ttf"

_FONTS = {
    "用终末体": SYUMATU_FONT_FILE,
    "用终末变体": NISI_FONT_FILE,
    "用紫罗兰体": VIOLET_EVERGARDEN_FONT_FILE,
    "用樱酥体": SAKURA_FONT_FILE,
    "用Consolas体": CONSOLAS_FONT_FILE,
    "用苹方体": FONT_FILE,
}

_COMMAND_RE = re.compile(r"^(用.+)?渲染文字([\s\S]+)$")


def font_file(choice: str | None) -> str:
    """Return the font file for a "用X体" choice; unknown choices use the default."""
    return _FONTS.get(choice or "", FONT_FILE)


def parse_command(text: str) -> tuple[str, str] | None:
    """Split "[用X体]渲染文字..." into (font file, text); None if no match."""
    match = _COMMAND_RE.match(text)
    if match is None:
        return None
    return font_file(match.group(1)), match.group(2)