"""Per-user working folders, avatar logos and picture materials for meme making."""

from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Sequence

import requests
from PIL import Image, ImageDraw

MATERIAL_BASE = "https://gitcode.net/m0_60838134/imagematerials/-/raw/main/"
MATERIAL_REFERER = "gitcode.net"
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/104.0.0.0 Safari/537.36"
)

_INT_RE = re.compile(r"[+-]?[0-9]+")
_log = logging.getLogger(__name__)

Fetch = Callable[[str], bytes]


def _default_fetch(url: str) -> bytes:
    response = requests.get(
        url, headers={"Referer": MATERIAL_REFERER, "User-Agent": USER_AGENT}, timeout=60
    )
    response.raise_for_status()
    return response.content


def logo_url(value: str) -> str:
    """URL of the avatar of a numeric user id, or of a picture by its hash."""
    if _INT_RE.fullmatch(value):
        return "http://q4.qlogo.cn/g?b=qq&nk=" + value + "&s=640"
    return "https://gchat.qpic.cn/gchatpic_new//--" + value.upper() + "/0"


def download_material(datapath: str | Path, name: str, fetch: Fetch | None = None) -> Path:
    """Return the local path of a material, downloading it first if missing."""
    target = Path(datapath) / "materials" / name
    if target.exists():
        _log.debug("[gif] dl %s exists at %s", name, target)
        return target
    fetch = fetch or _default_fetch
    try:
        data = fetch(MATERIAL_BASE + name)
        target.write_bytes(data)
    except Exception:
        target.unlink(missing_ok=True)
        raise
    _log.debug("[gif] dl %s to %s succeeded", name, target)
    return target


def download_range(
    datapath: str | Path, prefix: str, end: int, fetch: Fetch | None = None
) -> list[Path]:
    """Fetch materials ``prefix/0.png`` .. ``prefix/{end-1}.png`` concurrently."""
    (Path(datapath) / "materials" / prefix).mkdir(parents=True, exist_ok=True)
    names = [f"{prefix}/{i}.png" for i in range(end)]
    if not names:
        return []
    with ThreadPoolExecutor(max_workers=min(8, len(names))) as pool:
        futures = [pool.submit(download_material, datapath, n, fetch) for n in names]
        return [future.result() for future in futures]


def load_first_frame(path: str | Path, width: int, height: int) -> Image.Image:
    """Load the first frame of a picture as RGBA, resized when a size is given.

    A size of 0 in one dimension keeps the aspect ratio; 0 in both keeps the size.
    """
    with Image.open(path) as source:
        source.seek(0)
        frame = source.convert("RGBA")
    if width == 0 and height == 0:
        return frame
    if width == 0:
        width = max(1, round(frame.width * height / frame.height))
    elif height == 0:
        height = max(1, round(frame.height * width / frame.width))
    return frame.resize((width, height))


def load_first_frames(paths: Sequence[str | Path], size: int) -> list[Image.Image]:
    """Load the first frame of each of the first ``size`` pictures."""
    if size > len(paths):
        raise ValueError("not enough pictures")
    return [load_first_frame(path, 0, 0) for path in paths[:size]]


def circle(image: Image.Image) -> Image.Image:
    """Cut the largest centred circle out of a picture; outside is transparent."""
    side = min(image.width, image.height)
    left = (image.width - side) // 2
    top = (image.height - side) // 2
    square = image.convert("RGBA").crop((left, top, left + side, top + side))
    mask = Image.new("L", (side, side), 0)
    ImageDraw.Draw(mask).ellipse((0, 0, side - 1, side - 1), fill=255)
    result = Image.new("RGBA", (side, side), (0, 0, 0, 0))
    result.paste(square, (0, 0), mask)
    return result


def _default_download(url: str, path: Path) -> None:
    response = requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=60)
    response.raise_for_status()
    path.write_bytes(response.content)


class GifContext:
    """Working folder of one user and the avatars taking part in a picture."""

    def __init__(
        self,
        datapath: str | Path,
        user_id: int,
        download: Callable[[str, Path], None] | None = None,
    ) -> None:
        self.usrdir = Path(datapath) / "users" / str(user_id)
        self.usrdir.mkdir(parents=True, exist_ok=True)
        self.headimgsdir = [self.usrdir / "0.gif", self.usrdir / "1.gif"]
        self._download = download or _default_download

    def prepare_logos(self, *args: str) -> list[Path]:
        """Download each given avatar (user id or picture hash) as ``i.gif``."""
        paths = []
        for i, value in enumerate(args):
            path = self.usrdir / f"{i}.gif"
            self._download(logo_url(value), path)
            paths.append(path)
        return paths

    def get_logo(self, width: int, height: int) -> Image.Image:
        """The first avatar, resized and cut into a circle."""
        return circle(load_first_frame(self.headimgsdir[0], width, height))

    def get_logo2(self, width: int, height: int) -> Image.Image:
        """The second avatar, resized and cut into a circle."""
        return circle(load_first_frame(self.headimgsdir[1], width, height))