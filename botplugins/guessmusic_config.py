"""Configuration and local playlist library of the song guessing game."""

from __future__ import annotations

import json
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_PLAYLIST_NAME = "FM"
DEFAULT_PLAYLIST_ID = 3136952023
EMPTY_LIBRARY_MESSAGE = "所设置的歌库不存在任何歌单！"
UNKNOWN_LIST_MESSAGE = "歌单名称错误，可以发送“歌单列表”获取歌单名称"


@dataclass
class ListRaw:
    """A local playlist bound to an online playlist id."""

    name: str
    id: int = 0


@dataclass
class DefaultList:
    """The playlist a group plays by default."""

    group_id: int
    name: str


@dataclass
class Config:
    """User settings of the game."""

    music_path: str = ""
    local: bool = False
    api: bool = False
    cookie: str = ""
    playlist: list[ListRaw] = field(default_factory=list)
    defaultlist: list[DefaultList] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Build a configuration from its decoded JSON form."""
        return cls(
            music_path=data.get("musicPath") or "",
            local=bool(data.get("local")),
            api=bool(data.get("api")),
            cookie=data.get("cookie") or "",
            playlist=[
                ListRaw(item.get("name") or "", int(item.get("id") or 0))
                for item in data.get("playlist") or []
            ],
            defaultlist=[
                DefaultList(int(item.get("gid") or 0), item.get("name") or "")
                for item in data.get("defaultlist") or []
            ],
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form of the configuration."""
        return {
            "musicPath": self.music_path,
            "local": self.local,
            "api": self.api,
            "cookie": self.cookie,
            "playlist": [{"name": p.name, "id": p.id} for p in self.playlist],
            "defaultlist": [{"gid": d.group_id, "name": d.name} for d in self.defaultlist],
        }

    def default_list_for(self, group_id: int) -> str | None:
        """Name of the default playlist of a group, or None if it has none."""
        return next((d.name for d in self.defaultlist if d.group_id == group_id), None)

    def bind_playlist(self, name: str, playlist_id: int) -> None:
        """Bind a local playlist to an online playlist id."""
        self.playlist.append(ListRaw(name, int(playlist_id)))

    def unbind_playlist(self, name: str) -> None:
        """Drop every binding of a local playlist."""
        self.playlist = [p for p in self.playlist if p.name != name]


@dataclass(frozen=True)
class ListInfo:
    """A local playlist folder and what it holds."""

    name: str
    number: int
    id: int = 0


@dataclass(frozen=True)
class OvooaData:
    """A random song answer of the playlist API."""

    code: int = 0
    text: str = ""
    song: str = ""
    singer: str = ""
    cover: str = ""
    music: str = ""
    id: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OvooaData:
        inner = data.get("data")
        if not isinstance(inner, dict):
            inner = {}
        return cls(
            code=int(data.get("code") or 0),
            text=data.get("text") or "",
            song=inner.get("song") or "",
            singer=inner.get("singer") or "",
            cover=inner.get("cover") or "",
            music=inner.get("Music") or "",
            id=int(inner.get("id") or 0),
        )


def save_config(config: Config, path: str | Path) -> None:
    """Write the configuration as JSON."""
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(config.to_dict(), handle, ensure_ascii=False)
        handle.write("\n")


def load_config(path: str | Path, bot_path: str | Path) -> Config:
    """Read the configuration, creating and saving the default one if absent."""
    path = Path(path)
    if path.exists():
        with open(path, encoding="utf-8") as handle:
            return Config.from_dict(json.load(handle))
    config = Config(
        music_path=f"{bot_path}/data/guessmusic/music/",
        api=True,
        local=True,
        playlist=[ListRaw(DEFAULT_PLAYLIST_NAME, DEFAULT_PLAYLIST_ID)],
    )
    save_config(config, path)
    return config


def get_list(config: Config, music_path: str | Path | None = None) -> list[ListInfo]:
    """List the playlist folders of the music library, in name order.

    Raises LookupError when the library holds nothing at all.
    """
    root = Path(config.music_path if music_path is None else music_path)
    bound = {p.name: p.id for p in config.playlist if p.id != 0}
    root.mkdir(parents=True, exist_ok=True)
    entries = sorted(root.iterdir(), key=lambda p: p.name)
    if not entries:
        raise LookupError(EMPTY_LIBRARY_MESSAGE)
    result = []
    for entry in entries:
        if not entry.is_dir():
            continue
        try:
            number = sum(1 for _ in entry.iterdir())
        except OSError:
            continue
        result.append(ListInfo(entry.name, number, bound.get(entry.name, 0)))
    return result


def delete_list(config: Config, target: str) -> list[ListInfo]:
    """Delete a playlist by name, or unbind it by its online id.

    Deleting by name removes the local folder too. Returns the new list.
    """
    lists = get_list(config)
    found = next(
        (info for info in lists if target == info.name or target == str(info.id)),
        None,
    )
    if found is None:
        raise LookupError(UNKNOWN_LIST_MESSAGE)
    if target == found.name:
        shutil.rmtree(Path(config.music_path) / target)
    config.unbind_playlist(found.name)
    return get_list(config)