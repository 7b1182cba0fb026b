"""Song guessing game: drawing songs, cutting clips and judging answers."""

from __future__ import annotations

import json
import random
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Protocol

import requests

from botplugins.guessmusic_config import Config, OvooaData, get_list

MUSIC_TYPE_LIST = "mp3;MP3;wav;WAV;amr;AMR;3gp;3GP;3gpp;3GPP;acc;ACC"
CUT_TIMES = ("00:00:05", "00:00:30", "00:01:00")
CLIP_SECONDS = "10"
OVOOA_API = "https://ovooa.com/API/163_Music_Rand/api.php?id="
MAX_CLIP = 2
MAX_WRONG_ANSWERS = 6

_ANSWER_RE = re.compile(r"^-\S{1,}")


class _Rng(Protocol):
    def randrange(self, stop: int) -> int: ...

    def choice(self, seq): ...


@dataclass(frozen=True)
class MusicInfo:
    """What a song's file name tells: "title - singer[ - other].ext"."""

    file_name: str
    extension: str
    name: str
    singer: str
    alias: str | None = None

    @property
    def answer(self) -> str:
        """The answer text revealed at the end of a game."""
        text = "歌名:" + self.name + "\n歌手:" + self.singer
        if self.alias is not None:
            text += "\n其他信息:\n" + self.alias.replace("&", "\n")
        return text


def parse_music_name(music_name: str) -> MusicInfo:
    """Parse a song file name; raise ValueError if it breaks the naming rule."""
    extension = music_name.split(".")[-1]
    if extension not in MUSIC_TYPE_LIST:
        raise ValueError(f"抽取到了歌曲：\n{music_name}\n该歌曲不是音乐后缀，请联系bot主人修改")
    parts = music_name.replace("." + extension, "").split(" - ")
    if len(parts) == 1:
        raise ValueError(f"抽取到了歌曲：\n{music_name}\n该歌曲命名不符合命名规则，请联系bot主人修改")
    alias = parts[2] if len(parts) > 2 else None
    return MusicInfo(music_name, extension, parts[0], parts[1], alias)


def get_local_music(music_dir: str | Path, rng: _Rng | None = None) -> str:
    """Pick a random song file from a folder; "" when it holds no file."""
    rng = rng or random
    files = sorted(entry.name for entry in Path(music_dir).iterdir() if not entry.is_dir())
    if not files:
        return ""
    return rng.choice(files)


def draw_by_ovooa(playlist_id: int, session: requests.Session | None = None) -> int:
    """Ask the playlist API for a random song id of an online playlist."""
    response = (session or requests).get(OVOOA_API + str(playlist_id), timeout=30)
    response.raise_for_status()
    parsed = OvooaData.from_dict(json.loads(response.content))
    if parsed.code != 1:
        raise LookupError(parsed.text or f"API code {parsed.code}")
    return parsed.id


def music_lottery(
    config: Config,
    list_name: str,
    downloader: Callable[[int, Path], str] | None = None,
    rng: _Rng | None = None,
) -> tuple[Path, str]:
    """Draw a song from a playlist and return its folder and file name.

    When the playlist is bound to an online list and the API is enabled,
    two times in three a song is fetched through ``downloader``
    (called with the online id and the folder); on failure a local song is used.
    """
    rng = rng or random
    try:
        lists = get_list(config)
    except LookupError as exc:
        raise LookupError(f"获取列表错误,{exc}") from exc
    ids = {info.name: info.id for info in lists}
    if list_name not in ids:
        raise LookupError("指定的歌单不存在与列表当中")
    playlist_id = ids[list_name]
    music_dir = Path(config.music_path) / list_name
    music_dir.mkdir(parents=True, exist_ok=True)
    use_api = playlist_id != 0 and config.api and downloader is not None

    if not any(music_dir.iterdir()):
        if not use_api:
            raise LookupError("本地歌单数据为0")
        try:
            return music_dir, downloader(playlist_id, music_dir)
        except Exception as exc:
            raise LookupError(f"本地歌单数据为0,API下载歌曲失败\n{exc}") from exc

    if not use_api or rng.randrange(3) == 1:
        return music_dir, get_local_music(music_dir, rng)
    try:
        return music_dir, downloader(playlist_id, music_dir)
    except Exception:
        return music_dir, get_local_music(music_dir, rng)


def cut_music(music_path: str | Path, output_dir: str | Path) -> list[Path]:
    """Cut three ten-second clips out of a song with ffmpeg; return their paths."""
    output_dir = Path(output_dir).resolve()
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise RuntimeError(f"[生成歌曲目录错误]ERROR: {exc}") from exc
    clips = [output_dir / f"{i}.wav" for i in range(len(CUT_TIMES))]
    args = ["ffmpeg", "-y", "-i", str(music_path)]
    for start, clip in zip(CUT_TIMES, clips):
        args += ["-ss", start, "-t", CLIP_SECONDS, str(clip)]
    args.append("-hide_banner")
    try:
        result = subprocess.run(args, capture_output=True)
    except OSError as exc:
        raise RuntimeError(f"[生成歌曲错误]ERROR: {exc}") from exc
    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace") if result.stderr else ""
        raise RuntimeError(f"[生成歌曲错误]ERROR: {stderr}")
    return clips


@dataclass(frozen=True)
class Outcome:
    """The bot's reaction to one event of the game."""

    reply: str
    clip: int | None = None
    finished: bool = False
    play_song: bool = False


@dataclass
class GuessGame:
    """State of one running guess: clips heard and wrong answers given."""

    info: MusicInfo
    owner_id: int
    clip_count: int = 0
    answer_count: int = 0
    finished: bool = False

    def _win(self, what: str) -> Outcome:
        self.finished = True
        return Outcome(
            f"太棒了，你猜对{what}了！答案是\n{self.info.answer}\n\n下面欣赏猜歌的歌曲",
            finished=True,
            play_song=True,
        )

    def answer(self, user_id: int, text: str) -> Outcome | None:
        """Judge a "-..." message; None when the message is not an answer."""
        if self.finished:
            raise RuntimeError("game is over")
        if not _ANSWER_RE.match(text):
            return None
        guess = text.replace("-", "", 1)
        if guess == "取消":
            if user_id != self.owner_id:
                return Outcome("你无权限取消")
            self.finished = True
            return Outcome(
                f"游戏已取消，猜歌答案是\n{self.info.answer}\n\n\n下面欣赏猜歌的歌曲",
                finished=True,
                play_song=True,
            )
        if guess == "提示":
            self.clip_count += 1
            if self.clip_count > MAX_CLIP:
                return Outcome("已经没有提示了哦")
            return Outcome("再听这段音频，要仔细听哦", clip=self.clip_count)
        folded = guess.casefold()
        for target, what in (
            (self.info.name, "歌曲名"),
            (self.info.singer, "歌手名"),
            (self.info.alias or "", "出处"),
        ):
            if guess in target or folded == target.casefold():
                return self._win(what)
        self.clip_count += 1
        if self.clip_count > MAX_CLIP and self.answer_count < MAX_WRONG_ANSWERS:
            self.answer_count += 1
            return Outcome("答案不对哦，加油啊~")
        if self.clip_count > MAX_CLIP:
            self.finished = True
            return Outcome(
                f"次数到了，没能猜出来。答案是\n{self.info.answer}\n\n下面欣赏猜歌的歌曲",
                finished=True,
                play_song=True,
            )
        self.answer_count += 1
        return Outcome("答案不对，再听这段音频，要仔细听哦", clip=self.clip_count)

    def timeout_clip(self) -> Outcome | None:
        """Play the next clip after a quiet spell; None once all were played."""
        self.clip_count += 1
        if self.clip_count > MAX_CLIP:
            return None
        return Outcome("好像有些难度呢，再听这段音频，要仔细听哦", clip=self.clip_count)