# botplugins

The logic behind a set of chat bot plugins, kept apart from any bot
framework. Each module does one job and returns plain Python values:
strings to send, file paths, Pillow images or parsed records.

## Modules

| Module | What it does |
| --- | --- |
| `botplugins.epidemic` | Fetches regional epidemic figures (`query_epidemic`, `parse_epidemic`), finds a city in the area tree (`find_city`) and formats a report (`format_report`). |
| `botplugins.event` | Switches for auto-accepting friend requests, group invites and the owner's own requests (`EventSettings`); packs request flags into four characters (`encode_flag`, `decode_flag`); parses the owner's commands (`parse_decision`, `parse_toggle`), decides on auto-accept (`should_auto_accept`) and formats notices (`format_friend_request`, `format_group_invite`). |
| `botplugins.github` | Parses the `>github` command (`parse_command`), searches repositories (`search_repository`) and formats the first hit (`format_repository`, `preview_image_url`). |
| `botplugins.funny` | Picks a random joke from an SQLite database and puts a name into it (`JokeBook`). |
| `botplugins.fortune` | Daily fortune: background kinds (`kind_index`, `kind_for`), a per-user-per-day choice (`per_day_index`, `random_image`), text layout (`char_positions`) and the finished picture (`draw`). |
| `botplugins.hyaku` | The hundred poems: loads them from CSV (`load_poems`, `parse_poems`), names their pictures (`image_names`) and parses requests (`parse_request`). |
| `botplugins.jandan` | Collects picture links from listing pages into an SQLite store (`PictureStore`, `parse_page`, `update`) and hands out a random one. |
| `botplugins.genshin` | Ten-pull gacha over a card archive (`Gacha`, `CardArchive`, `GachaResult`), with a normal and a five-star-only pool (`GachaSettings`); `Gacha.render` composes the result picture. |
| `botplugins.hs` | Hearthstone card search and deck-code images (`search_cards`, `deck_image`, `find_deck_code`). |
| `botplugins.guessmusic_config` | Music-guessing settings: library path, bound playlists and per-group default lists (`Config`, `load_config`, `save_config`, `get_list`, `delete_list`). |
| `botplugins.guessmusic` | The guessing game: parses song file names (`parse_music_name`), draws a song (`music_lottery`), cuts three clips with ffmpeg (`cut_music`) and judges answers (`GuessGame`). |
| `botplugins.imagefinder` | Keyword illustration search and captions (`soutu_api`, `format_illust`). |
| `botplugins.font` | Maps a font choice in a "渲染文字" command to a font file path (`font_file`, `parse_command`). |
| `botplugins.gifmaker` | Per-user working folder and avatar download (`GifContext`), material fetching (`download_material`, `download_range`), frame loading and circular cropping (`load_first_frame`, `circle`). |

## Examples

Request flags travel through chat as a short string and come back unchanged:

```python
from botplugins.event import encode_flag, decode_flag

text = encode_flag("1234567890")
assert decode_flag(text) == "1234567890"
```

Missing repository fields are shown as `None`:

```python
from botplugins.github import notnull

assert notnull("") == "None"
assert notnull("MIT") == "MIT"
```

The fortune text is laid out in columns of nine characters:

```python
from botplugins.fortune import rows_num

assert rows_num(18, 9) == 2
assert rows_num(19, 9) == 3
```

## What it does not do

- It does not connect to any chat service, register commands or send
  messages; a bot calls these functions and delivers the results.
- It has no command-line program.
- `botplugins.gifmaker` prepares avatars and materials only; it holds no
  ready-made meme compositions.
- `botplugins.font` only chooses a font file; it does not render text.
- Data files (joke database, fortune backgrounds, gacha archive, poem CSV,
  fonts) are not shipped; the functions take their paths as arguments.

## Requirements

Python 3.10 or later, with `requests`, `pillow` and `lxml`.
`botplugins.guessmusic.cut_music` runs the `ffmpeg` program, which must be
on the `PATH` where it is used.