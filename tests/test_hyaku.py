import csv

import pytest

from botplugins import hyaku

HEADER = ["番号", "歌人", "上の句", "下の句", "上の句ひらがな", "下の句ひらがな"]


def make_rows(count=100):
    return [HEADER] + [
        [str(i), f"poet{i}", f"up{i}", f"low{i}", f"ukana{i}", f"lkana{i}"]
        for i in range(1, count + 1)
    ]


def test_poem_str():
    poem = hyaku.Poem("1", "a", "b", "c", "d", "e")
    assert str(poem) == (
        "●番号：1\n◉歌人：a\n○上の句：b\n○下の句：c\n"
        "◎上の句ひらがな：d\n◎下の句ひらがな：e\n"
    )


def test_parse_poems():
    poems = hyaku.parse_poems(make_rows())
    assert len(poems) == 100
    assert poems[0].number == "1"
    assert poems[99].poet == "poet100"


def test_parse_poems_wrong_count():
    with pytest.raises(ValueError):
        hyaku.parse_poems(make_rows(99))


def test_parse_poems_wrong_fields():
    rows = make_rows()
    rows[5] = rows[5][:5]
    with pytest.raises(ValueError):
        hyaku.parse_poems(rows)


def test_parse_poems_wrong_number():
    rows = make_rows()
    rows[3][0] = "7"
    with pytest.raises(ValueError):
        hyaku.parse_poems(rows)


def test_load_poems_round_trip(tmp_path):
    path = tmp_path / "hyaku.csv"
    with open(path, "w", newline="", encoding="utf-8") as handle:
        csv.writer(handle).writerows(make_rows())
    poems = hyaku.load_poems(path)
    assert poems == hyaku.parse_poems(make_rows())


def test_image_names():
    assert hyaku.image_names(1) == ("img/001.jpg", "img/001.png")


def test_parse_request_number():
    assert hyaku.parse_request("百人一首之 7") == 7
    assert hyaku.parse_request("百人一首之100") == 100


def test_parse_request_out_of_range():
    with pytest.raises(ValueError):
        hyaku.parse_request("百人一首之101")
    with pytest.raises(ValueError):
        hyaku.parse_request("百人一首之0")


def test_parse_request_random_and_other():
    assert all(1 <= hyaku.parse_request("百人一首") <= 100 for _ in range(50))
    assert hyaku.parse_request("hello") is None