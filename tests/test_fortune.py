import io
import re
import zipfile
from datetime import date

import pytest
from PIL import Image

from botplugins import fortune


@pytest.mark.parametrize("rows,div", [(1, 9), (2, 9), (5, 2), (3, 7)])
def test_rows_num_exact_and_overflow(rows, div):
    assert fortune.rows_num(rows * div, div) == rows
    assert fortune.rows_num(rows * div + 1, div) == rows + 1


def test_rows_num_zero():
    assert fortune.rows_num(0, 9) == 0


@pytest.mark.parametrize("total", [1, 2, 3, 8, 9])
def test_offset_steps_by_distance(total):
    for now in range(2, total + 1):
        step = fortune.offset(total, now, 7.0) - fortune.offset(total, now - 1, 7.0)
        assert step == pytest.approx(7.0)


def test_kind_round_trip():
    for i, name in enumerate(fortune.TABLE):
        assert fortune.kind_index(name) == i
        assert fortune.kind_for(i) == name


def test_kind_for_masks_and_defaults():
    assert fortune.kind_for(0x100 + 2) == fortune.TABLE[2]
    assert fortune.kind_for(len(fortune.TABLE)) == "车万"


def test_kind_index_unknown():
    with pytest.raises(KeyError):
        fortune.kind_index("不存在")


def test_per_day_index_stable_and_in_range():
    day = date(2022, 10, 1)
    values = [fortune.per_day_index(uid, 7, day) for uid in range(50)]
    assert all(0 <= v < 7 for v in values)
    assert values == [fortune.per_day_index(uid, 7, day) for uid in range(50)]


def test_per_day_index_empty():
    with pytest.raises(ValueError):
        fortune.per_day_index(1, 0)


def test_cache_name():
    a = fortune.cache_name("x.zip", 1, "大吉", "好")
    assert re.fullmatch(r"[0-9a-f]{32}", a)
    assert a == fortune.cache_name("x.zip", 1, "大吉", "好")
    assert a != fortune.cache_name("x.zip", 2, "大吉", "好")


def test_random_image(tmp_path):
    sizes = [(10, 11), (12, 13), (14, 15)]
    path = tmp_path / "kind.zip"
    with zipfile.ZipFile(path, "w") as archive:
        for i, size in enumerate(sizes):
            buf = io.BytesIO()
            Image.new("RGB", size).save(buf, "PNG")
            archive.writestr(f"{i}.png", buf.getvalue())
    day = date(2022, 1, 2)
    image, index = fortune.random_image(path, 42, day)
    assert index == fortune.per_day_index(42, 3, day)
    assert image.size == sizes[index]


def test_char_positions_empty():
    assert fortune.char_positions("", 10, 10) == []


def test_char_positions_single_column():
    pos = fortune.char_positions("一二三四五六七八九", 30, 40)
    assert [p[0] for p in pos] == list("一二三四五六七八九")
    assert len({x for _, x, _ in pos}) == 1
    ys = [y for _, _, y in pos]
    assert all(b - a == pytest.approx(40) for a, b in zip(ys, ys[1:]))


def test_char_positions_two_columns():
    text = "一二三四五六七八九十"
    pos = fortune.char_positions(text, 30, 40)
    assert len(pos) == len(text)
    xs = sorted({x for _, x, _ in pos})
    assert len(xs) == 2
    assert xs[1] - xs[0] == pytest.approx(30)


def test_char_positions_many_columns_spacing():
    pos = fortune.char_positions("字" * 20, 25, 40)
    xs = sorted({x for _, x, _ in pos})
    assert len(xs) == fortune.rows_num(20, 9)
    assert all(b - a == pytest.approx(25) for a, b in zip(xs, xs[1:]))


def test_draw_missing_font(tmp_path):
    with pytest.raises(OSError):
        fortune.draw(Image.new("RGB", (20, 20)), "大吉", "好", tmp_path / "none.ttf")