import json

import pytest
import responses

from botplugins.epidemic import (
    TX_URL,
    Area,
    find_city,
    format_report,
    parse_epidemic,
    query_epidemic,
)


@pytest.fixture
def mocked():
    with responses.RequestsMock() as rsps:
        yield rsps


def _node(name, confirm=0, children=None, wzz_add=None):
    return {
        "name": name,
        "today": {"confirm": confirm, "wzz_add": wzz_add},
        "total": {
            "nowConfirm": confirm * 2,
            "confirm": confirm * 10,
            "dead": 1,
            "heal": confirm * 5,
            "grade": "",
            "wzz": 4,
        },
        "children": children or [],
    }


def _payload():
    city = _node("朝阳", confirm=3, wzz_add=7)
    province = _node("北京", confirm=5, children=[city])
    other = _node("上海", confirm=2)
    root = _node("中国", confirm=9, children=[province, other])
    return {
        "data": {
            "diseaseh5Shelf": {
                "lastUpdateTime": "2022-10-01 10:00:00",
                "areaTree": [root],
            }
        }
    }


def test_from_dict_builds_tree():
    root = Area.from_dict(_payload()["data"]["diseaseh5Shelf"]["areaTree"][0])
    assert [c.name for c in root.children] == ["北京", "上海"]
    assert root.children[0].children[0].today_confirm == 3


def test_find_city_nested_and_root():
    root, _ = parse_epidemic(json.dumps(_payload()))
    assert find_city(root, "朝阳").confirm == 30
    assert find_city(root, "中国") is root
    assert find_city(root, "广州") is None
    assert find_city(None, "朝阳") is None


def test_parse_epidemic_update_time():
    _, update_time = parse_epidemic(json.dumps(_payload()).encode())
    assert update_time == "2022-10-01 10:00:00"


def test_parse_epidemic_empty_tree():
    with pytest.raises(ValueError):
        parse_epidemic({"data": {"diseaseh5Shelf": {"areaTree": []}}})


def test_format_report():
    root, update_time = parse_epidemic(_payload())
    area = find_city(root, "朝阳")
    report = format_report(area, update_time)
    assert report.startswith("【朝阳】疫情数据\n")
    assert "新增人数：3\n" in report
    assert "新增无症状：7\n" in report
    assert report.endswith("更新时间：\n『2022-10-01 10:00:00』")


def test_format_report_missing_wzz_add():
    report = format_report(Area(name="x"), "t")
    assert "新增无症状：<nil>\n" in report


def test_query_epidemic(mocked):
    mocked.add(responses.GET, TX_URL, json=_payload())
    area, update_time = query_epidemic("上海")
    assert area.name == "上海"
    assert update_time == "2022-10-01 10:00:00"


def test_query_epidemic_unknown_city(mocked):
    mocked.add(responses.GET, TX_URL, json=_payload())
    area, _ = query_epidemic("不存在")
    assert area is None


def test_query_epidemic_empty_name():
    with pytest.raises(ValueError):
        query_epidemic("")