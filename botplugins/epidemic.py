"""City epidemic statistics lookup."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import requests

TX_URL = (
    "https://api.inews.qq.com/newsqa/v1/query/inner/publish/modules/list"
    "?modules=statisGradeCityDetail,diseaseh5Shelf"
)


@dataclass
class Area:
    """Epidemic figures of one region and its sub-regions."""

    name: str = ""
    today_confirm: int = 0
    wzz_add: Any = None
    now_confirm: int = 0
    confirm: int = 0
    dead: int = 0
    heal: int = 0
    grade: str = ""
    wzz: int = 0
    children: list[Area] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> Area:
        """Build an area tree from the decoded JSON of one area node."""
        today = data.get("today") or {}
        total = data.get("total") or {}
        return cls(
            name=data.get("name") or "",
            today_confirm=int(today.get("confirm") or 0),
            wzz_add=today.get("wzz_add"),
            now_confirm=int(total.get("nowConfirm") or 0),
            confirm=int(total.get("confirm") or 0),
            dead=int(total.get("dead") or 0),
            heal=int(total.get("heal") or 0),
            grade=total.get("grade") or "",
            wzz=int(total.get("wzz") or 0),
            children=[cls.from_dict(c) for c in data.get("children") or []],
        )


def find_city(area: Area | None, city_name: str) -> Area | None:
    """Find the area called ``city_name`` in the tree rooted at ``area``."""
    if area is None:
        return None
    if area.name == city_name:
        return area
    for child in area.children:
        if child.name == city_name:
            return child
        found = find_city(child, city_name)
        if found is not None:
            return found
    return None


def parse_epidemic(data: bytes | str | dict) -> tuple[Area, str]:
    """Return the root area and the last update time from an API response."""
    if not isinstance(data, dict):
        data = json.loads(data)
    shelf = (data.get("data") or {}).get("diseaseh5Shelf") or {}
    tree = shelf.get("areaTree") or []
    if not tree:
        raise ValueError("response holds no area tree")
    return Area.from_dict(tree[0]), shelf.get("lastUpdateTime") or ""


def query_epidemic(
    city_name: str, session: requests.Session | None = None
) -> tuple[Area | None, str]:
    """Fetch current data and return the city's area (or None) and update time."""
    if not city_name:
        raise ValueError("你还没有输入城市名字呢！")
    response = (session or requests).get(TX_URL, timeout=30)
    response.raise_for_status()
    root, update_time = parse_epidemic(response.content)
    return find_city(root, city_name), update_time


def _show(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_report(area: Area, update_time: str) -> str:
    """Render the chat reply for one city's figures."""
    return (
        f"【{area.name}】疫情数据\n"
        f"新增人数：{area.today_confirm}\n"
        f"现有确诊：{area.now_confirm}\n"
        f"累计确诊：{area.confirm}\n"
        f"治愈人数：{area.heal}\n"
        f"死亡人数：{area.dead}\n"
        f"无症状人数：{area.wzz}\n"
        f"新增无症状：{_show(area.wzz_add)}\n"
        f"更新时间：\n『{update_time}』"
    )