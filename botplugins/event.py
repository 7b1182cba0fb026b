"""Friend request and group invitation handling."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

_APPLY = 0b001
_INVITE = 0b010
_MASTER = 0b100

_B14_BASE = 0x4E00
_B14_TAIL = 0x3D00
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1

_DECISION_RE = re.compile(r"^(同意|拒绝)(申请|邀请)\s*([一-踀]{4})\s*(.*)$")
_TOGGLE_RE = re.compile(r"^(开启|关闭)自动同意(申请|邀请|主人)$")
_INT_RE = re.compile(r"[+-]?[0-9]+")


class RequestKind(str, Enum):
    """The two kinds of incoming requests."""

    FRIEND = "申请"
    INVITE = "邀请"


@dataclass
class EventSettings:
    """Auto-accept switches packed into one integer."""

    value: int = 0

    def set_apply(self, on: bool) -> None:
        self.value = self.value | _APPLY if on else self.value & 0b110

    def set_invite(self, on: bool) -> None:
        self.value = self.value | _INVITE if on else self.value & 0b101

    def set_master(self, on: bool) -> None:
        self.value = self.value | _MASTER if on else self.value & 0b011

    def is_apply_on(self) -> bool:
        return self.value & _APPLY > 0

    def is_invite_on(self) -> bool:
        return self.value & _INVITE > 0

    def is_master_off(self) -> bool:
        return self.value & _MASTER > 0

    def apply_toggle(self, option: str, target: str) -> str:
        """Apply an "开启/关闭" command to a target and return the reply."""
        if target == "申请":
            self.set_apply(option == "开启")
        elif target == "邀请":
            self.set_invite(option == "开启")
        elif target == "主人":
            self.set_master(option == "关闭")
        else:
            raise ValueError(f"unknown target: {target}")
        return "已设置自动同意" + target + "为" + option


def _b14_encode(data: bytes) -> str:
    out = []
    for start in range(0, len(data), 7):
        chunk = data[start:start + 7]
        size = len(chunk)
        value = int.from_bytes(chunk.ljust(7, b"\0"), "big")
        count = 4 if size == 7 else -(-size * 8 // 14)
        out.extend(
            chr(_B14_BASE + ((value >> shift) & 0x3FFF))
            for shift in (42, 28, 14, 0)[:count]
        )
        if size < 7:
            out.append(chr(_B14_TAIL + size))
    return "".join(out)


def _b14_decode(text: str) -> bytes:
    tail = 0
    if text and 0 < ord(text[-1]) - _B14_TAIL < 7:
        tail = ord(text[-1]) - _B14_TAIL
        text = text[:-1]
    out = bytearray()
    for start in range(0, len(text), 4):
        value = 0
        for pos, ch in enumerate(text[start:start + 4]):
            digit = ord(ch) - _B14_BASE
            if not 0 <= digit < 0x4000:
                raise ValueError(f"invalid character: {ch!r}")
            value |= digit << (42 - 14 * pos)
        out += value.to_bytes(7, "big")
    if tail:
        del out[len(out) - 7 + tail:]
    return bytes(out)


def encode_flag(flag: str) -> str:
    """Encode a numeric request flag into four compact characters."""
    if not _INT_RE.fullmatch(flag):
        raise ValueError(f"invalid flag: {flag!r}")
    value = int(flag)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"flag out of range: {flag!r}")
    raw = (value & 0xFFFFFFFFFFFFFFFF).to_bytes(8, "big")
    return _b14_encode(raw[1:])


def decode_flag(text: str) -> str:
    """Turn the encoded characters back into the numeric flag."""
    raw = b"\0" + _b14_decode(text)[:7].ljust(7, b"\0")
    return str(int.from_bytes(raw, "big", signed=True))


@dataclass(frozen=True)
class Decision:
    """A master's answer to a pending request."""

    approve: bool
    kind: RequestKind
    flag: str
    reason: str

    @property
    def reply(self) -> str:
        return "已" + ("同意" if self.approve else "拒绝") + self.kind.value


def parse_decision(text: str) -> Decision | None:
    """Parse "同意/拒绝 申请/邀请 <flag> [reason]"; None if it does not match."""
    match = _DECISION_RE.match(text)
    if match is None:
        return None
    cmd, kind, encoded, reason = match.groups()
    return Decision(cmd == "同意", RequestKind(kind), decode_flag(encoded), reason)


def parse_toggle(text: str) -> tuple[str, str] | None:
    """Parse "开启/关闭自动同意X" into (option, target); None if no match."""
    match = _TOGGLE_RE.match(text)
    return None if match is None else (match.group(1), match.group(2))


def should_auto_accept(
    settings: EventSettings, kind: RequestKind | str, from_superuser: bool
) -> bool:
    """Tell whether a request is accepted without asking the master."""
    kind = RequestKind(kind)
    enabled = settings.is_apply_on() if kind is RequestKind.FRIEND else settings.is_invite_on()
    return enabled or (not settings.is_master_off() and from_superuser)


def _format_time(when: datetime | int | float) -> str:
    if not isinstance(when, datetime):
        when = datetime.fromtimestamp(when)
    return when.strftime("%Y-%m-%d %H:%M:%S")


def format_friend_request(
    when, username: str, user_id: int, comment: str, encoded: str, accepted: bool
) -> list[str]:
    """Return the forward-message nodes reporting a friend request."""
    user = "\n用户:[" + username + "](" + str(user_id) + ")"
    if accepted:
        return [
            "已自动同意在" + _format_time(when) + "收到来自" + user
            + "\n的好友请求:" + comment + "\nflag:" + encoded
        ]
    return [
        "在" + _format_time(when) + "收到来自" + user
        + "\n的好友请求:" + comment
        + "\n请在下方复制flag并在前面加上:"
        + "\n同意/拒绝申请，来决定同意还是拒绝",
        encoded,
    ]


def format_group_invite(
    when,
    username: str,
    user_id: int,
    group_name: str,
    group_id: int,
    encoded: str,
    accepted: bool,
) -> list[str]:
    """Return the forward-message nodes reporting a group invitation."""
    body = (
        "\n用户:[" + username + "](" + str(user_id) + ")的群聊邀请"
        + "\n群聊:[" + group_name + "](" + str(group_id) + ")"
    )
    if accepted:
        return ["已自动同意在" + _format_time(when) + "收到来自" + body + "\nflag:" + encoded]
    return [
        "在" + _format_time(when) + "收到来自" + body
        + "\n请在下方复制flag并在前面加上:"
        + "\n同意/拒绝邀请，来决定同意还是拒绝",
        encoded,
    ]