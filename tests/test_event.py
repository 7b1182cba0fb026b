from datetime import datetime

import pytest

from botplugins.event import (
    EventSettings,
    RequestKind,
    decode_flag,
    encode_flag,
    format_friend_request,
    format_group_invite,
    parse_decision,
    parse_toggle,
    should_auto_accept,
)


def test_bits_set_and_clear():
    s = EventSettings()
    s.set_apply(True)
    s.set_invite(True)
    assert s.is_apply_on() and s.is_invite_on() and not s.is_master_off()
    s.set_invite(False)
    assert s.is_apply_on() and not s.is_invite_on()


def test_clear_masks_like_source():
    s = EventSettings(0b1111)
    s.set_apply(False)
    assert s.value == 0b110


def test_apply_toggle_reply_and_state():
    s = EventSettings()
    assert s.apply_toggle("开启", "申请") == "已设置自动同意申请为开启"
    assert s.is_apply_on()
    s.apply_toggle("关闭", "主人")
    assert s.is_master_off()
    s.apply_toggle("开启", "主人")
    assert not s.is_master_off()


def test_apply_toggle_unknown_target():
    with pytest.raises(ValueError):
        EventSettings().apply_toggle("开启", "别的")


@pytest.mark.parametrize("flag", ["0", "1", "123456789", str((1 << 56) - 1)])
def test_flag_round_trip(flag):
    encoded = encode_flag(flag)
    assert len(encoded) == 4
    assert decode_flag(encoded) == flag


def test_zero_flag_encoding():
    assert encode_flag("0") == "一一一一"


def test_encode_flag_invalid():
    with pytest.raises(ValueError):
        encode_flag("abc")
    with pytest.raises(ValueError):
        encode_flag(str(1 << 64))


def test_parse_decision():
    text = "同意申请 " + encode_flag("987654321") + " welcome"
    decision = parse_decision(text)
    assert decision.approve is True
    assert decision.kind is RequestKind.FRIEND
    assert decision.flag == "987654321"
    assert decision.reason == "welcome"
    assert decision.reply == "已同意申请"


def test_parse_decision_reject_invite():
    decision = parse_decision("拒绝邀请" + encode_flag("42"))
    assert decision.approve is False
    assert decision.kind is RequestKind.INVITE
    assert decision.reason == ""


def test_parse_decision_no_match():
    assert parse_decision("同意申请 abc") is None


def test_parse_toggle():
    assert parse_toggle("关闭自动同意邀请") == ("关闭", "邀请")
    assert parse_toggle("关闭自动同意邀请啊") is None


def test_should_auto_accept():
    s = EventSettings()
    assert should_auto_accept(s, "申请", True)
    assert not should_auto_accept(s, RequestKind.FRIEND, False)
    s.set_invite(True)
    assert should_auto_accept(s, RequestKind.INVITE, False)
    s.set_master(True)
    assert not should_auto_accept(s, RequestKind.FRIEND, True)


def test_format_friend_request():
    when = datetime(2022, 10, 1, 8, 30, 0)
    pending = format_friend_request(when, "bob", 10001, "hi", "XXXX", False)
    assert len(pending) == 2
    assert pending[1] == "XXXX"
    assert pending[0].startswith("在2022-10-01 08:30:00收到来自\n用户:[bob](10001)")
    assert pending[0].endswith("\n同意/拒绝申请，来决定同意还是拒绝")
    accepted = format_friend_request(when, "bob", 10001, "hi", "XXXX", True)
    assert len(accepted) == 1
    assert accepted[0].endswith("\n的好友请求:hi\nflag:XXXX")


def test_format_group_invite():
    when = datetime(2022, 10, 1, 8, 30, 0)
    accepted = format_group_invite(when, "bob", 10001, "grp", 20002, "XXXX", True)
    assert accepted[0].startswith("已自动同意在")
    assert "\n群聊:[grp](20002)\nflag:XXXX" in accepted[0]
    pending = format_group_invite(when, "bob", 10001, "grp", 20002, "XXXX", False)
    assert pending[0].endswith("\n同意/拒绝邀请，来决定同意还是拒绝")