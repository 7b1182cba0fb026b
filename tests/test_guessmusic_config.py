import json

import pytest

from botplugins.guessmusic_config import (
    DEFAULT_PLAYLIST_ID,
    Config,
    DefaultList,
    ListInfo,
    ListRaw,
    OvooaData,
    delete_list,
    get_list,
    load_config,
    save_config,
)


def _library(tmp_path):
    root = tmp_path / "music"
    (root / "alpha").mkdir(parents=True)
    (root / "alpha" / "a - b.mp3").write_bytes(b"x")
    (root / "alpha" / "c - d.mp3").write_bytes(b"x")
    (root / "beta").mkdir()
    (root / "loose.txt").write_text("x")
    config = Config(music_path=str(root) + "/", playlist=[ListRaw("beta", 42), ListRaw("alpha", 0)])
    return config, root


def test_default_config_created_and_saved(tmp_path):
    path = tmp_path / "config.json"
    config = load_config(path, "/bot")
    assert config.music_path == "/bot/data/guessmusic/music/"
    assert config.api and config.local
    assert config.playlist == [ListRaw("FM", 3136952023)]
    stored = json.loads(path.read_text(encoding="utf-8"))
    assert stored["playlist"] == [{"name": "FM", "id": DEFAULT_PLAYLIST_ID}]
    assert stored["musicPath"] == "/bot/data/guessmusic/music/"


def test_existing_config_loaded(tmp_path):
    path = tmp_path / "config.json"
    config = Config(music_path="/m/", local=False, api=True,
                    playlist=[ListRaw("x", 7)], defaultlist=[DefaultList(5, "x")])
    save_config(config, path)
    assert load_config(path, "/other") == config


def test_dict_round_trip_and_keys():
    config = Config(music_path="/m/", local=True, cookie="token",
                    playlist=[ListRaw("a", 1)], defaultlist=[DefaultList(9, "a")])
    data = config.to_dict()
    assert set(data) == {"musicPath", "local", "api", "cookie", "playlist", "defaultlist"}
    assert data["defaultlist"] == [{"gid": 9, "name": "a"}]
    assert Config.from_dict(data) == config


def test_from_dict_handles_nulls():
    config = Config.from_dict({"musicPath": "/m/", "playlist": None, "defaultlist": None})
    assert config.playlist == [] and config.defaultlist == []


def test_default_list_for_returns_first_match():
    config = Config(defaultlist=[DefaultList(1, "a"), DefaultList(2, "b"), DefaultList(2, "c")])
    assert config.default_list_for(2) == "b"
    assert config.default_list_for(3) is None


def test_bind_and_unbind():
    config = Config()
    config.bind_playlist("a", "15")
    config.bind_playlist("b", 3)
    config.bind_playlist("a", 4)
    assert config.playlist[0] == ListRaw("a", 15)
    config.unbind_playlist("a")
    assert config.playlist == [ListRaw("b", 3)]


def test_ovooa_from_dict():
    data = OvooaData.from_dict({"code": 1, "text": "ok",
                                "data": {"song": "s", "singer": "p", "Music": "u", "id": 33}})
    assert data.code == 1
    assert (data.song, data.singer, data.music, data.id) == ("s", "p", "u", 33)
    assert OvooaData.from_dict({"code": -1, "text": "bad"}).id == 0


def test_get_list_counts_and_binds(tmp_path):
    config, _ = _library(tmp_path)
    lists = get_list(config)
    assert lists == [ListInfo("alpha", 2, 0), ListInfo("beta", 0, 42)]


def test_get_list_empty_library_raises(tmp_path):
    config = Config(music_path=str(tmp_path / "empty") + "/")
    with pytest.raises(LookupError):
        get_list(config)
    assert (tmp_path / "empty").is_dir()


def test_delete_by_name_removes_folder(tmp_path):
    config, root = _library(tmp_path)
    remaining = delete_list(config, "beta")
    assert not (root / "beta").exists()
    assert [info.name for info in remaining] == ["alpha"]
    assert all(p.name != "beta" for p in config.playlist)


def test_delete_by_id_only_unbinds(tmp_path):
    config, root = _library(tmp_path)
    remaining = delete_list(config, "42")
    assert (root / "beta").is_dir()
    assert ListInfo("beta", 0, 0) in remaining


def test_delete_unknown_raises(tmp_path):
    config, _ = _library(tmp_path)
    with pytest.raises(LookupError):
        delete_list(config, "gamma")
    assert len(config.playlist) == 2