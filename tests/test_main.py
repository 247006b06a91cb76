import json
from datetime import datetime, timezone

import bubo.__main__ as cli
from bubo.cache import write_snapshot
from bubo.models import BuildResult, Feed, Item, Snapshot


def _snapshot():
    item = Item(title="Cached", link="https://example.com/cached", iso_date="2024-03-07T10:00:00Z", timestamp="3/7/2024")
    feed = Feed(title="Example", link="https://example.com/", feed="https://example.com/feed", items=(item,))
    return Snapshot(groups=[("News", [feed])], all_items=[item])


def _result():
    return BuildResult(all_items=[], groups=[], errors=[], generated_at=datetime(2024, 3, 7, tzinfo=timezone.utc))


def _paths(tmp_path):
    return {
        "feeds": tmp_path / "feeds.json",
        "config": tmp_path / "config.json",
        "cache": tmp_path / "cache.json",
        "output": tmp_path / "out" / "build.json",
    }


def _argv(paths, *flags):
    argv = []
    for name, path in paths.items():
        argv += [f"--{name}", str(path)]
    return argv + list(flags)


def test_cached_mode_builds_without_network(tmp_path, monkeypatch):
    paths = _paths(tmp_path)
    write_snapshot(str(paths["cache"]), _snapshot())

    def no_network(*args, **kwargs):
        raise AssertionError("cached mode must not fetch")

    monkeypatch.setattr(cli, "build_live", no_network)
    monkeypatch.setattr(cli, "build_and_cache", no_network)

    assert cli.main(_argv(paths, "--cached")) == 0

    out = json.loads(paths["output"].read_text(encoding="utf-8"))
    assert [it["title"] for it in out["allItems"]] == ["Cached"]
    assert out["groups"][0][0] == "News"
    assert out["errors"] == []
    assert "now" in out


def test_write_wins_over_cached(tmp_path, monkeypatch):
    paths = _paths(tmp_path)
    paths["feeds"].write_text(json.dumps({"News": {"ex": "https://example.com/feed"}}))
    calls = []

    def fake_build_and_cache(registry, cache_path, config):
        calls.append((registry, cache_path))
        return _result()

    def unexpected(*args, **kwargs):
        raise AssertionError("write mode must fetch and cache")

    monkeypatch.setattr(cli, "build_and_cache", fake_build_and_cache)
    monkeypatch.setattr(cli, "build_from_cache", unexpected)
    monkeypatch.setattr(cli, "build_live", unexpected)

    assert cli.main(_argv(paths, "--write", "--cached")) == 0
    assert calls == [({"News": {"ex": "https://example.com/feed"}}, str(paths["cache"]))]
    assert paths["output"].exists()


def test_default_mode_is_live(tmp_path, monkeypatch):
    paths = _paths(tmp_path)
    paths["config"].write_text(json.dumps({"timezone_offset": 3}))
    seen = {}

    def fake_build_live(registry, config):
        seen["config"] = config
        return _result()

    monkeypatch.setattr(cli, "build_live", fake_build_live)

    assert cli.main(_argv(paths)) == 0
    assert seen["config"].timezone_offset == 3


def test_invalid_config_exits_with_error(tmp_path):
    paths = _paths(tmp_path)
    paths["config"].write_text("{broken")
    assert cli.main(_argv(paths, "--cached")) == 1
    assert not paths["output"].exists()
